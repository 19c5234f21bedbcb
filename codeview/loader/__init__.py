"""
Loader module for CodeView.

This module fetches graph documents from disk or over HTTP and parses
them into the in-memory graph model.
"""

from codeview.loader.loader import (
    fetch_document,
    load_document,
    parse_document,
    parse_link,
    parse_node,
)

__all__ = [
    "fetch_document",
    "load_document",
    "parse_document",
    "parse_link",
    "parse_node",
]
