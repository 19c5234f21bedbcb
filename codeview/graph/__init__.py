"""
Graph module for CodeView.

This module provides the NetworkX-backed data model holding the nodes and
links of one visualization session.
"""

from codeview.graph.model import GraphModel

__all__ = ["GraphModel"]
