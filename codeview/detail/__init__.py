"""
Detail module for CodeView.

This module renders the selected node's attributes, escaped source,
and relationship list.
"""

from codeview.detail.panel import (
    INCOMING,
    OUTGOING,
    DetailPanelController,
    NodeDetail,
    Relationship,
    escape_html,
    render_html,
)

__all__ = [
    "INCOMING",
    "OUTGOING",
    "DetailPanelController",
    "NodeDetail",
    "Relationship",
    "escape_html",
    "render_html",
]
