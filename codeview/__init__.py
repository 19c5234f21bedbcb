"""
CodeView

Interactive, force-laid-out viewer for code-entity dependency graphs:
loading, physics layout, viewport, interaction, and node inspection.
"""

from codeview.models import Link, LinkType, Node, NodeType
from codeview.session import GraphSession, GraphViewer

__all__ = ["GraphSession", "GraphViewer", "Link", "LinkType", "Node", "NodeType"]
__version__ = "0.1.0"
