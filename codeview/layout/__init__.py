"""
Layout module for CodeView.

This module provides the force simulation that positions graph nodes,
with Barnes-Hut approximated repulsion.
"""

from codeview.layout.engine import LayoutEngine
from codeview.layout.quadtree import Quad, build_quadtree

__all__ = ["LayoutEngine", "Quad", "build_quadtree"]
