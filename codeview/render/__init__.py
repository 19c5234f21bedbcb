"""
Render module for CodeView.

This module defines the RenderAdapter interface, the node and link
palettes, and the bundled SVG and recording adapters.
"""

from codeview.render.adapter import (
    DrawnLink,
    Frame,
    RecordingRenderAdapter,
    RenderAdapter,
    build_frame,
)
from codeview.render.palette import LINK_STYLES, NODE_COLORS, LinkStyle, link_style, node_color
from codeview.render.svg import SvgRenderAdapter

__all__ = [
    "DrawnLink",
    "Frame",
    "LINK_STYLES",
    "LinkStyle",
    "NODE_COLORS",
    "RecordingRenderAdapter",
    "RenderAdapter",
    "SvgRenderAdapter",
    "build_frame",
    "link_style",
    "node_color",
]
