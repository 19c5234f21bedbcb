"""
Viewport module for CodeView.

This module provides the pan/zoom transform applied uniformly to the
rendered scene.
"""

from codeview.viewport.controller import (
    Transform,
    Transition,
    ViewportController,
    clamp_scale,
)

__all__ = ["Transform", "Transition", "ViewportController", "clamp_scale"]
