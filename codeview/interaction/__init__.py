"""
Interaction module for CodeView.

This module provides the typed commands and the state machine that turns
them into filter, label, selection, drag, and viewport changes.
"""

from codeview.interaction.commands import (
    CloseDetail,
    Command,
    DragEnd,
    DragMove,
    DragStart,
    Gesture,
    Resize,
    ResetView,
    Select,
    SetFilter,
    ToggleLabels,
    ZoomIn,
    ZoomOut,
)
from codeview.interaction.controller import (
    DragState,
    InteractionController,
    InteractionState,
)

__all__ = [
    "CloseDetail",
    "Command",
    "DragEnd",
    "DragMove",
    "DragStart",
    "DragState",
    "Gesture",
    "InteractionController",
    "InteractionState",
    "Resize",
    "ResetView",
    "Select",
    "SetFilter",
    "ToggleLabels",
    "ZoomIn",
    "ZoomOut",
]
