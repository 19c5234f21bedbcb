"""
Interaction Controller for CodeView

A state machine turning commands into changes on the model, the layout,
the viewport, and the detail panel.

State:
    active_filter: "all" or a NodeType (initially "all")
    labels_visible: whether node labels are drawn (initially True)
    selected_node_id: node shown in the detail panel (initially None)
    drag_state: the node held by a drag, if any

Drag protocol:
    DragStart  pins the node at its current position and keeps the layout
               active (alpha target 0.3, restart if idle)
    DragMove   moves the pin to the pointer
    DragEnd    moves the pin to the release point, hands the node back to
               the layout at exactly that point, clears the pin, and lets
               the layout settle (alpha target 0)

The controller is the only writer of fx, fy.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from codeview import config
from codeview.detail import DetailPanelController
from codeview.filters import FilterState
from codeview.graph import GraphModel
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
from codeview.layout import LayoutEngine
from codeview.models import Node, Point
from codeview.viewport import ViewportController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DragState:
    node_id: str


@dataclass(frozen=True)
class InteractionState:
    """Snapshot of the interaction state machine."""

    active_filter: FilterState = field(default_factory=FilterState)
    labels_visible: bool = True
    selected_node_id: Optional[str] = None
    drag_state: Optional[DragState] = None


class InteractionController:
    """
    Mediates commands into state changes.

    Attributes:
        state: The current InteractionState

    Usage:
        controller = InteractionController(model, layout, viewport, panel, redraw)
        controller.dispatch(SetFilter("Class"))
        controller.dispatch(Select("mod::Widget"))
    """

    def __init__(
        self,
        model: GraphModel,
        layout: LayoutEngine,
        viewport: ViewportController,
        panel: DetailPanelController,
        redraw: Optional[Callable[[], None]] = None,
    ) -> None:
        self._model = model
        self._layout = layout
        self._viewport = viewport
        self._panel = panel
        self._redraw = redraw or (lambda: None)
        self.state = InteractionState()
        self._handlers = {
            Select: self._select,
            CloseDetail: self._close_detail,
            SetFilter: self._set_filter,
            ToggleLabels: self._toggle_labels,
            DragStart: self._drag_start,
            DragMove: self._drag_move,
            DragEnd: self._drag_end,
            ZoomIn: lambda _: self._viewport.zoom_in(),
            ZoomOut: lambda _: self._viewport.zoom_out(),
            ResetView: lambda _: self._viewport.reset_view(),
            Gesture: lambda command: self._viewport.apply_gesture(command.transform),
            Resize: self._resize,
        }

    def dispatch(self, command: Command) -> InteractionState:
        """
        Apply one command.

        Args:
            command: Any command from codeview.interaction.commands

        Returns:
            The state after the command

        Raises:
            TypeError: If the command type is not recognized
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported command: {command!r}")
        handler(command)
        return self.state

    # Selection

    def _select(self, command: Select) -> None:
        node = self._model.get_node(command.node_id)
        if node is None:
            logger.warning("Cannot select unknown node %r", command.node_id)
            return
        self.state = replace(self.state, selected_node_id=node.id)
        self._panel.show(node)

    def _close_detail(self, command: CloseDetail) -> None:
        self.state = replace(self.state, selected_node_id=None)
        self._panel.hide()

    # Rendering toggles

    def _set_filter(self, command: SetFilter) -> None:
        active = FilterState.parse(command.type)
        logger.debug("Filter set to %s", active)
        self.state = replace(self.state, active_filter=active)
        self._redraw()

    def _toggle_labels(self, command: ToggleLabels) -> None:
        self.state = replace(self.state, labels_visible=not self.state.labels_visible)
        self._redraw()

    # Dragging

    def _drag_start(self, command: DragStart) -> None:
        node = self._model.get_node(command.node_id)
        if node is None:
            logger.debug("Ignoring drag on unknown node %r", command.node_id)
            return
        if self.state.drag_state is not None:
            self._unpin(self.state.drag_state.node_id)
        self.state = replace(self.state, drag_state=DragState(node.id))
        node.fx, node.fy = node.position
        self._layout.set_alpha_target(config.DRAG_ALPHA_TARGET)
        self._layout.restart()

    def _drag_move(self, command: DragMove) -> None:
        node = self._dragged(command.node_id)
        if node is None:
            return
        self._pin(node, command.point)

    def _drag_end(self, command: DragEnd) -> None:
        node = self._dragged(command.node_id)
        if node is None:
            return
        self._pin(node, command.point)
        self._layout.release(node)
        node.fx = None
        node.fy = None
        self._layout.set_alpha_target(0.0)
        self.state = replace(self.state, drag_state=None)
        self._redraw()

    def _dragged(self, node_id: str) -> Optional[Node]:
        drag = self.state.drag_state
        if drag is None or drag.node_id != node_id:
            logger.debug("Ignoring drag event for %r outside an active drag", node_id)
            return None
        return self._model.get_node(node_id)

    def _pin(self, node: Node, point: Point) -> None:
        node.fx, node.fy = point.x, point.y

    def _unpin(self, node_id: str) -> None:
        node = self._model.get_node(node_id)
        if node is not None:
            self._layout.release(node)
            node.fx = None
            node.fy = None

    # Viewport

    def _resize(self, command: Resize) -> None:
        self._viewport.resize(command.width, command.height)
        self._layout.resize(command.width, command.height)
