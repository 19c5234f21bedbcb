"""
Visualization session for CodeView

A GraphSession owns everything one loaded document needs: the data
model, the layout engine, the viewport, the interaction state, and the
detail panel. It is built once per successful load and discarded
wholesale on reload; nothing is replaced piecemeal.

GraphViewer is the host: it resolves the document location, loads it,
and either builds a session or replaces the surface with an error.

Event model:
    Single-threaded and cooperative. Layout ticks, commands, and viewport
    animation frames interleave on one asyncio event loop, never in
    parallel. Each layout tick and each viewport change triggers a redraw.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

import httpx

from codeview import config
from codeview.config import ViewerConfig
from codeview.detail import DetailPanelController
from codeview.errors import FetchError, ParseError
from codeview.graph import GraphModel
from codeview.interaction import Command, InteractionController, InteractionState
from codeview.layout import LayoutEngine
from codeview.loader import load_document
from codeview.models import Node, Point
from codeview.render import RenderAdapter
from codeview.viewport import ViewportController

logger = logging.getLogger(__name__)


def _log_frame_loop_failure(task: asyncio.Task) -> None:
    """Report an exception raised inside a scheduled frame loop."""
    if not task.cancelled() and task.exception() is not None:
        logger.error("Frame loop stopped: %s", task.exception(), exc_info=task.exception())


class GraphSession:
    """
    One interactive view of a loaded graph.

    Attributes:
        model: The loaded GraphModel
        layout: The force simulation over model's nodes
        viewport: The shared pan/zoom transform
        panel: The detail panel
        controller: The interaction state machine
    """

    def __init__(
        self,
        model: GraphModel,
        render_adapter: RenderAdapter,
        viewer_config: Optional[ViewerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        viewer_config = viewer_config or ViewerConfig()
        self.model = model
        self.nodes = model.nodes
        self.links = model.links
        self.render_adapter = render_adapter
        self.layout = LayoutEngine(
            self.nodes,
            self.links,
            width=viewer_config.width,
            height=viewer_config.height,
            seed=viewer_config.seed,
        )
        self.viewport = ViewportController(viewer_config.width, viewer_config.height, clock=clock)
        self.panel = DetailPanelController(model)
        self.controller = InteractionController(
            model, self.layout, self.viewport, self.panel, redraw=self.redraw
        )
        self._task: Optional[asyncio.Task] = None

        self.layout.on_tick(self.redraw)
        self.viewport.on_change(lambda _: self.redraw())

    @property
    def state(self) -> InteractionState:
        return self.controller.state

    @property
    def idle(self) -> bool:
        """True when neither the layout nor a viewport animation is active."""
        return not self.layout.running and not self.viewport.animating

    def redraw(self) -> None:
        """Push the current state to the render adapter."""
        state = self.controller.state
        self.render_adapter.sync(
            self.nodes,
            self.links,
            self.viewport.transform,
            state.active_filter,
            state.labels_visible,
        )

    def dispatch(self, command: Command) -> InteractionState:
        """Apply a command and make sure the animation loop is running."""
        state = self.controller.dispatch(command)
        self.ensure_running()
        return state

    def ensure_running(self) -> None:
        """Schedule the frame loop if an event loop is active and it is not running."""
        if self.idle or (self._task is not None and not self._task.done()):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._task = loop.create_task(self.run())
        self._task.add_done_callback(_log_frame_loop_failure)

    async def run(self, interval: float = config.TICK_INTERVAL) -> None:
        """Drive layout ticks and viewport frames until both are idle."""
        while not self.idle:
            if self.layout.running:
                self.layout.step()
            if self.viewport.animating:
                self.viewport.advance()
            await asyncio.sleep(interval)
        # Commit the final frame of a finished transition
        self.viewport.advance()

    def screen_to_scene(self, point: Point) -> Point:
        """Convert a pointer position to scene coordinates."""
        return self.viewport.transform.invert(point)

    def node_at_screen(self, point: Point) -> Optional[Node]:
        """Find the node under a pointer position."""
        return self.layout.node_at(self.screen_to_scene(point))


class GraphViewer:
    """
    Host for one visualization surface.

    Usage:
        viewer = GraphViewer(SvgRenderAdapter())
        session = await viewer.load("code_graph.json")
        if session is None:
            print(viewer.error)
    """

    def __init__(
        self,
        render_adapter: RenderAdapter,
        viewer_config: Optional[ViewerConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.render_adapter = render_adapter
        self.config = viewer_config or ViewerConfig.from_env()
        self.session: Optional[GraphSession] = None
        self.error: Optional[str] = None
        self._transport = transport
        self._clock = clock

    async def load(self, location: Optional[str] = None) -> Optional[GraphSession]:
        """
        Load a document and build a fresh session.

        Any previous session is discarded first. A fetch or parse failure
        leaves the viewer without a session and shows the error instead.

        Args:
            location: Document path or URL (default: the configured document)

        Returns:
            The new session, or None if loading failed
        """
        location = location or self.config.document
        self.session = None
        self.error = None
        try:
            model = await load_document(location, transport=self._transport)
        except (FetchError, ParseError) as e:
            logger.error("Could not load graph: %s", e)
            self.error = str(e)
            self.render_adapter.show_error(f"Error loading graph data: {e}")
            return None

        self.session = GraphSession(model, self.render_adapter, self.config, clock=self._clock)
        self.session.redraw()
        return self.session
