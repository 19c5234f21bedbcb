"""
Render adapter interface for CodeView.

Layout and interaction logic depend only on RenderAdapter, so the same
session can draw to an SVG document, a recording for tests, or any other
surface.
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from codeview.filters import FilterState
from codeview.models import Link, Node, Point
from codeview.viewport import Transform


class RenderAdapter(Protocol):
    """A drawing surface for the graph."""

    def sync(
        self,
        nodes: Sequence[Node],
        links: Sequence[Link],
        transform: Transform,
        filter_state: FilterState,
        labels_visible: bool,
    ) -> None:
        """Redraw the scene from the current state. Must not mutate the model."""
        ...

    def show_error(self, message: str) -> None:
        """Replace the whole surface with a single error message."""
        ...


@dataclass(frozen=True)
class DrawnLink:
    source: str
    target: str
    start: Point
    end: Point


@dataclass
class Frame:
    """
    What one sync() call drew, in scene coordinates.

    Attributes:
        positions: Visible node ids mapped to their positions
        links: Visible links with endpoint positions
        transform: The shared viewport transform
        labels_visible: Whether node labels were drawn
    """

    positions: dict[str, Point] = field(default_factory=dict)
    links: list[DrawnLink] = field(default_factory=list)
    transform: Transform = Transform.identity
    labels_visible: bool = True


def build_frame(
    nodes: Sequence[Node],
    links: Sequence[Link],
    transform: Transform,
    filter_state: FilterState,
    labels_visible: bool,
) -> Frame:
    """Resolve visibility and positions for one redraw."""
    by_id = {node.id: node for node in nodes}
    frame = Frame(transform=transform, labels_visible=labels_visible)
    for node in nodes:
        if filter_state.node_visible(node):
            frame.positions[node.id] = node.position
    for link in links:
        if not filter_state.link_visible(link, by_id):
            continue
        source, target = by_id.get(link.source), by_id.get(link.target)
        if source is None or target is None:
            continue
        frame.links.append(DrawnLink(link.source, link.target, source.position, target.position))
    return frame


class RecordingRenderAdapter:
    """Keeps every frame it is asked to draw."""

    def __init__(self) -> None:
        self.frames: list[Frame] = []
        self.error: Optional[str] = None

    @property
    def last(self) -> Optional[Frame]:
        return self.frames[-1] if self.frames else None

    def sync(self, nodes, links, transform, filter_state, labels_visible) -> None:
        self.frames.append(build_frame(nodes, links, transform, filter_state, labels_visible))

    def show_error(self, message: str) -> None:
        self.frames.clear()
        self.error = message
