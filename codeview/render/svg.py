"""
SVG rendering for CodeView.

Draws the scene as a standalone SVG document. Every node and link sits in
one group carrying the viewport transform, so pan and zoom always move the
whole scene together.
"""

import html
import logging
from pathlib import Path
from typing import Optional, Sequence

from codeview import config
from codeview.filters import FilterState
from codeview.models import Link, Node
from codeview.render.palette import link_style, node_color
from codeview.viewport import Transform

logger = logging.getLogger(__name__)


class SvgRenderAdapter:
    """
    Render adapter producing SVG markup.

    Attributes:
        width: Surface width in pixels
        height: Surface height in pixels
        markup: The most recently drawn document
    """

    def __init__(
        self,
        width: int = config.DEFAULT_WIDTH,
        height: int = config.DEFAULT_HEIGHT,
        node_radius: float = config.NODE_RADIUS,
    ) -> None:
        self.width = width
        self.height = height
        self.node_radius = node_radius
        self.markup: Optional[str] = None
        self.error: Optional[str] = None

    def sync(
        self,
        nodes: Sequence[Node],
        links: Sequence[Link],
        transform: Transform,
        filter_state: FilterState,
        labels_visible: bool,
    ) -> None:
        by_id = {node.id: node for node in nodes}
        parts = [self._open_svg()]
        parts.append(
            f'<g class="scene" transform="translate({transform.x:.2f},{transform.y:.2f}) '
            f'scale({transform.k:.4f})">'
        )

        parts.append('<g class="links">')
        for link in links:
            if not filter_state.link_visible(link, by_id):
                continue
            source, target = by_id.get(link.source), by_id.get(link.target)
            if source is None or target is None:
                continue
            style = link_style(link.type)
            parts.append(
                f'<line x1="{source.x:.2f}" y1="{source.y:.2f}" '
                f'x2="{target.x:.2f}" y2="{target.y:.2f}" '
                f'stroke="{style.color}" stroke-width="{style.width:g}" '
                f'data-type="{link.type.value}"/>'
            )
        parts.append("</g>")

        parts.append('<g class="nodes">')
        for node in nodes:
            if not filter_state.node_visible(node):
                continue
            node_id = html.escape(node.id)
            parts.append(
                f'<g class="node" data-id="{node_id}" data-type="{node.type.value}">'
                f'<circle cx="{node.x:.2f}" cy="{node.y:.2f}" r="{self.node_radius:g}" '
                f'fill="{node_color(node.type)}"/>'
            )
            if labels_visible:
                parts.append(
                    f'<text x="{node.x + self.node_radius + 2:.2f}" y="{node.y + 4:.2f}">'
                    f"{html.escape(node.name)}</text>"
                )
            parts.append("</g>")
        parts.append("</g>")

        parts.append("</g></svg>")
        self.markup = "\n".join(parts)
        self.error = None

    def show_error(self, message: str) -> None:
        self.error = message
        self.markup = "\n".join(
            [
                self._open_svg(),
                f'<text class="error" x="{self.width / 2:g}" y="{self.height / 2:g}" '
                f'text-anchor="middle" fill="#d62728">{html.escape(message)}</text>',
                "</svg>",
            ]
        )

    def save(self, path: Path | str) -> Path:
        """
        Write the last drawn document to a file.

        Raises:
            RuntimeError: If nothing has been drawn yet
        """
        if self.markup is None:
            raise RuntimeError("Nothing has been rendered yet")
        path = Path(path)
        path.write_text(self.markup, encoding="utf-8")
        logger.info("Wrote %s", path)
        return path

    def _open_svg(self) -> str:
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width}" '
            f'height="{self.height}" viewBox="0 0 {self.width} {self.height}">'
        )
