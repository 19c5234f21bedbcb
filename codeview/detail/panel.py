"""
Detail Panel for CodeView

Renders the attributes, source, and relationships of the selected node
as an HTML fragment.

Relationships:
    Every link touching the node is listed as Outgoing (node is the source)
    or Incoming (node is the target). A link whose other endpoint cannot be
    resolved is omitted; one bad record never breaks the panel.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from codeview.graph import GraphModel
from codeview.models import LinkType, Node, NodeType

logger = logging.getLogger(__name__)

OUTGOING = "Outgoing"
INCOMING = "Incoming"

# Ampersand must come first so the other entities are not double-escaped
HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(text: str) -> str:
    """Escape HTML special characters."""
    for char, entity in HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


@dataclass(frozen=True)
class Relationship:
    """One entry of the relationship list."""

    direction: str
    link_type: LinkType
    other_id: str
    other_name: str
    other_type: NodeType


@dataclass
class NodeDetail:
    """Everything the panel shows for one node."""

    node_id: str
    name: str
    type: NodeType
    file_path: str
    line_range: str
    content: str
    summary: Optional[str] = None
    metadata: list[tuple[str, str]] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)

    @property
    def escaped_content(self) -> str:
        return escape_html(self.content)

    def outgoing(self) -> list[Relationship]:
        return [r for r in self.relationships if r.direction == OUTGOING]

    def incoming(self) -> list[Relationship]:
        return [r for r in self.relationships if r.direction == INCOMING]


class DetailPanelController:
    """
    Shows one selected node at a time.

    Usage:
        panel = DetailPanelController(model)
        panel.show(model.get_node("mod::main"))
        print(panel.html)
        panel.hide()
    """

    def __init__(self, model: GraphModel) -> None:
        self._model = model
        self.detail: Optional[NodeDetail] = None
        self.html: str = ""

    @property
    def visible(self) -> bool:
        return self.detail is not None

    def show(self, node: Node) -> NodeDetail:
        """Replace the panel content with the given node."""
        self.detail = self.describe(node)
        self.html = render_html(self.detail)
        return self.detail

    def hide(self) -> None:
        """Clear and hide the panel."""
        self.detail = None
        self.html = ""

    def describe(self, node: Node) -> NodeDetail:
        """Collect the panel contents for a node without showing it."""
        return NodeDetail(
            node_id=node.id,
            name=node.name,
            type=node.type,
            file_path=node.file_path,
            line_range=str(node.line_range),
            content=node.content,
            summary=node.summary or None,
            metadata=sorted(node.metadata.items()),
            relationships=self._relationships(node.id),
        )

    def _relationships(self, node_id: str) -> list[Relationship]:
        entries = []
        for link in self._model.links:
            if link.source == node_id:
                entries.append((OUTGOING, link.type, link.target))
            if link.target == node_id:
                entries.append((INCOMING, link.type, link.source))

        relationships = []
        for direction, link_type, other_id in entries:
            other = self._model.get_node(other_id)
            if other is None:
                logger.debug("Omitting %s link to unknown node %r", direction, other_id)
                continue
            relationships.append(
                Relationship(direction, link_type, other.id, other.name, other.type)
            )
        return relationships


def render_html(detail: NodeDetail) -> str:
    """Render a NodeDetail as an HTML fragment."""
    parts = [
        '<div class="node-details">',
        f"<h2>{escape_html(detail.name)}</h2>",
        f"<p><strong>Type:</strong> {escape_html(detail.type.value)}</p>",
        f"<p><strong>File:</strong> {escape_html(detail.file_path)}</p>",
        f"<p><strong>Lines:</strong> {escape_html(detail.line_range)}</p>",
    ]
    if detail.summary:
        parts.append(f"<p><strong>Summary:</strong> {escape_html(detail.summary)}</p>")
    if detail.metadata:
        parts.append("<h3>Metadata</h3>")
        parts.append("<ul>")
        for key, value in detail.metadata:
            parts.append(f"<li><strong>{escape_html(key)}:</strong> {escape_html(value)}</li>")
        parts.append("</ul>")
    parts.append("<h3>Content</h3>")
    parts.append(f"<pre><code>{detail.escaped_content}</code></pre>")

    parts.append("<h3>Relationships</h3>")
    if detail.relationships:
        parts.append("<ul>")
        for rel in detail.relationships:
            arrow = "&rarr;" if rel.direction == OUTGOING else "&larr;"
            parts.append(
                f'<li class="{rel.direction.lower()}">{rel.direction} {arrow} '
                f"{escape_html(rel.link_type.value)}: {escape_html(rel.other_name)} "
                f"({escape_html(rel.other_type.value)})</li>"
            )
        parts.append("</ul>")
    else:
        parts.append("<p>No relationships.</p>")
    parts.append("</div>")
    return "\n".join(parts)
