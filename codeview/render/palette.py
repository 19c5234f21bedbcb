"""Color and stroke tables for node and link types."""

from typing import NamedTuple

from codeview.models import LinkType, NodeType


class LinkStyle(NamedTuple):
    color: str
    width: float


NODE_COLORS: dict[NodeType, str] = {
    NodeType.FUNCTION: "#ff7f0e",
    NodeType.METHOD: "#ff7f0e",
    NodeType.CLASS: "#2ca02c",
    NodeType.INTERFACE: "#d62728",
    NodeType.MODULE: "#9467bd",
    NodeType.VARIABLE: "#8c564b",
    NodeType.CONSTANT: "#e377c2",
    NodeType.TYPE_DEFINITION: "#7f7f7f",
    NodeType.UNKNOWN: "#1f77b4",
}

LINK_STYLES: dict[LinkType, LinkStyle] = {
    LinkType.CALLS: LinkStyle("#ff0000", 2),
    LinkType.IMPORTS: LinkStyle("#00ff00", 3),
    LinkType.INHERITS: LinkStyle("#0000ff", 2.5),
    LinkType.REFERENCES: LinkStyle("#999999", 1),
    LinkType.IMPLEMENTS: LinkStyle("#9932cc", 1),
    LinkType.CONTAINS: LinkStyle("#ffa500", 1),
    LinkType.DEPENDS_ON: LinkStyle("#8b4513", 1),
    LinkType.UNKNOWN: LinkStyle("#999999", 1),
}


def node_color(node_type: NodeType) -> str:
    """Marker fill for a node type."""
    return NODE_COLORS.get(node_type, NODE_COLORS[NodeType.UNKNOWN])


def link_style(link_type: LinkType) -> LinkStyle:
    """Stroke color and width for a link type."""
    return LINK_STYLES.get(link_type, LINK_STYLES[LinkType.UNKNOWN])
