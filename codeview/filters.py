"""
Type filter for CodeView.

Filtering is purely a rendering-visibility concern. It never removes
nodes or links from the layout's working set, so the physics keep
accounting for hidden elements.
"""

from dataclasses import dataclass
from typing import Mapping, Union

from codeview.models import Link, Node, NodeType

ALL = "all"


@dataclass(frozen=True)
class FilterState:
    """
    The active node-type filter.

    Attributes:
        active: "all", or the NodeType that stays visible
    """

    active: Union[str, NodeType] = ALL

    @classmethod
    def parse(cls, value: Union[str, NodeType, None]) -> "FilterState":
        """Build a filter from a NodeType, a type tag, or "all"."""
        if value is None or value == ALL:
            return cls(ALL)
        return cls(NodeType.parse(value))

    @property
    def shows_all(self) -> bool:
        return self.active == ALL

    def node_visible(self, node: Node) -> bool:
        """A node is visible iff the filter is "all" or matches its type."""
        return self.shows_all or node.type == self.active

    def link_visible(self, link: Link, nodes_by_id: Mapping[str, Node]) -> bool:
        """A link is visible iff both of its endpoints are visible."""
        if self.shows_all:
            return True
        source = nodes_by_id.get(link.source)
        target = nodes_by_id.get(link.target)
        if source is None or target is None:
            return False
        return self.node_visible(source) and self.node_visible(target)

    def __str__(self) -> str:
        return ALL if self.shows_all else self.active.value
