"""
Core Data Models for CodeView

This module defines the canonical data structures used throughout the viewer:
- NodeType / LinkType: Closed taxonomies of code entities and relationships
- LineRange: Source span of an entity
- Node: A code entity with its attributes and mutable layout state
- Link: A directed, typed relationship between two nodes
- Point: A position in layout (scene) coordinates

Ownership of the mutable layout fields:
- x, y, vx, vy are written only by the LayoutEngine
- fx, fy are written only by the InteractionController (drag pins)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional


class NodeType(Enum):
    """
    Kind of code entity a node represents.

    Values match the tags written by the graph-construction pipeline.
    Any unrecognized tag maps to UNKNOWN.
    """

    FUNCTION = "Function"
    METHOD = "Method"
    CLASS = "Class"
    INTERFACE = "Interface"
    MODULE = "Module"
    VARIABLE = "Variable"
    CONSTANT = "Constant"
    TYPE_DEFINITION = "TypeDefinition"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, tag: object) -> "NodeType":
        """Map a document tag to a NodeType, falling back to UNKNOWN."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


class LinkType(Enum):
    """Kind of relationship a link represents."""

    CALLS = "Calls"
    IMPORTS = "Imports"
    INHERITS = "Inherits"
    REFERENCES = "References"
    IMPLEMENTS = "Implements"
    CONTAINS = "Contains"
    DEPENDS_ON = "DependsOn"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, tag: object) -> "LinkType":
        """Map a document tag to a LinkType, falling back to UNKNOWN."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


class Point(NamedTuple):
    """A position in scene coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class LineRange:
    """
    Inclusive, 1-indexed span of source lines.

    Invariants:
        - start <= end
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        if self.start > self.end:
            raise ValueError(
                f"start ({self.start}) must be <= end ({self.end})"
            )

    def __str__(self) -> str:
        return f"{self.start}–{self.end}"


@dataclass(eq=False)
class Node:
    """
    A single code entity in the loaded graph.

    Unlike the descriptive attributes, the layout fields are mutated for as
    long as the session lives, so nodes compare by identity.

    Attributes:
        id: Unique identifier within the loaded document
        name: Display name
        type: Entity kind (UNKNOWN for unrecognized tags)
        file_path: Path of the defining source file
        line_range: Source span of the entity
        content: Raw source text
        summary: Optional one-line description
        metadata: Free-form string attributes, possibly empty
        x, y: Current position (LayoutEngine)
        vx, vy: Current velocity (LayoutEngine)
        fx, fy: Pinned position while a drag holds the node (InteractionController)
    """

    id: str
    name: str
    type: NodeType
    file_path: str
    line_range: LineRange
    content: str
    summary: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)
    x: Optional[float] = None
    y: Optional[float] = None
    vx: float = 0.0
    vy: float = 0.0
    fx: Optional[float] = None
    fy: Optional[float] = None

    @property
    def is_pinned(self) -> bool:
        """True while a drag holds this node in place."""
        return self.fx is not None and self.fy is not None

    @property
    def position(self) -> Point:
        """Current position; the origin until the layout has placed the node."""
        return Point(self.x or 0.0, self.y or 0.0)


@dataclass(frozen=True)
class Link:
    """
    A directed relationship between two nodes.

    Links have no identity beyond (source, target, type); duplicates are
    kept and rendered independently.

    Attributes:
        source: ID of the originating node
        target: ID of the node the relationship points to
        type: Relationship kind (UNKNOWN for unrecognized tags)
        metadata: Free-form string attributes of the relationship
    """

    source: str
    target: str
    type: LinkType
    metadata: dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    def touches(self, node_id: str) -> bool:
        """Check whether either endpoint is the given node."""
        return self.source == node_id or self.target == node_id
