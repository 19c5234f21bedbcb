"""
Typed interaction commands.

Every input the viewer reacts to is expressed as one of these commands,
independent of the device or surface it came from. Points are in scene
coordinates.
"""

from dataclasses import dataclass
from typing import Union

from codeview.models import NodeType, Point
from codeview.viewport import Transform


@dataclass(frozen=True)
class Select:
    node_id: str


@dataclass(frozen=True)
class CloseDetail:
    pass


@dataclass(frozen=True)
class SetFilter:
    type: Union[str, NodeType]


@dataclass(frozen=True)
class ToggleLabels:
    pass


@dataclass(frozen=True)
class DragStart:
    node_id: str
    point: Point


@dataclass(frozen=True)
class DragMove:
    node_id: str
    point: Point


@dataclass(frozen=True)
class DragEnd:
    node_id: str
    point: Point


@dataclass(frozen=True)
class ZoomIn:
    pass


@dataclass(frozen=True)
class ZoomOut:
    pass


@dataclass(frozen=True)
class ResetView:
    pass


@dataclass(frozen=True)
class Gesture:
    """A direct pan/zoom gesture carrying the resulting transform."""

    transform: Transform


@dataclass(frozen=True)
class Resize:
    width: float
    height: float


Command = Union[
    Select,
    CloseDetail,
    SetFilter,
    ToggleLabels,
    DragStart,
    DragMove,
    DragEnd,
    ZoomIn,
    ZoomOut,
    ResetView,
    Gesture,
    Resize,
]
