"""Default settings for the CodeView graph viewer."""

import os
from dataclasses import dataclass
from typing import Optional

# Document location; CODEVIEW_DOCUMENT is the single external override
DEFAULT_DOCUMENT = "code_graph.json"
DOCUMENT_ENV_VAR = "CODEVIEW_DOCUMENT"

DEFAULT_WIDTH = 960
DEFAULT_HEIGHT = 600

# Physics
LINK_DISTANCE = 100.0
CHARGE_STRENGTH = -300.0
CENTER_STRENGTH = 0.05
BARNES_HUT_THETA = 0.9
ALPHA_MIN = 0.001
VELOCITY_DECAY = 0.4
DRAG_ALPHA_TARGET = 0.3
TICK_INTERVAL = 1 / 60

# Viewport
MIN_SCALE = 0.1
MAX_SCALE = 8.0
ZOOM_IN_FACTOR = 1.5
ZOOM_OUT_FACTOR = 0.75
TRANSITION_MS = 750

# Rendering
NODE_RADIUS = 8


def resolve_document(explicit: Optional[str] = None) -> str:
    """Pick the document location: explicit value, then environment, then default."""
    if explicit:
        return explicit
    return os.environ.get(DOCUMENT_ENV_VAR) or DEFAULT_DOCUMENT


@dataclass
class ViewerConfig:
    """
    Per-run viewer settings.

    Attributes:
        document: Path or URL of the graph document
        width: Viewport width in pixels
        height: Viewport height in pixels
        seed: Seed for the layout's jiggle generator
    """

    document: str = DEFAULT_DOCUMENT
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    seed: int = 0

    @classmethod
    def from_env(cls, document: Optional[str] = None, **overrides) -> "ViewerConfig":
        """Build a config honoring the environment override for the document."""
        return cls(document=resolve_document(document), **overrides)
