"""
Viewport Controller for CodeView

Owns the single pan/zoom transform shared by every element of the scene.

A transform maps a scene point p to the screen point p * k + (x, y).
The scale k is always clamped to [MIN_SCALE, MAX_SCALE].

Button zooms and reset are animated over TRANSITION_MS with cubic in-out
easing. The animation is evaluated lazily against a monotonic clock, so
nothing blocks while it plays: the host calls advance() once per frame.
Direct gestures (wheel, drag-pan) apply immediately and interrupt any
running animation.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, ClassVar, Optional

from codeview import config
from codeview.models import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transform:
    """Translation (x, y) plus uniform scale k."""

    x: float = 0.0
    y: float = 0.0
    k: float = 1.0

    identity: ClassVar["Transform"]

    def apply(self, point: Point) -> Point:
        """Map a scene point to screen coordinates."""
        return Point(point.x * self.k + self.x, point.y * self.k + self.y)

    def invert(self, point: Point) -> Point:
        """Map a screen point back to scene coordinates."""
        return Point((point.x - self.x) / self.k, (point.y - self.y) / self.k)

    def __str__(self) -> str:
        return f"translate({self.x:g},{self.y:g}) scale({self.k:g})"


Transform.identity = Transform()


def clamp_scale(k: float) -> float:
    """Clamp a scale factor to the allowed zoom range."""
    return min(max(k, config.MIN_SCALE), config.MAX_SCALE)


def ease_cubic_in_out(t: float) -> float:
    """Cubic in-out easing on [0, 1]."""
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


@dataclass(frozen=True)
class Transition:
    """An animated change between two transforms."""

    start: Transform
    end: Transform
    started_at: float
    duration: float

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(max((now - self.started_at) / self.duration, 0.0), 1.0)

    def value_at(self, now: float) -> Transform:
        e = ease_cubic_in_out(self.progress(now))
        a, b = self.start, self.end
        return Transform(
            x=a.x + (b.x - a.x) * e,
            y=a.y + (b.y - a.y) * e,
            k=a.k + (b.k - a.k) * e,
        )


ChangeCallback = Callable[[Transform], None]


class ViewportController:
    """
    Pan/zoom state of the rendered scene.

    Usage:
        viewport = ViewportController(960, 600)
        viewport.on_change(redraw)
        viewport.zoom_in()
        ...
        viewport.advance()  # once per frame while viewport.animating
    """

    def __init__(
        self,
        width: float = config.DEFAULT_WIDTH,
        height: float = config.DEFAULT_HEIGHT,
        clock: Callable[[], float] = time.monotonic,
        duration_ms: float = config.TRANSITION_MS,
    ) -> None:
        self.width = width
        self.height = height
        self._clock = clock
        self._duration = duration_ms / 1000
        self._transform = Transform.identity
        self._transition: Optional[Transition] = None
        self._callbacks: list[ChangeCallback] = []

    @property
    def transform(self) -> Transform:
        """The transform as of now, mid-animation included."""
        if self._transition is None:
            return self._transform
        now = self._clock()
        if self._transition.progress(now) >= 1.0:
            self._transform = self._transition.end
            self._transition = None
            return self._transform
        return self._transition.value_at(now)

    @property
    def target(self) -> Transform:
        """Where the viewport ends up once any animation finishes."""
        if self._transition is not None:
            return self._transition.end
        return self._transform

    @property
    def animating(self) -> bool:
        """True while a zoom or reset transition is still playing."""
        return self._transition is not None and self._transition.progress(self._clock()) < 1.0

    @property
    def center(self) -> Point:
        """Screen center of the viewport."""
        return Point(self.width / 2, self.height / 2)

    def on_change(self, callback: ChangeCallback) -> None:
        """Register a callback invoked with the transform on every change."""
        self._callbacks.append(callback)

    def zoom_in(self) -> None:
        """Animate a 1.5x zoom about the viewport center."""
        self._animate_to(self._scaled(self.transform, config.ZOOM_IN_FACTOR, self.center))

    def zoom_out(self) -> None:
        """Animate a 0.75x zoom about the viewport center."""
        self._animate_to(self._scaled(self.transform, config.ZOOM_OUT_FACTOR, self.center))

    def reset_view(self) -> None:
        """Animate back to the identity transform."""
        self._animate_to(Transform.identity)

    def apply_gesture(self, transform: Transform) -> None:
        """Apply a transform from a direct gesture immediately."""
        self._transition = None
        self._set(Transform(transform.x, transform.y, clamp_scale(transform.k)))

    def pan_by(self, dx: float, dy: float) -> None:
        """Translate the scene immediately by a screen-space offset."""
        current = self.transform
        self.apply_gesture(Transform(current.x + dx, current.y + dy, current.k))

    def zoom_at(self, point: Point, factor: float) -> None:
        """Zoom immediately about a screen point (wheel gesture)."""
        self.apply_gesture(self._scaled(self.transform, factor, point))

    def resize(self, width: float, height: float) -> None:
        """Record new viewport dimensions."""
        self.width = width
        self.height = height

    def advance(self) -> Transform:
        """Evaluate the current frame and notify subscribers."""
        transform = self.transform
        self._notify(transform)
        return transform

    def _scaled(self, current: Transform, factor: float, about: Point) -> Transform:
        k = clamp_scale(current.k * factor)
        anchor = current.invert(about)
        return Transform(x=about.x - anchor.x * k, y=about.y - anchor.y * k, k=k)

    def _animate_to(self, end: Transform) -> None:
        start = self.transform
        self._transition = Transition(start, end, self._clock(), self._duration)
        logger.debug("Viewport transition %s -> %s", start, end)
        self._notify(start)

    def _set(self, transform: Transform) -> None:
        self._transform = transform
        self._notify(transform)

    def _notify(self, transform: Transform) -> None:
        for callback in self._callbacks:
            callback(transform)
