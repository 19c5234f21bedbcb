"""
Tests for the viewport module.

Tests zoom clamping, animated transitions, and direct gestures.
"""

import pytest
from codeview.models import Point
from codeview.viewport import Transform, ViewportController, clamp_scale


class FakeClock:
    """A manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def viewport(clock):
    return ViewportController(960, 600, clock=clock)


def finish(viewport, clock):
    clock.advance(1.0)
    return viewport.advance()


class TestTransform:
    """Tests for the Transform value type."""

    def test_apply_and_invert(self):
        transform = Transform(10, 20, 2)
        screen = transform.apply(Point(5, 5))

        assert screen == Point(20, 30)
        assert transform.invert(screen) == Point(5, 5)

    def test_clamp(self):
        assert clamp_scale(100) == 8
        assert clamp_scale(0.001) == 0.1
        assert clamp_scale(2) == 2


class TestZoom:
    """Tests for the animated zoom buttons."""

    def test_zoom_in_scales_by_factor(self, viewport, clock):
        viewport.zoom_in()

        assert finish(viewport, clock).k == pytest.approx(1.5)

    def test_zoom_out_scales_by_factor(self, viewport, clock):
        viewport.zoom_out()

        assert finish(viewport, clock).k == pytest.approx(0.75)

    def test_zoom_keeps_center_fixed(self, viewport, clock):
        viewport.zoom_in()
        transform = finish(viewport, clock)

        center = Point(480, 300)
        assert transform.apply(center) == pytest.approx(center)

    def test_repeated_zoom_in_never_exceeds_max(self, viewport, clock):
        for _ in range(20):
            viewport.zoom_in()
            clock.advance(0.8)
            assert viewport.transform.k <= 8
        assert finish(viewport, clock).k == pytest.approx(8)

    def test_repeated_zoom_out_never_below_min(self, viewport, clock):
        for _ in range(30):
            viewport.zoom_out()
            clock.advance(0.8)
            assert viewport.transform.k >= 0.1
        assert finish(viewport, clock).k == pytest.approx(0.1)

    def test_transition_is_animated(self, viewport, clock):
        viewport.zoom_in()

        assert viewport.animating
        assert viewport.transform.k == pytest.approx(1.0)

        clock.advance(0.375)
        assert 1.0 < viewport.transform.k < 1.5

        clock.advance(0.375)
        assert viewport.transform.k == pytest.approx(1.5)
        assert not viewport.animating


class TestResetAndGestures:
    """Tests for reset and direct gestures."""

    def test_reset_restores_identity(self, viewport, clock):
        viewport.apply_gesture(Transform(123, -45, 3))
        viewport.zoom_out()
        clock.advance(0.3)
        viewport.pan_by(50, 50)

        viewport.reset_view()

        assert finish(viewport, clock) == Transform.identity

    def test_gesture_is_immediate_and_clamped(self, viewport):
        changes = []
        viewport.on_change(changes.append)

        viewport.apply_gesture(Transform(5, 6, 50))

        assert viewport.transform == Transform(5, 6, 8)
        assert changes == [Transform(5, 6, 8)]
        assert not viewport.animating

    def test_gesture_interrupts_animation(self, viewport, clock):
        viewport.zoom_in()
        clock.advance(0.1)

        viewport.pan_by(10, 0)
        clock.advance(1.0)

        assert viewport.transform.k < 1.5

    def test_zoom_at_point(self, viewport):
        viewport.zoom_at(Point(100, 100), 2)

        transform = viewport.transform
        assert transform.k == 2
        assert transform.apply(Point(100, 100)) == pytest.approx(Point(100, 100))

    def test_advance_notifies_subscribers(self, viewport, clock):
        seen = []
        viewport.on_change(seen.append)

        viewport.zoom_in()
        clock.advance(0.2)
        viewport.advance()

        assert len(seen) == 2
        assert 1.0 < seen[-1].k < 1.5
