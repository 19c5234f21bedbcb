"""
Tests for the layout module.

Tests the force simulation, its activity schedule, and pinning.
"""

import math

import pytest
from codeview.layout import LayoutEngine, build_quadtree
from codeview.layout.quadtree import apply_repulsion
from codeview.models import LineRange, Link, LinkType, Node, NodeType
from tests.fixtures import build_model


def make_node(node_id, x=None, y=None):
    return Node(node_id, node_id, NodeType.FUNCTION, "f.rs", LineRange(1, 1), "", x=x, y=y)


def distance(a, b):
    return math.hypot(a.x - b.x, a.y - b.y)


class TestInitialization:
    """Tests for initial placement."""

    def test_unpositioned_nodes_placed_near_center(self):
        nodes = [make_node(f"n{i}") for i in range(10)]
        LayoutEngine(nodes, [], width=400, height=200)

        for node in nodes:
            assert node.x is not None and node.y is not None
            assert distance(node, make_node("c", 200, 100)) < 50

        positions = {(round(n.x, 6), round(n.y, 6)) for n in nodes}
        assert len(positions) == 10

    def test_existing_positions_kept(self):
        node = make_node("a", 5.0, 7.0)
        LayoutEngine([node], [])
        assert (node.x, node.y) == (5.0, 7.0)


class TestForces:
    """Tests for the individual forces."""

    def test_link_pulls_toward_distance(self):
        a, b = make_node("a", 0.0, 0.0), make_node("b", 400.0, 0.0)
        engine = LayoutEngine([a, b], [Link("a", "b", LinkType.CALLS)], charge_strength=0.0, center_strength=0.0)

        engine.tick(300)

        assert distance(a, b) == pytest.approx(100, abs=5)

    def test_repulsion_pushes_apart(self):
        a, b = make_node("a", 480.0, 300.0), make_node("b", 482.0, 300.0)
        engine = LayoutEngine([a, b], [], center_strength=0.0)

        engine.tick(20)

        assert distance(a, b) > 20

    def test_centering_prevents_drift(self):
        nodes = [make_node(f"n{i}", 2000.0 + i * 10, -1500.0) for i in range(3)]
        engine = LayoutEngine(nodes, [], width=960, height=600)

        engine.tick(300)

        mean_x = sum(n.x for n in nodes) / 3
        mean_y = sum(n.y for n in nodes) / 3
        assert abs(mean_x - 480) < abs(2010 - 480)
        assert abs(mean_y - 300) < abs(-1500 - 300)

    def test_barnes_hut_close_to_exact(self):
        """Test that the approximated repulsion matches pairwise summation."""
        nodes = [make_node(f"n{i}", float(i % 7) * 37.0, float(i // 7) * 41.0) for i in range(35)]
        probe = nodes[0]
        root = build_quadtree(nodes)

        apply_repulsion(root, probe, strength=-300, alpha=1.0, theta=0.5, jiggle=lambda: 1e-7)
        approx = (probe.vx, probe.vy)

        exact_x = exact_y = 0.0
        for other in nodes[1:]:
            dx, dy = other.x - probe.x, other.y - probe.y
            l = dx * dx + dy * dy
            exact_x += dx * -300 / l
            exact_y += dy * -300 / l

        assert approx[0] == pytest.approx(exact_x, rel=0.1)
        assert approx[1] == pytest.approx(exact_y, rel=0.1)


class TestActivity:
    """Tests for alpha decay, rest, and restart."""

    def test_alpha_decays_to_rest(self):
        model = build_model()
        engine = LayoutEngine(model.nodes, model.links)

        taken = engine.settle(1000)

        assert not engine.running
        assert engine.alpha < engine.alpha_min
        assert 250 < taken < 400

    def test_step_is_noop_at_rest(self):
        model = build_model()
        engine = LayoutEngine(model.nodes, model.links)
        engine.settle(1000)
        before = [(n.x, n.y) for n in model.nodes]

        engine.step()

        assert [(n.x, n.y) for n in model.nodes] == before

    def test_alpha_target_keeps_running(self):
        model = build_model()
        engine = LayoutEngine(model.nodes, model.links)
        engine.settle(1000)

        engine.set_alpha_target(0.3)
        engine.restart()
        engine.settle(500)

        assert engine.running
        assert engine.alpha == pytest.approx(0.3, abs=0.01)

    def test_tick_notifies_subscribers(self):
        model = build_model()
        engine = LayoutEngine(model.nodes, model.links)
        ticks = []
        engine.on_tick(lambda: ticks.append(engine.tick_count))

        engine.step()
        engine.step()
        engine.tick(5)

        assert ticks == [1, 2]

    def test_resize_moves_center_and_reheats(self):
        model = build_model()
        engine = LayoutEngine(model.nodes, model.links, width=960, height=600)
        engine.settle(1000)

        engine.resize(2000, 1000)

        assert engine.running
        assert engine.alpha_target == 0.3
        assert tuple(engine.center) == (1000, 500)
        engine.settle(1000)
        mean_x = sum(n.x for n in model.nodes) / model.node_count
        assert mean_x > 600


class TestPinning:
    """Tests for pinned nodes."""

    def test_pinned_node_holds_position(self):
        model = build_model()
        engine = LayoutEngine(model.nodes, model.links)
        pinned = model.get_node("lib::main")
        pinned.fx, pinned.fy = 10.0, 20.0

        engine.tick(50)

        assert (pinned.x, pinned.y) == (10.0, 20.0)
        assert (pinned.vx, pinned.vy) == (0.0, 0.0)

    def test_neighbors_react_to_pin(self):
        model = build_model()
        engine = LayoutEngine(model.nodes, model.links)
        engine.settle(1000)
        pinned = model.get_node("lib::main")
        neighbor = model.get_node("lib::helper")
        before = (neighbor.x, neighbor.y)

        pinned.fx, pinned.fy = pinned.x + 300, pinned.y
        engine.alpha = 0.3
        engine.restart()
        engine.tick(30)

        assert (neighbor.x, neighbor.y) != before

    def test_release_snaps_to_pin(self):
        node = make_node("a", 0.0, 0.0)
        node.vx, node.vy = 4.0, -2.0
        node.fx, node.fy = 50.0, 60.0
        engine = LayoutEngine([node], [])

        engine.release(node)

        assert (node.x, node.y) == (50.0, 60.0)
        assert (node.vx, node.vy) == (0.0, 0.0)

    def test_node_at(self):
        node = make_node("a", 100.0, 100.0)
        engine = LayoutEngine([node], [])

        assert engine.node_at(make_node("p", 104.0, 103.0).position) is node
        assert engine.node_at(make_node("p", 200.0, 200.0).position) is None
