"""
Force-Directed Layout Engine for CodeView

This module positions graph nodes with a stepped force simulation using
velocity Verlet integration, the scheme popularized by d3-force.

Forces applied every step:
    - Link: each link is a spring toward a separation of LINK_DISTANCE
    - Many-body: nodes repel with CHARGE_STRENGTH, Barnes-Hut approximated
    - Centering: per-axis pull toward the viewport center

Activity:
    alpha decays geometrically toward alpha_target each step. Once alpha
    falls below alpha_min the simulation stops until restart() is called.

Ownership:
    The engine holds the session's node list by reference and is the only
    writer of x, y, vx, vy. Pinned nodes (fx, fy set) are placed at their
    pin each step and keep zero velocity; their neighbors still feel them.
"""

import asyncio
import logging
import math
import random
from collections import Counter
from typing import Callable, Optional, Sequence

from codeview import config
from codeview.layout.quadtree import apply_repulsion, build_quadtree
from codeview.models import Link, Node, Point

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


class LayoutEngine:
    """
    A stepped force simulation over a node set.

    Attributes:
        nodes: The shared node list (positions are mutated in place)
        links: The links acting as springs
        alpha: Current activity level
        alpha_target: Level alpha decays toward
        center: Point the centering force pulls toward

    Usage:
        engine = LayoutEngine(model.nodes, model.links, width=960, height=600)
        engine.on_tick(redraw)
        await engine.run()
    """

    def __init__(
        self,
        nodes: Sequence[Node],
        links: Sequence[Link],
        width: float = config.DEFAULT_WIDTH,
        height: float = config.DEFAULT_HEIGHT,
        link_distance: float = config.LINK_DISTANCE,
        charge_strength: float = config.CHARGE_STRENGTH,
        center_strength: float = config.CENTER_STRENGTH,
        theta: float = config.BARNES_HUT_THETA,
        velocity_decay: float = config.VELOCITY_DECAY,
        alpha_min: float = config.ALPHA_MIN,
        seed: int = 0,
    ) -> None:
        self.nodes = nodes
        self.links = links
        self.link_distance = link_distance
        self.charge_strength = charge_strength
        self.center_strength = center_strength
        self.theta = theta
        self.velocity_decay = velocity_decay
        self.alpha = 1.0
        self.alpha_min = alpha_min
        self.alpha_decay = 1 - alpha_min ** (1 / 300)
        self.alpha_target = 0.0
        self.center = Point(width / 2, height / 2)
        self._random = random.Random(seed)
        self._callbacks: list[TickCallback] = []
        self._running = True
        self.tick_count = 0

        self._by_id = {node.id: node for node in nodes}
        self._springs = self._prepare_springs()
        self._initialize_positions()

    @property
    def running(self) -> bool:
        """False once the simulation has come to rest."""
        return self._running

    def on_tick(self, callback: TickCallback) -> None:
        """Register a callback invoked after every step()."""
        self._callbacks.append(callback)

    def set_alpha_target(self, target: float) -> None:
        """Set the level alpha decays toward."""
        self.alpha_target = target

    def restart(self) -> None:
        """Resume stepping after the simulation came to rest."""
        if not self._running:
            logger.debug("Restarting layout at alpha=%.4f", self.alpha)
        self._running = True

    def resize(self, width: float, height: float) -> None:
        """
        Move the centering point to the middle of a new viewport.

        Raises the alpha target to DRAG_ALPHA_TARGET and restarts so the
        layout re-settles around the new center.
        """
        self.center = Point(width / 2, height / 2)
        self.set_alpha_target(config.DRAG_ALPHA_TARGET)
        self.restart()

    def release(self, node: Node) -> None:
        """
        Hand a pinned node back to the simulation.

        The node is placed exactly at its pin with zero velocity, so clearing
        the pin afterwards causes no jump.
        """
        if node.fx is not None:
            node.x = node.fx
        if node.fy is not None:
            node.y = node.fy
        node.vx = 0.0
        node.vy = 0.0

    def step(self) -> None:
        """Advance the simulation by one tick and notify subscribers."""
        if not self._running:
            return
        self.tick()
        if self.alpha < self.alpha_min and self.alpha_target < self.alpha_min:
            self._running = False
            logger.debug("Layout at rest after %d ticks", self.tick_count)
        for callback in self._callbacks:
            callback()

    def tick(self, iterations: int = 1) -> None:
        """
        Advance the simulation without notifying subscribers.

        Args:
            iterations: Number of integration steps to run
        """
        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
            self._apply_link_force()
            self._apply_many_body_force()
            self._apply_center_force()
            self._integrate()
            self.tick_count += 1

    async def run(self, interval: float = config.TICK_INTERVAL) -> None:
        """Step on the event loop until the simulation comes to rest."""
        while self._running:
            self.step()
            await asyncio.sleep(interval)

    def settle(self, max_ticks: int = 300) -> int:
        """
        Step until at rest or max_ticks is reached.

        Returns:
            The number of steps taken
        """
        taken = 0
        while self._running and taken < max_ticks:
            self.step()
            taken += 1
        return taken

    # Forces

    def _prepare_springs(self) -> list[tuple[Node, Node, float, float]]:
        """Precompute (source, target, strength, bias) per link."""
        degree: Counter = Counter()
        for link in self.links:
            degree[link.source] += 1
            degree[link.target] += 1

        springs = []
        for link in self.links:
            source = self._by_id.get(link.source)
            target = self._by_id.get(link.target)
            if source is None or target is None or source is target:
                continue
            count_s, count_t = degree[link.source], degree[link.target]
            strength = 1 / min(count_s, count_t)
            bias = count_s / (count_s + count_t)
            springs.append((source, target, strength, bias))
        return springs

    def _apply_link_force(self) -> None:
        for source, target, strength, bias in self._springs:
            dx = (target.x + target.vx - source.x - source.vx) or self._jiggle()
            dy = (target.y + target.vy - source.y - source.vy) or self._jiggle()
            length = math.sqrt(dx * dx + dy * dy)
            factor = (length - self.link_distance) / length * self.alpha * strength
            dx *= factor
            dy *= factor
            target.vx -= dx * bias
            target.vy -= dy * bias
            source.vx += dx * (1 - bias)
            source.vy += dy * (1 - bias)

    def _apply_many_body_force(self) -> None:
        root = build_quadtree(self.nodes)
        if root is None:
            return
        for node in self.nodes:
            apply_repulsion(
                root,
                node,
                strength=self.charge_strength,
                alpha=self.alpha,
                theta=self.theta,
                jiggle=self._jiggle,
            )

    def _apply_center_force(self) -> None:
        k = self.center_strength * self.alpha
        cx, cy = self.center
        for node in self.nodes:
            node.vx += (cx - node.x) * k
            node.vy += (cy - node.y) * k

    def _integrate(self) -> None:
        keep = 1 - self.velocity_decay
        for node in self.nodes:
            if node.fx is None:
                node.vx *= keep
                node.x += node.vx
            else:
                node.x = node.fx
                node.vx = 0.0
            if node.fy is None:
                node.vy *= keep
                node.y += node.vy
            else:
                node.y = node.fy
                node.vy = 0.0

    def _initialize_positions(self) -> None:
        """Place unpositioned nodes on a phyllotaxis spiral around the center."""
        cx, cy = self.center
        for index, node in enumerate(self.nodes):
            if node.fx is not None:
                node.x = node.fx
            if node.fy is not None:
                node.y = node.fy
            if node.x is None or node.y is None:
                radius = INITIAL_RADIUS * math.sqrt(0.5 + index)
                angle = index * INITIAL_ANGLE
                node.x = cx + radius * math.cos(angle)
                node.y = cy + radius * math.sin(angle)

    def _jiggle(self) -> float:
        return (self._random.random() - 0.5) * 1e-6 or 1e-7

    def node_at(self, point: Point, radius: float = config.NODE_RADIUS) -> Optional[Node]:
        """Find the topmost node whose marker covers a scene point."""
        for node in reversed(self.nodes):
            if (node.x - point.x) ** 2 + (node.y - point.y) ** 2 <= radius * radius:
                return node
        return None
