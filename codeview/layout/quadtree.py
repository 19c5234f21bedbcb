"""
Barnes-Hut quadtree for many-body repulsion.

Each quad aggregates the charge of the nodes below it at their centroid.
A node far enough from a quad (quad width / distance < theta) feels the
aggregate instead of every node inside it, which brings the per-tick cost
from O(n^2) down to roughly O(n log n).
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from codeview.models import Node

# Coincident nodes would otherwise recurse forever
MAX_DEPTH = 32


@dataclass
class Quad:
    """A square region of the plane and the nodes inside it."""

    x0: float
    y0: float
    size: float
    count: int = 0
    cx: float = 0.0
    cy: float = 0.0
    children: list["Quad"] = field(default_factory=list)
    bodies: list[Node] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def contains(self, x: float, y: float) -> bool:
        return (
            self.x0 <= x <= self.x0 + self.size
            and self.y0 <= y <= self.y0 + self.size
        )


def build_quadtree(nodes: Sequence[Node]) -> Optional[Quad]:
    """
    Build a quadtree over positioned nodes.

    Returns:
        The root quad, or None when there are no nodes
    """
    if not nodes:
        return None
    xs = [n.x for n in nodes]
    ys = [n.y for n in nodes]
    x0, y0 = min(xs), min(ys)
    size = max(max(xs) - x0, max(ys) - y0, 1.0)
    return _build(list(nodes), x0, y0, size, 0)


def _build(bodies: list[Node], x0: float, y0: float, size: float, depth: int) -> Quad:
    quad = Quad(x0=x0, y0=y0, size=size)
    quad.count = len(bodies)
    quad.cx = sum(n.x for n in bodies) / quad.count
    quad.cy = sum(n.y for n in bodies) / quad.count

    if len(bodies) == 1 or depth >= MAX_DEPTH:
        quad.bodies = bodies
        return quad

    half = size / 2
    xm, ym = x0 + half, y0 + half
    buckets: list[list[Node]] = [[], [], [], []]
    for n in bodies:
        buckets[(n.x >= xm) + 2 * (n.y >= ym)].append(n)
    for index, bucket in enumerate(buckets):
        if bucket:
            qx = xm if index & 1 else x0
            qy = ym if index & 2 else y0
            quad.children.append(_build(bucket, qx, qy, half, depth + 1))
    return quad


def apply_repulsion(
    root: Quad,
    node: Node,
    strength: float,
    alpha: float,
    theta: float,
    jiggle: Callable[[], float],
    distance_min2: float = 1.0,
) -> None:
    """
    Accumulate the many-body force acting on one node into its velocity.

    Args:
        root: Quadtree built over all nodes
        node: The node receiving the force
        strength: Per-node charge (negative repels)
        alpha: Current simulation activity
        theta: Barnes-Hut accuracy threshold
        jiggle: Source of tiny random offsets for coincident nodes
        distance_min2: Lower bound on squared distance
    """
    theta2 = theta * theta
    stack = [root]
    while stack:
        quad = stack.pop()
        dx = quad.cx - node.x
        dy = quad.cy - node.y
        l = dx * dx + dy * dy

        if not quad.is_leaf:
            if quad.size * quad.size / theta2 < l and not quad.contains(node.x, node.y):
                _push(node, dx, dy, l, quad.count * strength, alpha, distance_min2)
            else:
                stack.extend(quad.children)
            continue

        for body in quad.bodies:
            if body is node:
                continue
            dx = body.x - node.x
            dy = body.y - node.y
            if dx == 0:
                dx = jiggle()
            if dy == 0:
                dy = jiggle()
            _push(node, dx, dy, dx * dx + dy * dy, strength, alpha, distance_min2)


def _push(
    node: Node,
    dx: float,
    dy: float,
    l: float,
    charge: float,
    alpha: float,
    distance_min2: float,
) -> None:
    if l < distance_min2:
        l = math.sqrt(distance_min2 * l)
    node.vx += dx * charge * alpha / l
    node.vy += dy * charge * alpha / l
