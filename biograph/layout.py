"""Force-directed layout simulation scheduled on the asyncio event loop.

Positions live in a per-simulation table of ``Body`` records keyed by node
id, so a Graph never carries layout state and a disposed simulation cannot
write into the nodes of a newer one.
"""

import asyncio
import logging
import math
import random
from dataclasses import dataclass
from typing import Optional

from .config import (
    ALPHA_DECAY,
    ALPHA_DRAG_TARGET,
    ALPHA_MIN,
    ALPHA_START,
    CENTER_STRENGTH,
    CHARGE_CENTRAL,
    CHARGE_DEFAULT,
    COLLISION_RADIUS,
    COLLISION_STRENGTH,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    INITIAL_RADIUS,
    LINK_DISTANCE,
    LINK_STRENGTH_PRIMARY,
    LINK_STRENGTH_SECONDARY,
    MAX_SETTLE_TICKS,
    SETTLE_ENERGY,
    TICK_INTERVAL,
    VELOCITY_DECAY,
)
from .graph import node_type

logger = logging.getLogger(__name__)

INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


@dataclass
class Body:
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    fx: Optional[float] = None
    fy: Optional[float] = None
    last_x: float = 0.0
    last_y: float = 0.0

    @property
    def pinned(self):
        return self.fx is not None


def charge_strength(node):
    return CHARGE_CENTRAL if node_type(node) == "central" else CHARGE_DEFAULT


def collision_radius(node):
    return COLLISION_RADIUS[node_type(node)]


def link_params(edge):
    """(distance, strength) for an edge."""
    strength = LINK_STRENGTH_SECONDARY if edge.is_secondary else LINK_STRENGTH_PRIMARY
    return LINK_DISTANCE[edge.kind], strength


class Simulation:
    """Damped-velocity force simulation with an alpha cooling schedule.

    Each tick moves alpha toward ``alpha_target``, accumulates velocity from
    repulsion, link springs and collision, shifts the layout toward the canvas
    center, then integrates. The simulation is hot until alpha cools below
    ALPHA_MIN or the mean kinetic energy drops below SETTLE_ENERGY.
    """

    def __init__(self, graph, bounds=(DEFAULT_WIDTH, DEFAULT_HEIGHT),
                 tick_interval=TICK_INTERVAL, seed=0):
        self.graph = graph
        self.width, self.height = bounds
        self.tick_interval = tick_interval
        self.alpha = ALPHA_START
        self.alpha_target = 0.0
        self.ticks = 0
        self.disposed = False

        self._random = random.Random(seed)
        self._loop = None
        self._handle = None
        self._listeners = []

        self.bodies = {}
        cx, cy = self.center
        for i, node_id in enumerate(graph.nodes):
            radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
            angle = i * INITIAL_ANGLE
            x = cx + radius * math.cos(angle)
            y = cy + radius * math.sin(angle)
            self.bodies[node_id] = Body(x=x, y=y, last_x=x, last_y=y)

        self._charges = {nid: charge_strength(n) for nid, n in graph.nodes.items()}
        self._radii = {nid: collision_radius(n) for nid, n in graph.nodes.items()}

        degree = {nid: 0 for nid in graph.nodes}
        for e in graph.edges:
            degree[e.source] += 1
            degree[e.target] += 1
        self._links = []
        for e in graph.edges:
            distance, strength = link_params(e)
            bias = degree[e.source] / (degree[e.source] + degree[e.target])
            self._links.append((e.source, e.target, distance, strength, bias))

    @property
    def center(self):
        return self.width / 2, self.height / 2

    # ── State ─────────────────────────────────────────────────────────

    def kinetic_energy(self):
        """Mean squared speed over the free (unpinned) bodies."""
        free = [b for b in self.bodies.values() if not b.pinned]
        if not free:
            return 0.0
        return sum(b.vx * b.vx + b.vy * b.vy for b in free) / len(free)

    @property
    def is_hot(self):
        if self.disposed or not self.bodies:
            return False
        if self.alpha_target > 0:
            return True
        if self.alpha < ALPHA_MIN:
            return False
        return self.ticks == 0 or self.kinetic_energy() >= SETTLE_ENERGY

    @property
    def is_running(self):
        return self._handle is not None

    def position(self, node_id):
        body = self.bodies.get(node_id)
        if body is None:
            return None
        return body.x, body.y

    def positions(self):
        return {nid: (b.x, b.y) for nid, b in self.bodies.items()}

    # ── Forces ────────────────────────────────────────────────────────

    def _jiggle(self):
        return (self._random.random() - 0.5) * 1e-6

    def _apply_charge(self):
        alpha = self.alpha
        items = list(self.bodies.items())
        for node_id, a in items:
            for other_id, b in items:
                if other_id == node_id:
                    continue
                dx = b.x - a.x
                dy = b.y - a.y
                if dx == 0:
                    dx = self._jiggle()
                if dy == 0:
                    dy = self._jiggle()
                dist2 = dx * dx + dy * dy
                if dist2 < 1:
                    dist2 = math.sqrt(dist2)
                w = self._charges[other_id] * alpha / dist2
                a.vx += dx * w
                a.vy += dy * w

    def _apply_links(self):
        alpha = self.alpha
        for source_id, target_id, distance, strength, bias in self._links:
            s = self.bodies[source_id]
            t = self.bodies[target_id]
            x = t.x + t.vx - s.x - s.vx
            y = t.y + t.vy - s.y - s.vy
            if x == 0:
                x = self._jiggle()
            if y == 0:
                y = self._jiggle()
            length = math.sqrt(x * x + y * y)
            k = (length - distance) / length * alpha * strength
            x *= k
            y *= k
            t.vx -= x * bias
            t.vy -= y * bias
            s.vx += x * (1 - bias)
            s.vy += y * (1 - bias)

    def _apply_collision(self):
        items = list(self.bodies.items())
        for i, (a_id, a) in enumerate(items):
            ri = self._radii[a_id]
            xi = a.x + a.vx
            yi = a.y + a.vy
            for b_id, b in items[i + 1:]:
                rj = self._radii[b_id]
                r = ri + rj
                x = xi - b.x - b.vx
                y = yi - b.y - b.vy
                dist2 = x * x + y * y
                if dist2 >= r * r:
                    continue
                if x == 0:
                    x = self._jiggle()
                    dist2 += x * x
                if y == 0:
                    y = self._jiggle()
                    dist2 += y * y
                length = math.sqrt(dist2)
                k = (r - length) / length * COLLISION_STRENGTH
                x *= k
                y *= k
                share = rj * rj / (ri * ri + rj * rj)
                a.vx += x * share
                a.vy += y * share
                b.vx -= x * (1 - share)
                b.vy -= y * (1 - share)

    def _apply_centering(self):
        n = len(self.bodies)
        cx, cy = self.center
        mean_x = sum(b.x for b in self.bodies.values()) / n
        mean_y = sum(b.y for b in self.bodies.values()) / n
        sx = (mean_x - cx) * CENTER_STRENGTH
        sy = (mean_y - cy) * CENTER_STRENGTH
        for b in self.bodies.values():
            b.x -= sx
            b.y -= sy

    def _integrate(self):
        decay = 1 - VELOCITY_DECAY
        for node_id, b in self.bodies.items():
            if b.pinned:
                b.x, b.y = b.fx, b.fy
                b.vx = b.vy = 0.0
            else:
                b.vx *= decay
                b.vy *= decay
                b.x += b.vx
                b.y += b.vy

            if math.isfinite(b.x) and math.isfinite(b.y):
                b.last_x, b.last_y = b.x, b.y
            else:
                logger.warning("Non-finite position for %s, restoring last known", node_id)
                b.x, b.y = b.last_x, b.last_y
                b.vx = b.vy = 0.0

    def tick(self):
        """Advance the simulation by one step."""
        if not self.bodies:
            return
        self.alpha += (self.alpha_target - self.alpha) * ALPHA_DECAY
        self._apply_charge()
        self._apply_links()
        self._apply_collision()
        self._apply_centering()
        self._integrate()
        self.ticks += 1

    def settle(self, max_ticks=MAX_SETTLE_TICKS):
        """Tick synchronously until the layout settles. Returns ticks run."""
        count = 0
        while count < max_ticks and self.is_hot:
            self.tick()
            count += 1
        return count

    # ── Scheduling ────────────────────────────────────────────────────

    def on_tick(self, callback):
        """Register ``callback(simulation)``, called after every scheduled tick."""
        self._listeners.append(callback)

    def start(self, loop=None):
        """Begin ticking on ``loop`` (default: the running loop)."""
        if self.disposed:
            return self
        self._loop = loop or asyncio.get_running_loop()
        self._schedule()
        return self

    def restart(self):
        if self._loop is not None:
            self._schedule()

    def _schedule(self):
        if self._handle is None and self.is_hot:
            self._handle = self._loop.call_later(self.tick_interval, self._step)

    def _step(self):
        self._handle = None
        if self.disposed:
            return
        self.tick()
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception:
                logger.exception("Tick listener failed")
        if self.is_hot:
            self._schedule()
        else:
            logger.debug("Layout settled after %d ticks", self.ticks)

    async def wait_settled(self):
        """Wait until a started simulation stops ticking."""
        while self.is_hot:
            await asyncio.sleep(self.tick_interval)

    def dispose(self):
        """Cancel pending ticks and detach listeners."""
        self.disposed = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._listeners.clear()

    # ── Dragging ──────────────────────────────────────────────────────

    def pin(self, node_id, x, y):
        """Fix a node at (x, y) and re-heat the simulation."""
        body = self.bodies.get(node_id)
        if body is None:
            return False
        body.fx, body.fy = x, y
        body.x, body.y = x, y
        self.alpha_target = ALPHA_DRAG_TARGET
        self.restart()
        return True

    def unpin(self, node_id):
        """Release a pinned node and let the simulation cool."""
        body = self.bodies.get(node_id)
        if body is None:
            return False
        body.fx = body.fy = None
        self.alpha_target = 0.0
        self.restart()
        return True


def run(graph, bounds=(DEFAULT_WIDTH, DEFAULT_HEIGHT), on_tick=None,
        tick_interval=TICK_INTERVAL, loop=None):
    """Start a simulation for ``graph`` on the event loop and return its handle.

    The returned Simulation keeps ticking until it settles; call
    ``dispose()`` to cancel it.
    """
    simulation = Simulation(graph, bounds, tick_interval=tick_interval)
    if on_tick is not None:
        simulation.on_tick(on_tick)
    return simulation.start(loop)
