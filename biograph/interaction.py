"""Interactive explorer: owns interaction state, the live simulation and the viewport.

The host supplies the corpus and focuses a publication; the explorer
rebuilds the graph, restarts the layout and produces render frames. Clicking
a publication node emits a ``PublicationSelected`` event back to the host,
which normally answers by focusing that publication.
"""

import asyncio
import logging
from dataclasses import dataclass

from .config import DEFAULT_HEIGHT, DEFAULT_WIDTH, MAX_ZOOM, MIN_ZOOM, TICK_INTERVAL
from .filters import InteractionState, derive
from .graph import (
    build_graph,
    edge_to_dict,
    legend,
    node_to_dict,
    publication_node_id,
    type_counts,
    usable_corpus,
)
from .layout import Simulation, collision_radius
from .models import NODE_KINDS, PUBLICATION, Graph, Publication

logger = logging.getLogger(__name__)

PLACEHOLDER_MESSAGE = "Select a publication to explore its connections"


@dataclass(frozen=True)
class PublicationSelected:
    publication: Publication


@dataclass
class Viewport:
    """Screen transform applied on top of simulation coordinates."""

    scale: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def zoom(self, factor, cx=0.0, cy=0.0):
        """Scale by ``factor`` keeping the screen point (cx, cy) fixed."""
        new_scale = min(MAX_ZOOM, max(MIN_ZOOM, self.scale * factor))
        sx, sy = self.to_scene(cx, cy)
        self.scale = new_scale
        self.x = cx - sx * new_scale
        self.y = cy - sy * new_scale

    def pan(self, dx, dy):
        self.x += dx
        self.y += dy

    def to_scene(self, px, py):
        return (px - self.x) / self.scale, (py - self.y) / self.scale

    def to_dict(self):
        return {"k": self.scale, "x": self.x, "y": self.y}


class Explorer:
    def __init__(self, corpus, bounds=(DEFAULT_WIDTH, DEFAULT_HEIGHT),
                 on_publication_selected=None, on_frame=None,
                 tick_interval=TICK_INTERVAL):
        self.corpus = usable_corpus(corpus)
        self._by_id = {pub.id: pub for pub in self.corpus}
        self.bounds = bounds
        self.tick_interval = tick_interval
        self.on_publication_selected = on_publication_selected
        self.on_frame = on_frame

        self.state = InteractionState()
        self.viewport = Viewport()
        self.graph = Graph()
        self.simulation = None
        self.focused = None
        self.dragging = None

    # ── Focus ─────────────────────────────────────────────────────────

    def find_publication(self, publication_id):
        return self._by_id.get(publication_id)

    def focus(self, publication, animate=None):
        """Rebuild the graph around ``publication`` and restart the layout.

        With ``animate`` the layout ticks on the running event loop; without
        it the layout is settled synchronously before returning. The default
        animates whenever a loop is running.
        """
        self.dispose()
        self.focused = publication
        self.graph = build_graph(self.corpus, publication)
        self.state.hovered_node_id = None
        self.state.selected_node_id = (
            publication_node_id(publication.id) if not self.graph.is_empty() else None
        )
        self.dragging = None

        self.simulation = Simulation(self.graph, self.bounds, tick_interval=self.tick_interval)
        self.simulation.on_tick(self._handle_tick)
        if animate is None:
            try:
                asyncio.get_running_loop()
                animate = True
            except RuntimeError:
                animate = False
        if animate:
            self.simulation.start()
        else:
            self.simulation.settle()

        logger.info(
            "Focused %s: %d nodes, %d edges",
            publication.id if publication else None,
            len(self.graph.nodes), len(self.graph.edges),
        )
        self._emit_frame()
        return self.graph

    def dispose(self):
        if self.simulation is not None:
            self.simulation.dispose()
            self.simulation = None

    # ── Filtering and hover ───────────────────────────────────────────

    def visible(self):
        return derive(self.graph, self.state)

    def hover(self, node_id):
        if node_id is not None and node_id not in self.graph.nodes:
            logger.debug("Ignoring hover on unknown node %s", node_id)
            node_id = None
        self.state.hovered_node_id = node_id
        self._emit_frame()

    def set_search(self, term):
        self.state.search_term = term or ""
        self._emit_frame()

    def set_type_visible(self, kind, visible):
        if kind not in NODE_KINDS:
            raise ValueError(f"Unknown node type: {kind}")
        self.state.type_visibility[kind] = bool(visible)
        self._emit_frame()

    # ── Viewport ──────────────────────────────────────────────────────

    def zoom(self, factor, cx=0.0, cy=0.0):
        self.viewport.zoom(factor, cx, cy)
        self._emit_frame()

    def pan(self, dx, dy):
        self.viewport.pan(dx, dy)
        self._emit_frame()

    def resize(self, width, height):
        self.bounds = (width, height)
        if self.simulation is not None:
            self.simulation.width, self.simulation.height = width, height

    # ── Dragging ──────────────────────────────────────────────────────

    def drag_start(self, node_id, px, py):
        """Grab a visible node at screen point (px, py)."""
        if self.dragging is not None:
            self.drag_end()
        if self.simulation is None or node_id not in self.visible().node_ids:
            logger.debug("Ignoring drag on %s", node_id)
            return False
        self.dragging = node_id
        self.simulation.pin(node_id, *self.viewport.to_scene(px, py))
        return True

    def drag_move(self, px, py):
        if self.dragging is None:
            return False
        self.simulation.pin(self.dragging, *self.viewport.to_scene(px, py))
        return True

    def drag_end(self):
        if self.dragging is None:
            return False
        self.simulation.unpin(self.dragging)
        self.dragging = None
        return True

    # ── Selection ─────────────────────────────────────────────────────

    def click(self, node_id):
        """Select a publication node and notify the host.

        Returns the emitted PublicationSelected event, or None when the node
        is not a publication.
        """
        node = self.graph.get(node_id)
        if node is None or node.kind != PUBLICATION:
            return None
        self.state.selected_node_id = node_id
        publication = self._by_id.get(node.publication_id) or node.to_publication()
        event = PublicationSelected(publication)
        if self.on_publication_selected is not None:
            self.on_publication_selected(event)
        return event

    # ── Rendering ─────────────────────────────────────────────────────

    def frame(self):
        """Render-ready snapshot of the visible graph at the live positions."""
        frame = {
            "placeholder": self.graph.is_empty(),
            "focus": self.focused.id if self.focused else None,
            "counts": type_counts(self.graph),
            "legend": legend(self.graph),
            "transform": self.viewport.to_dict(),
            "hovered": self.state.hovered_node_id,
            "selected": self.state.selected_node_id,
            "nodes": [],
            "links": [],
        }
        if frame["placeholder"]:
            frame["message"] = PLACEHOLDER_MESSAGE
            return frame

        visible = self.visible()
        positions = self.simulation.positions() if self.simulation else {}
        for node in visible.nodes:
            x, y = positions.get(node.id, (0.0, 0.0))
            data = node_to_dict(node)
            data.update({
                "x": x,
                "y": y,
                "radius": collision_radius(node),
                "opacity": visible.node_opacity(node.id),
            })
            frame["nodes"].append(data)
        for i, edge in enumerate(visible.edges):
            data = edge_to_dict(edge)
            data["opacity"] = visible.edge_opacity(i)
            frame["links"].append(data)
        frame["settled"] = not (self.simulation and self.simulation.is_hot)
        return frame

    def _handle_tick(self, simulation):
        if simulation is self.simulation:
            self._emit_frame()

    def _emit_frame(self):
        if self.on_frame is not None:
            self.on_frame(self.frame())
