"""Derive the visible subgraph and hover emphasis from interaction state."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from .config import EDGE_DIM_OPACITY, NODE_DIM_OPACITY, SECONDARY_EDGE_OPACITY
from .models import NODE_KINDS, PUBLICATION, GraphEdge, GraphNode


def default_visibility():
    return {kind: True for kind in NODE_KINDS}


@dataclass
class InteractionState:
    hovered_node_id: Optional[str] = None
    selected_node_id: Optional[str] = None
    search_term: str = ""
    type_visibility: Dict[str, bool] = field(default_factory=default_visibility)


@dataclass(frozen=True)
class VisibleGraph:
    nodes: Tuple[GraphNode, ...] = ()
    edges: Tuple[GraphEdge, ...] = ()
    highlighted: FrozenSet[str] = frozenset()
    dimmed_nodes: FrozenSet[str] = frozenset()
    dimmed_edges: FrozenSet[int] = frozenset()

    @property
    def node_ids(self):
        return {n.id for n in self.nodes}

    def node_opacity(self, node_id):
        return NODE_DIM_OPACITY if node_id in self.dimmed_nodes else 1.0

    def edge_opacity(self, index):
        """Opacity of ``self.edges[index]``."""
        if index in self.dimmed_edges:
            return EDGE_DIM_OPACITY
        return SECONDARY_EDGE_OPACITY if self.edges[index].is_secondary else 1.0


def matches_search(node, term):
    """Case-insensitive substring match on the label (and full title for publications)."""
    term = term.lower()
    if not term:
        return True
    if term in node.label.lower():
        return True
    return node.kind == PUBLICATION and term in node.full_title.lower()


def is_node_visible(node, state):
    if not state.type_visibility.get(node.kind, True):
        return False
    return matches_search(node, state.search_term)


def neighbors(edges, node_id):
    """Ids adjacent to ``node_id`` through ``edges``, ignoring direction."""
    return {e.other(node_id) for e in edges if e.touches(node_id)}


def derive(graph, state):
    """Project ``graph`` through ``state`` into a VisibleGraph.

    A node is visible when its type is enabled and it matches the search
    term; an edge when both endpoints are visible. While a visible node is
    hovered, every visible node outside its neighborhood and every edge not
    touching it is dimmed.
    """
    nodes = tuple(n for n in graph.nodes.values() if is_node_visible(n, state))
    visible_ids = {n.id for n in nodes}
    edges = tuple(
        e for e in graph.edges
        if e.source in visible_ids and e.target in visible_ids
    )

    hovered = state.hovered_node_id
    if hovered is None or hovered not in visible_ids:
        return VisibleGraph(nodes=nodes, edges=edges)

    highlighted = frozenset(neighbors(edges, hovered) | {hovered})
    dimmed_nodes = frozenset(visible_ids - highlighted)
    dimmed_edges = frozenset(i for i, e in enumerate(edges) if not e.touches(hovered))
    return VisibleGraph(
        nodes=nodes,
        edges=edges,
        highlighted=highlighted,
        dimmed_nodes=dimmed_nodes,
        dimmed_edges=dimmed_edges,
    )
