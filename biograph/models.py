"""Publication records and the graph data model.

Nodes are a closed set of three dataclasses distinguished by their ``kind``
field. Consumers branch on ``node.kind`` and handle all three.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union

PUBLICATION = "publication"
AUTHOR = "author"
CONCEPT = "concept"
NODE_KINDS = (PUBLICATION, AUTHOR, CONCEPT)

STUDIES = "studies"
AUTHORED = "authored"


@dataclass(frozen=True)
class Publication:
    id: int
    title: str
    link: str = ""
    category: str = ""
    organism: str = ""

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "link": self.link,
            "category": self.category,
            "organism": self.organism,
        }


@dataclass
class PublicationNode:
    id: str
    label: str
    full_title: str
    publication_id: int
    category: str
    organism: str
    link: str
    is_central: bool = False
    kind: str = field(default=PUBLICATION, init=False)

    def to_publication(self) -> Publication:
        return Publication(
            id=self.publication_id,
            title=self.full_title,
            link=self.link,
            category=self.category,
            organism=self.organism,
        )


@dataclass
class AuthorNode:
    id: str
    label: str
    linked_publication_ids: Set[int] = field(default_factory=set)
    kind: str = field(default=AUTHOR, init=False)


@dataclass
class ConceptNode:
    id: str
    label: str
    kind: str = field(default=CONCEPT, init=False)


GraphNode = Union[PublicationNode, AuthorNode, ConceptNode]


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    kind: str
    is_secondary: bool = False

    def touches(self, node_id):
        return self.source == node_id or self.target == node_id

    def other(self, node_id):
        return self.target if self.source == node_id else self.source


@dataclass
class Graph:
    """Id-keyed node arena plus an ordered edge list.

    ``add_node`` returns the node already stored under the same id, so
    callers build nodes from semantic identity and let the arena dedup.
    """

    nodes: Dict[str, GraphNode] = field(default_factory=dict)
    edges: List[GraphEdge] = field(default_factory=list)

    def add_node(self, node: GraphNode) -> GraphNode:
        existing = self.nodes.get(node.id)
        if existing is not None:
            return existing
        self.nodes[node.id] = node
        return node

    def add_edge(self, source, target, kind, is_secondary=False) -> Optional[GraphEdge]:
        if source not in self.nodes or target not in self.nodes:
            raise KeyError(f"Edge {source} -> {target} references an unknown node")
        edge = GraphEdge(source, target, kind, is_secondary)
        for e in self.edges:
            if (e.source, e.target, e.kind) == (source, target, kind):
                return None
        self.edges.append(edge)
        return edge

    def get(self, node_id) -> Optional[GraphNode]:
        return self.nodes.get(node_id)

    def is_empty(self):
        return not self.nodes

    @property
    def central(self) -> Optional[PublicationNode]:
        for node in self.nodes.values():
            if node.kind == PUBLICATION and node.is_central:
                return node
        return None
