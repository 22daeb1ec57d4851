"""Build the focused publication graph and derive summary views from it."""

import logging
from collections import Counter

from .config import (
    CENTRAL_LABEL_LENGTH,
    MAX_RELATED_PUBLICATIONS,
    RELATED_LABEL_LENGTH,
    TYPE_COLORS,
    TYPE_LABELS,
)
from .extract import concept_key, extract_concepts, slugify, synthesize_authors, truncate
from .models import (
    AUTHOR,
    AUTHORED,
    NODE_KINDS,
    PUBLICATION,
    STUDIES,
    AuthorNode,
    ConceptNode,
    Graph,
    PublicationNode,
)

logger = logging.getLogger(__name__)


def publication_node_id(publication_id):
    return f"pub_{publication_id}"


def author_node_id(name):
    return f"author_{slugify(name)}"


def concept_node_id(label):
    return f"concept_{concept_key(label)}"


def usable_corpus(corpus):
    """Drop records without a title, logging each one skipped."""
    kept = []
    for pub in corpus:
        if pub is None or not (pub.title or "").strip():
            logger.debug("Skipping publication without a title: %r", pub)
            continue
        kept.append(pub)
    return kept


def find_related(corpus, focus, concepts, limit=MAX_RELATED_PUBLICATIONS):
    """Select publications sharing the focus category or any focus concept.

    Corpus order is preserved and at most ``limit`` entries are returned.
    """
    focus_keys = {concept_key(c) for c in concepts}
    related = []
    for pub in corpus:
        if len(related) >= limit:
            break
        if pub.id == focus.id:
            continue
        if pub.category == focus.category:
            related.append(pub)
            continue
        pub_keys = {concept_key(c) for c in extract_concepts(pub.title, pub.category)}
        if pub_keys & focus_keys:
            related.append(pub)
    return related


def _add_publication(graph, pub, is_central):
    length = CENTRAL_LABEL_LENGTH if is_central else RELATED_LABEL_LENGTH
    return graph.add_node(PublicationNode(
        id=publication_node_id(pub.id),
        label=truncate(pub.title, length),
        full_title=pub.title,
        publication_id=pub.id,
        category=pub.category,
        organism=pub.organism,
        link=pub.link,
        is_central=is_central,
    ))


def _add_authors(graph, pub, pub_node, is_secondary):
    for name in synthesize_authors(pub):
        author = graph.add_node(AuthorNode(id=author_node_id(name), label=name))
        author.linked_publication_ids.add(pub.id)
        graph.add_edge(author.id, pub_node.id, AUTHORED, is_secondary)


def build_graph(corpus, focus):
    """Build the knowledge graph anchored at ``focus``.

    Args:
        corpus: list of Publication records
        focus: the selected Publication, or None

    Returns:
        Graph with the central publication, its concepts and authors, and up
        to MAX_RELATED_PUBLICATIONS related publications linked through
        secondary edges. An absent focus gives an empty Graph.
    """
    graph = Graph()
    if focus is None or not (focus.title or "").strip():
        return graph

    corpus = usable_corpus(corpus)
    central = _add_publication(graph, focus, is_central=True)

    concepts = extract_concepts(focus.title, focus.category)
    concept_ids = {}
    for label in concepts:
        node = graph.add_node(ConceptNode(id=concept_node_id(label), label=label))
        concept_ids[concept_key(label)] = node.id
        graph.add_edge(central.id, node.id, STUDIES)

    _add_authors(graph, focus, central, is_secondary=False)

    related = find_related(corpus, focus, concepts)
    for pub in related:
        pub_node = _add_publication(graph, pub, is_central=False)
        for label in extract_concepts(pub.title, pub.category):
            concept_id = concept_ids.get(concept_key(label))
            if concept_id is not None:
                graph.add_edge(pub_node.id, concept_id, STUDIES, is_secondary=True)
        _add_authors(graph, pub, pub_node, is_secondary=True)

    logger.debug(
        "Built graph for publication %s: %d nodes, %d edges, %d related",
        focus.id, len(graph.nodes), len(graph.edges), len(related),
    )
    return graph


def node_type(node):
    """Rendering type: publications split into central and related."""
    if node.kind == PUBLICATION and node.is_central:
        return "central"
    return node.kind


def type_counts(graph):
    """Count nodes per kind over the full, unfiltered graph."""
    counts = Counter(node.kind for node in graph.nodes.values())
    return {kind: counts.get(kind, 0) for kind in NODE_KINDS}


def legend(graph):
    """Legend entries (label, color, count) for each node kind."""
    counts = type_counts(graph)
    return [
        {
            "type": kind,
            "label": TYPE_LABELS[kind],
            "color": TYPE_COLORS[kind],
            "count": counts[kind],
        }
        for kind in NODE_KINDS
    ]


def node_to_dict(node):
    data = {
        "id": node.id,
        "label": node.label,
        "type": node.kind,
        "color": TYPE_COLORS[node_type(node)],
    }
    if node.kind == PUBLICATION:
        data.update({
            "publication_id": node.publication_id,
            "full_title": node.full_title,
            "category": node.category,
            "organism": node.organism,
            "link": node.link,
            "is_central": node.is_central,
        })
    elif node.kind == AUTHOR:
        data["publications"] = sorted(node.linked_publication_ids)
    return data


def edge_to_dict(edge):
    return {
        "source": edge.source,
        "target": edge.target,
        "kind": edge.kind,
        "is_secondary": edge.is_secondary,
    }
