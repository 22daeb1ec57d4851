"""biograph — Publication knowledge graph with an interactive force layout."""

from .config import TYPE_COLORS, CONCEPT_VOCABULARY
from .analyze import analyze_publication, extract_entities
from .extract import extract_concepts, synthesize_authors
from .filters import InteractionState, VisibleGraph, derive
from .graph import build_graph, legend, type_counts
from .ingest import (
    categorize_publication,
    category_stats,
    extract_organism,
    filter_publications,
    load_corpus,
    parse_corpus_csv,
)
from .interaction import Explorer, PublicationSelected, Viewport
from .layout import Simulation, run
from .models import (
    AuthorNode,
    ConceptNode,
    Graph,
    GraphEdge,
    Publication,
    PublicationNode,
)
from .visualize import generate_html

__all__ = [
    "TYPE_COLORS",
    "CONCEPT_VOCABULARY",
    "analyze_publication",
    "extract_entities",
    "extract_concepts",
    "synthesize_authors",
    "InteractionState",
    "VisibleGraph",
    "derive",
    "build_graph",
    "legend",
    "type_counts",
    "categorize_publication",
    "category_stats",
    "extract_organism",
    "filter_publications",
    "load_corpus",
    "parse_corpus_csv",
    "Explorer",
    "PublicationSelected",
    "Viewport",
    "Simulation",
    "run",
    "AuthorNode",
    "ConceptNode",
    "Graph",
    "GraphEdge",
    "Publication",
    "PublicationNode",
    "generate_html",
]
