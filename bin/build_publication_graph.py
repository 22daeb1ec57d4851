#!/usr/bin/env python3
"""
build_publication_graph.py — Build the knowledge graph around one publication.

Loads the publication corpus (local CSV or the NASA bioscience CSV), builds the
graph of related publications, synthesized authors and concepts around the
focused publication, settles the force layout, and writes a standalone HTML
snapshot.

Usage:
    python3 build_publication_graph.py --focus <id>
    python3 build_publication_graph.py --focus <id> --csv <path> --out graph.html
    python3 build_publication_graph.py --focus <id> --search bone --hide author
    python3 build_publication_graph.py --list [--csv <path>]
"""

import logging
import sys
from pathlib import Path

from biograph.config import CORPUS_URL, DEFAULT_HEIGHT, DEFAULT_WIDTH
from biograph.ingest import category_stats, load_corpus
from biograph.interaction import Explorer
from biograph.models import NODE_KINDS
from biograph.visualize import generate_html


def main():
    args = sys.argv[1:]

    if not args or args[0] in ('--help', '-h'):
        print(__doc__)
        return

    focus_id = None
    csv_path = None
    out_file = None
    search = ""
    hidden = []
    list_only = False

    i = 0
    while i < len(args):
        if args[i] == '--focus' and i + 1 < len(args):
            try:
                focus_id = int(args[i + 1])
            except ValueError:
                print(f"Error: --focus expects a publication id, got {args[i + 1]!r}")
                sys.exit(1)
            i += 2
        elif args[i] == '--csv' and i + 1 < len(args):
            csv_path = Path(args[i + 1])
            i += 2
        elif args[i] == '--out' and i + 1 < len(args):
            out_file = Path(args[i + 1])
            i += 2
        elif args[i] == '--search' and i + 1 < len(args):
            search = args[i + 1]
            i += 2
        elif args[i] == '--hide' and i + 1 < len(args):
            hidden.append(args[i + 1])
            i += 2
        elif args[i] == '--list':
            list_only = True
            i += 1
        else:
            i += 1

    for kind in hidden:
        if kind not in NODE_KINDS:
            print(f"Error: --hide expects one of {', '.join(NODE_KINDS)}, got {kind!r}")
            sys.exit(1)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    corpus = load_corpus(path=csv_path, url=None if csv_path else CORPUS_URL)
    print(f"Corpus: {len(corpus)} publications")

    if list_only:
        for category, count in category_stats(corpus, top=None):
            print(f"  {category:35s} {count:>6}")
        print()
        for pub in corpus[:50]:
            print(f"  {pub.id:>5}  {pub.title[:90]}")
        return

    if focus_id is None:
        print("Error: --focus <id> is required")
        print(__doc__)
        sys.exit(1)

    explorer = Explorer(corpus, bounds=(DEFAULT_WIDTH, DEFAULT_HEIGHT))
    publication = explorer.find_publication(focus_id)
    if publication is None:
        print(f"Error: no publication with id {focus_id}")
        sys.exit(1)

    graph = explorer.focus(publication, animate=False)
    explorer.set_search(search)
    for kind in hidden:
        explorer.set_type_visible(kind, False)

    frame = explorer.frame()
    counts = frame["counts"]
    title = f"{publication.title[:60]} ({counts['publication']}p, {counts['author']}a, {counts['concept']}c)"
    html, n_nodes, n_links = generate_html(frame, title, DEFAULT_WIDTH, DEFAULT_HEIGHT)

    if out_file is None:
        out_file = Path(f"publication_{focus_id}_graph.html")
    out_file.write_text(html)

    print(f"\nFocus: [{publication.id}] {publication.title}")
    print(f"  Category: {publication.category}  Organism: {publication.organism}")
    print(f"  {len(graph.nodes)} nodes, {len(graph.edges)} edges "
          f"(layout settled in {explorer.simulation.ticks} ticks)")
    for kind in NODE_KINDS:
        print(f"  {kind:12s} {counts[kind]:>4}")
    print(f"\nVisualization: {n_nodes} nodes, {n_links} edges -> {out_file}")


if __name__ == "__main__":
    main()
