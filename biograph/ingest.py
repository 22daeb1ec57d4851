"""Load the publication corpus from CSV and tag records by keyword."""

import csv
import http.client
import io
import logging
import urllib.error
import urllib.request
from collections import Counter
from pathlib import Path

from .config import (
    CATEGORY_KEYWORDS,
    CORPUS_TIMEOUT,
    DEFAULT_CATEGORY,
    DEFAULT_ORGANISM,
    ORGANISM_KEYWORDS,
    SAMPLE_PUBLICATIONS,
)
from .models import Publication

logger = logging.getLogger(__name__)


def _first_match(title, table, default):
    title_lower = title.lower()
    for label, keywords in table:
        if any(k in title_lower for k in keywords):
            return label
    return default


def categorize_publication(title):
    """Assign a research category from title keywords."""
    return _first_match(title, CATEGORY_KEYWORDS, DEFAULT_CATEGORY)


def extract_organism(title):
    """Guess the studied organism from title keywords."""
    return _first_match(title, ORGANISM_KEYWORDS, DEFAULT_ORGANISM)


def parse_corpus_csv(text):
    """Parse corpus CSV text into Publication records.

    The first row is a header. Column 0 is the title, column 1 the link.
    Rows with a blank title are skipped; ids are assigned 1.. over kept rows.
    """
    reader = csv.reader(io.StringIO(text))
    next(reader, None)

    publications = []
    for row in reader:
        if not row:
            continue
        title = row[0].strip()
        if not title:
            continue
        link = row[1].strip() if len(row) > 1 else ""
        publications.append(Publication(
            id=len(publications) + 1,
            title=title,
            link=link,
            category=categorize_publication(title),
            organism=extract_organism(title),
        ))
    return publications


def sample_corpus():
    return [Publication(id=i + 1, **p) for i, p in enumerate(SAMPLE_PUBLICATIONS)]


def fetch_corpus_csv(url, timeout=CORPUS_TIMEOUT):
    req = urllib.request.Request(url, headers={"User-Agent": "biograph/1.0"})
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return resp.read().decode("utf-8", errors="replace")


def load_corpus(path=None, url=None):
    """Load the corpus from a local CSV file or a URL.

    Falls back to the built-in sample publications when neither source
    yields any records.
    """
    try:
        if path:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
            source = str(path)
        elif url:
            text = fetch_corpus_csv(url)
            source = url
        else:
            text, source = "", None
        publications = parse_corpus_csv(text) if text else []
    except (OSError, urllib.error.URLError, http.client.HTTPException, csv.Error,
            ValueError) as e:
        logger.warning("Could not load corpus from %s: %s", path or url, e)
        publications = []

    if not publications:
        logger.warning("Using %d sample publications", len(SAMPLE_PUBLICATIONS))
        return sample_corpus()

    logger.info("Loaded %d publications from %s", len(publications), source)
    return publications


def filter_publications(corpus, search="", category="all", organism="all"):
    """Filter the listing by title search, category and organism."""
    term = (search or "").strip().lower()
    return [
        pub for pub in corpus
        if pub.title
        and (not term or term in pub.title.lower())
        and (category in (None, "", "all") or pub.category == category)
        and (organism in (None, "", "all") or pub.organism == organism)
    ]


def category_stats(corpus, top=5):
    """Most common categories as (category, count) pairs."""
    return Counter(pub.category for pub in corpus).most_common(top)
