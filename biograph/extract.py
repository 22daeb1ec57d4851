"""Concept extraction and author synthesis from publication metadata."""

import re

from .config import CONCEPT_VOCABULARY, FIRST_NAMES, SURNAMES


def label_case(term):
    """Capitalize the first letter, lowercase the rest ("dna" -> "Dna")."""
    return term[:1].upper() + term[1:].lower()


def concept_key(label):
    """Normalize a concept label for deduplication."""
    return label.strip().lower()


def slugify(text):
    """Convert a display name to an id-safe slug."""
    s = text.lower().strip()
    s = re.sub(r"[^a-z0-9]+", "_", s)
    return s.strip("_")


def truncate(text, max_len):
    """Shorten text for display, appending an ellipsis when cut."""
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def extract_concepts(title, category, vocabulary=CONCEPT_VOCABULARY):
    """Return the topical concept labels for a publication.

    The category always comes first, followed by every vocabulary term that
    appears as a case-insensitive substring of the title. Labels are unique
    by ``concept_key`` and keep first-seen order.
    """
    concepts = []
    seen = set()

    candidates = [category] if category and category.strip() else []
    title_lower = (title or "").lower()
    candidates.extend(label_case(term) for term in vocabulary if term in title_lower)

    for label in candidates:
        key = concept_key(label)
        if key not in seen:
            seen.add(key)
            concepts.append(label.strip())
    return concepts


def synthesize_authors(publication, first_names=FIRST_NAMES, surnames=SURNAMES):
    """Derive a deterministic list of stand-in author names from a publication id.

    Author count is ``(id mod 3) + 1``; author ``i`` takes first name
    ``(id + 3i) mod len(first_names)`` and surname ``(id + 5i) mod len(surnames)``.
    """
    pid = publication.id
    count = (pid % 3) + 1
    return [
        f"{first_names[(pid + i * 3) % len(first_names)]} "
        f"{surnames[(pid + i * 5) % len(surnames)]}"
        for i in range(count)
    ]
