"""Tests for biograph.extract — concept extraction and author synthesis."""

import pytest

from biograph.models import Publication


class TestExtractConcepts:
    def test_category_always_first(self):
        from biograph.extract import extract_concepts

        concepts = extract_concepts("An Unrelated Title", "Plant Biology")
        assert concepts == ["Plant Biology"]

    def test_vocabulary_terms_label_cased(self):
        from biograph.extract import extract_concepts

        concepts = extract_concepts("Bone Density in Microgravity", "Bone & Musculoskeletal")
        assert concepts == ["Bone & Musculoskeletal", "Microgravity", "Bone"]

    def test_case_insensitive_substring(self):
        from biograph.extract import extract_concepts

        concepts = extract_concepts("RADIATION-induced DNA damage in cells", "Radiation Biology")
        assert "Radiation" in concepts
        assert "Dna" in concepts
        # "cells" contains "cell"
        assert "Cell" in concepts

    def test_no_duplicate_when_category_matches_term(self):
        from biograph.extract import extract_concepts

        concepts = extract_concepts("Radiation exposure", "radiation")
        assert [c.lower() for c in concepts].count("radiation") == 1

    def test_blank_category_skipped(self):
        from biograph.extract import extract_concepts

        assert extract_concepts("Plant growth", "  ") == ["Plant", "Growth"]

    def test_custom_vocabulary(self):
        from biograph.extract import extract_concepts

        concepts = extract_concepts("Yeast in orbit", "General", vocabulary=["yeast", "orbit"])
        assert concepts == ["General", "Yeast", "Orbit"]


class TestSynthesizeAuthors:
    def test_count_follows_id(self):
        from biograph.extract import synthesize_authors

        assert len(synthesize_authors(Publication(id=3, title="t"))) == 1
        assert len(synthesize_authors(Publication(id=4, title="t"))) == 2
        assert len(synthesize_authors(Publication(id=5, title="t"))) == 3

    def test_name_indices(self):
        from biograph.extract import synthesize_authors

        assert synthesize_authors(Publication(id=1, title="t")) == ["Michael Chen", "Emily Patel"]

    def test_deterministic(self):
        from biograph.extract import synthesize_authors

        pub = Publication(id=42, title="t")
        assert synthesize_authors(pub) == synthesize_authors(pub)

    def test_custom_pools(self):
        from biograph.extract import synthesize_authors

        names = synthesize_authors(Publication(id=2, title="t"),
                                   first_names=["Ada", "Alan"], surnames=["Byron", "Turing"])
        assert names == ["Ada Byron", "Alan Turing", "Ada Byron"]


class TestHelpers:
    @pytest.mark.parametrize("text,expected", [
        ("Sarah Chen", "sarah_chen"),
        ("  Mary-Jane O'Neil ", "mary_jane_o_neil"),
    ])
    def test_slugify(self, text, expected):
        from biograph.extract import slugify

        assert slugify(text) == expected

    def test_truncate(self):
        from biograph.extract import truncate

        assert truncate("short", 10) == "short"
        assert truncate("a" * 12, 10) == "a" * 10 + "..."
