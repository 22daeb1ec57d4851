"""Shared test fixtures for the publication graph test suite."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from biograph.models import Publication

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_csv_path():
    return FIXTURES_DIR / "sample_corpus.csv"


@pytest.fixture
def bone_publication():
    return Publication(
        id=1,
        title="Bone Density in Microgravity",
        link="https://www.ncbi.nlm.nih.gov/pmc/articles/PMC000001/",
        category="Bone & Musculoskeletal",
        organism="Human",
    )


@pytest.fixture
def sample_corpus():
    """A small mixed corpus; several entries share concepts with entry 1."""
    rows = [
        ("Effects of Microgravity on Bone Density in Long-Duration Spaceflight",
         "Bone & Musculoskeletal", "Human"),
        ("Plant Growth and Development in Simulated Martian Conditions",
         "Plant Biology", "Arabidopsis"),
        ("Radiation-Induced DNA Damage in Space Environment Using Cell Culture Models",
         "Radiation Biology", "Cell Culture"),
        ("Muscle Atrophy Prevention During Extended Space Missions",
         "Cardiovascular & Muscle", "Human"),
        ("Immune System Response to Microgravity in Mouse Models",
         "Immunology", "Mouse"),
        ("Osteoclast Activity in Hindlimb Unloaded Rats",
         "Bone & Musculoskeletal", "Rat"),
        ("Cardiac Remodeling After Spaceflight",
         "Cardiovascular & Muscle", "Human"),
    ]
    return [
        Publication(id=i + 1, title=title, link=f"https://example.org/pmc/{i + 1}",
                    category=category, organism=organism)
        for i, (title, category, organism) in enumerate(rows)
    ]


@pytest.fixture
def radiation_corpus():
    """Ten publications that all share the Radiation Biology category."""
    return [
        Publication(id=i, title=f"Heavy Ion Exposure Study {i}", link="",
                    category="Radiation Biology", organism="Mouse")
        for i in range(1, 11)
    ]


@pytest.fixture
def mock_openai_client():
    """Mock OpenAI client for analysis chat requests."""
    client = MagicMock()

    mock_message = MagicMock()
    mock_message.content = json.dumps({
        "summary": "Studies bone loss in microgravity.",
        "problemsAddressed": ["Bone density loss during spaceflight"],
        "keyFindings": ["Reduced osteoblast activity"],
        "researchGoals": ["Quantify bone loss"],
        "futureDirections": ["Countermeasure trials"],
        "methodology": ["DXA scans"],
        "impact": "Informs astronaut health protocols",
    })
    mock_choice = MagicMock()
    mock_choice.message = mock_message
    mock_chat_response = MagicMock()
    mock_chat_response.choices = [mock_choice]
    client.chat.completions.create.return_value = mock_chat_response

    return client
