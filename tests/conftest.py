"""Shared fixtures for knowviz tests."""

import random

import pytest

from knowviz.config import Settings
from knowviz.models.deck_models import Section

FIXED_NOW = 1_700_000_000.5


def fixed_clock() -> float:
    return FIXED_NOW


@pytest.fixture
def clock():
    return fixed_clock


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_file=tmp_path / "data" / "decks.json",
        temp_root=tmp_path / "exports",
        cleanup_delay=0,
    )


@pytest.fixture
def sections_data():
    """Two sections with one deck each, as the editor sends them."""
    return [
        {
            "id": "section-1",
            "title": "Data Intensive Apps",
            "decks": [
                {
                    "id": "deck-1",
                    "title": "Basics",
                    "cards": [
                        {
                            "id": 101,
                            "displayId": "BAS-01",
                            "front": "What is **Reliability**?",
                            "back": "Working *correctly* when things go wrong.",
                            "category": "Basics",
                            "frontImage": None,
                            "backImage": None,
                        },
                        {
                            "id": 102,
                            "displayId": "BAS-02",
                            "front": "What is <b>Scalability</b>?",
                            "back": "Coping with increased load.",
                            "category": "Consistency",
                            "frontImage": None,
                            "backImage": None,
                        },
                    ],
                }
            ],
        },
        {
            "id": "section-2",
            "title": "Storage",
            "decks": [
                {
                    "id": "deck-2",
                    "title": "Engines",
                    "cards": [
                        {
                            "id": 201,
                            "displayId": "STO-01",
                            "front": "What is an LSM tree?",
                            "back": "Log-structured merge tree.",
                            "category": None,
                            "frontImage": None,
                            "backImage": None,
                        }
                    ],
                }
            ],
        },
    ]


@pytest.fixture
def sections(sections_data):
    return [Section.model_validate(section) for section in sections_data]
