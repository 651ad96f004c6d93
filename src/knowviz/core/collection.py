"""Build an in-memory Anki collection from the editor's section tree."""

import logging
import random
import time
from collections.abc import Callable, Iterable
from typing import Any

import genanki

from knowviz.core.errors import RowInsertError, ValidationError
from knowviz.core.fields import encode_card
from knowviz.core.ids import IdGenerator
from knowviz.core.media import MediaCollector
from knowviz.core.schema import SCHEMA_VERSION
from knowviz.models.deck_models import Collection, CollectionMeta, DeckRow, Section

logger = logging.getLogger(__name__)

MODEL_NAME = "Knowledge Visualizer"
DEFAULT_DECK_ID = 1
DEFAULT_DECK_NAME = "Default"
DEFAULT_CONF_ID = 1

MODEL_CSS = (
    ".card { font-family: arial; font-size: 20px; text-align: center; "
    "color: black; background-color: white; }"
)


def deck_path(section_title: str, deck_title: str) -> str:
    """Anki nests decks through ``::`` separated names."""
    return f"{DEFAULT_DECK_NAME}::{section_title}::{deck_title}"


def unique_name(name: str, used: set[str]) -> str:
    """Return ``name``, or ``name (2)``, ``name (3)``... if it is already taken."""
    candidate = name
    n = 2
    while candidate in used:
        candidate = f"{name} ({n})"
        n += 1
    used.add(candidate)
    return candidate


def create_model(model_id: int) -> genanki.Model:
    """The single Front/Back note type shared by every exported note."""
    return genanki.Model(
        model_id,
        MODEL_NAME,
        fields=[
            {"name": "Front", "font": "Arial", "size": 20},
            {"name": "Back", "font": "Arial", "size": 20},
        ],
        templates=[
            {
                "name": "Card 1",
                "qfmt": "{{Front}}",
                "afmt": "{{FrontSide}}<hr id=answer>{{Back}}",
            },
        ],
        css=MODEL_CSS,
    )


def default_deck_config(mod: int) -> dict[str, Any]:
    return {
        "id": DEFAULT_CONF_ID,
        "mod": mod,
        "name": DEFAULT_DECK_NAME,
        "usn": 0,
        "maxTaken": 60,
        "autoplay": True,
        "timer": 0,
        "replayq": True,
        "new": {
            "delays": [1, 10],
            "ints": [1, 4, 7],
            "initialFactor": 2500,
            "separate": True,
            "order": 1,
            "perDay": 20,
            "bury": True,
        },
        "lapse": {"delays": [10], "mult": 0.5, "minInt": 1, "leechFails": 8, "leechAction": 0},
        "rev": {
            "perDay": 200,
            "hardFactor": 1.2,
            "ivlFct": 1,
            "maxIvl": 36500,
            "ease4": 1.3,
            "bury": True,
            "minSpace": 1,
            "fuzz": 0.05,
        },
    }


def collection_config(model_id: int, next_pos: int) -> dict[str, Any]:
    return {
        "activeDecks": [DEFAULT_DECK_ID],
        "addToCur": True,
        "collapseTime": 1200,
        "curDeck": DEFAULT_DECK_ID,
        "curModel": str(model_id),
        "dueCounts": True,
        "estTimes": True,
        "newBury": True,
        "newSpread": 0,
        "nextPos": next_pos,
        "sortBackwards": False,
        "sortType": "noteFld",
        "timeLim": 0,
    }


def build(
    sections: Iterable[Section],
    selected_deck_ids: Iterable[str],
    clock: Callable[[], float] = time.time,
    rng: random.Random | None = None,
) -> Collection:
    """Build the collection for the selected decks.

    Decks are visited section by section in input order, and cards in array
    order. That order fixes note/card ids and each card's new-queue position.
    Cards that cannot be encoded are logged and skipped. Deck names that
    repeat get a numeric suffix so Anki does not merge them on import.

    Raises:
        ValidationError: if no deck is selected.
    """
    selected = set(selected_deck_ids)
    if not selected:
        raise ValidationError("No decks selected for export")

    ids = IdGenerator(clock=clock, rng=rng)
    now_s = ids.now_seconds
    model_id = ids.now_ms
    media = MediaCollector()

    decks = [
        DeckRow(
            id=DEFAULT_DECK_ID,
            name=DEFAULT_DECK_NAME,
            mod=now_s,
            browser_collapsed=True,
        )
    ]
    used_names = {DEFAULT_DECK_NAME}
    notes = []
    cards = []
    index = 0

    for section in sections:
        for deck in section.decks:
            if deck.id not in selected:
                continue

            deck_id = ids.generate_id(reserved={DEFAULT_DECK_ID})
            decks.append(
                DeckRow(
                    id=deck_id,
                    name=unique_name(deck_path(section.title, deck.title), used_names),
                    mod=now_s,
                    desc=deck.title,
                )
            )

            for card in deck.cards:
                try:
                    note, card_row = encode_card(
                        card,
                        deck.title,
                        note_id=ids.note_id(index),
                        card_id=ids.card_id(index),
                        deck_id=deck_id,
                        model_id=model_id,
                        due=index,
                        mod=now_s,
                        media=media,
                    )
                except RowInsertError as e:
                    logger.warning(f"Skipping card {card.id} in deck '{deck.title}': {e}")
                    continue
                notes.append(note)
                cards.append(card_row)
                index += 1

    logger.debug(f"Built collection with {len(decks) - 1} decks and {len(notes)} notes")

    meta = CollectionMeta(
        crt=now_s,
        mod=now_s,
        scm=ids.now_ms,
        ver=SCHEMA_VERSION,
        conf=collection_config(model_id, next_pos=len(cards)),
        models={str(model_id): create_model(model_id).to_json(now_s, DEFAULT_DECK_ID)},
        decks={str(row.id): row.to_json() for row in decks},
        dconf={str(DEFAULT_CONF_ID): default_deck_config(now_s)},
    )
    return Collection(
        meta=meta,
        model_id=model_id,
        decks=decks,
        notes=notes,
        cards=cards,
        media_sources=media.sources,
    )
