"""Pydantic models for the card tree and Anki package rows."""

from knowviz.models.deck_models import *

__all__ = [
    "Card",
    "Deck",
    "Section",
    "ExportRequest",
    "DeckRow",
    "NoteRow",
    "CardRow",
    "CollectionMeta",
    "Collection",
    "MediaEntry",
    "MediaBundle",
    "ExportResult",
    "MediaFile",
    "ApkgNote",
    "ApkgCard",
]
