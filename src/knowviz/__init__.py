"""Knowledge Visualizer - flashcard store and Anki package exporter."""

from knowviz.core import *
from knowviz.models import *

__all__ = [
    # Collection building
    "build",
    "encode_card",
    "field_checksum",
    "plain_text",
    "MediaCollector",
    "collect_media",
    # Serialization and packaging
    "serialize",
    "pack",
    "export_anki_package",
    "remove_export_dir",
    "schedule_cleanup",
    # Reading packages back
    "get_apkg_deck_names",
    "load_cards_from_apkg",
    "load_collection_row",
    "load_media_manifest",
    "load_notes_from_apkg",
    # Database
    "setup_anki_connection",
    # Errors
    "ExportError",
    "ValidationError",
    "MediaDecodeError",
    "RowInsertError",
    "SerializationFatalError",
    "PackagingError",
    # Models
    "Card",
    "Deck",
    "Section",
    "ExportRequest",
    "Collection",
    "CollectionMeta",
    "DeckRow",
    "NoteRow",
    "CardRow",
    "MediaBundle",
    "MediaEntry",
    "ExportResult",
    "ApkgNote",
    "ApkgCard",
]
