"""Core functionality for knowviz."""

from .anki_db import setup_anki_connection
from .collection import build
from .errors import (
    ExportError,
    MediaDecodeError,
    PackagingError,
    RowInsertError,
    SerializationFatalError,
    ValidationError,
)
from .export import export_anki_package, remove_export_dir, schedule_cleanup
from .fields import encode_card, field_checksum, plain_text
from .import_apkg import (
    get_apkg_deck_names,
    load_cards_from_apkg,
    load_collection_row,
    load_media_manifest,
    load_notes_from_apkg,
)
from .media import MediaCollector, collect_media
from .package import pack
from .serialize import serialize

__all__ = [
    "setup_anki_connection",
    "build",
    "encode_card",
    "field_checksum",
    "plain_text",
    "MediaCollector",
    "collect_media",
    "serialize",
    "pack",
    "export_anki_package",
    "remove_export_dir",
    "schedule_cleanup",
    "get_apkg_deck_names",
    "load_cards_from_apkg",
    "load_collection_row",
    "load_media_manifest",
    "load_notes_from_apkg",
    "ExportError",
    "ValidationError",
    "MediaDecodeError",
    "RowInsertError",
    "SerializationFatalError",
    "PackagingError",
]
