"""Serialize a collection into Anki's ``collection.anki2`` SQLite file."""

import json
import logging
import sqlite3
import tempfile
from pathlib import Path

from knowviz.core.errors import RowInsertError, SerializationFatalError
from knowviz.core.schema import (
    TABLES,
    column_names,
    create_index_sql,
    create_table_sql,
    insert_sql,
)
from knowviz.models.deck_models import CardRow, Collection, CollectionMeta, NoteRow

logger = logging.getLogger(__name__)

COLLECTION_FILENAME = "collection.anki2"


def to_json_text(value) -> str:
    """Compact JSON, matching what Anki itself writes into ``col``."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def col_row(meta: CollectionMeta) -> tuple:
    values = meta.model_dump()
    for blob in ("conf", "models", "decks", "dconf", "tags"):
        values[blob] = to_json_text(values[blob])
    return tuple(values[name] for name in column_names("col"))


def note_row(note: NoteRow) -> tuple:
    return tuple(getattr(note, name) for name in column_names("notes"))


def card_row(card: CardRow) -> tuple:
    return tuple(getattr(card, name) for name in column_names("cards"))


def create_schema(conn: sqlite3.Connection) -> None:
    for table in TABLES:
        conn.execute(create_table_sql(table))
    for statement in create_index_sql():
        conn.execute(statement)


def insert_note_and_card(conn: sqlite3.Connection, note: NoteRow, card: CardRow) -> None:
    """Insert one note with its card, or neither.

    Raises:
        RowInsertError: if either insert fails.
    """
    conn.execute("SAVEPOINT card_row")
    try:
        conn.execute(insert_sql("notes"), note_row(note))
        conn.execute(insert_sql("cards"), card_row(card))
    except sqlite3.Error as e:
        conn.execute("ROLLBACK TO card_row")
        conn.execute("RELEASE card_row")
        raise RowInsertError(f"Note {note.id}: {e}") from e
    conn.execute("RELEASE card_row")


def write_collection(collection: Collection, db_path: Path) -> int:
    """Write ``collection`` to a new SQLite file. Returns the number of notes written.

    Raises:
        SerializationFatalError: if the database or its schema cannot be created.
    """
    try:
        conn = sqlite3.connect(str(db_path), isolation_level=None)
    except sqlite3.Error as e:
        raise SerializationFatalError(f"Cannot create collection database: {e}") from e

    try:
        try:
            conn.execute("BEGIN")
            create_schema(conn)
            conn.execute(insert_sql("col"), col_row(collection.meta))
        except sqlite3.Error as e:
            raise SerializationFatalError(f"Cannot create collection schema: {e}") from e

        written = 0
        for note, card in zip(collection.notes, collection.cards, strict=True):
            try:
                insert_note_and_card(conn, note, card)
            except RowInsertError as e:
                logger.warning(f"Skipping row: {e}")
                continue
            written += 1

        try:
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise SerializationFatalError(f"Cannot commit collection: {e}") from e
    finally:
        conn.close()

    logger.debug(f"Wrote {written} notes to {db_path}")
    return written


def serialize(collection: Collection) -> bytes:
    """Return the bytes of a ``collection.anki2`` database for ``collection``."""
    with tempfile.TemporaryDirectory() as temp_dir:
        db_path = Path(temp_dir) / COLLECTION_FILENAME
        write_collection(collection, db_path)
        try:
            return db_path.read_bytes()
        except OSError as e:
            raise SerializationFatalError(f"Cannot read serialized collection: {e}") from e
