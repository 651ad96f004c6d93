"""Read back the contents of .apkg files."""

import json
import logging
import re
import sqlite3
import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from knowviz.core.anki_db import setup_anki_connection
from knowviz.models.deck_models import ApkgCard, ApkgNote, MediaFile

logger = logging.getLogger(__name__)

NON_MEDIA_ENTRIES = ["collection.anki2", "collection.anki21", "media"]


def detect_media_in_fields(fields: list[str]) -> list[str]:
    """Detect media file references in note fields.

    Args:
        fields: List of field contents

    Returns:
        List of media file names referenced in the fields
    """
    media_files = []

    for field in fields:
        # Find image references: <img src="filename.jpg">
        img_matches = re.findall(r'<img[^>]+src=["\']([^"\']+)["\']', field, re.IGNORECASE)
        media_files.extend(img_matches)

        # Find audio references: [sound:filename.mp3]
        audio_matches = re.findall(r"\[sound:([^\]]+)\]", field, re.IGNORECASE)
        media_files.extend(audio_matches)

    return list(dict.fromkeys(media_files))


@contextmanager
def open_apkg_collection(apkg_path: Path) -> Iterator[sqlite3.Connection]:
    """Extract the collection database of an .apkg file and connect to it."""
    if not apkg_path.exists():
        raise FileNotFoundError(f"APKG file not found: {apkg_path}")

    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)

        with zipfile.ZipFile(apkg_path, "r") as zip_file:
            names = zip_file.namelist()
            for candidate in ("collection.anki2", "collection.anki21"):
                if candidate in names:
                    zip_file.extract(candidate, temp_path)
                    collection_db = temp_path / candidate
                    break
            else:
                raise ValueError(f"No Anki database found in {apkg_path}")

        with setup_anki_connection(collection_db) as conn:
            yield conn


def load_collection_row(apkg_path: Path) -> dict[str, Any]:
    """Return the ``col`` row with its JSON columns decoded."""
    with open_apkg_collection(apkg_path) as conn:
        row = dict(conn.execute("SELECT * FROM col").fetchone())

    for blob in ("conf", "models", "decks", "dconf", "tags"):
        row[blob] = json.loads(row[blob])
    return row


def get_apkg_deck_names(apkg_path: Path) -> list[str]:
    """Get list of deck names in an .apkg file."""
    decks = load_collection_row(apkg_path)["decks"]
    return [deck_info["name"] for deck_info in decks.values()]


def load_media_manifest(apkg_path: Path) -> dict[str, str]:
    """Return the ``media`` manifest mapping archive names to display filenames."""
    with zipfile.ZipFile(apkg_path, "r") as zip_file:
        return json.loads(zip_file.read("media"))


def load_notes_from_apkg(apkg_path: Path, sort_by_field: bool = False) -> list[ApkgNote]:
    """Load notes from an .apkg file with their referenced media attached.

    Args:
        apkg_path: Path to the .apkg file to load notes from
        sort_by_field: Order by sort field (case and accent insensitive) instead of id
    """
    order = "n.sfld COLLATE unicase" if sort_by_field else "n.id"
    with open_apkg_collection(apkg_path) as conn:
        rows = conn.execute(
            f"""
            SELECT n.id, n.guid, n.mid, n.flds, n.tags, n.sfld, n.csum
            FROM notes n
            ORDER BY {order}
            """
        ).fetchall()

    media_data = {}
    with zipfile.ZipFile(apkg_path, "r") as zip_file:
        for name in zip_file.namelist():
            if name not in NON_MEDIA_ENTRIES:
                media_data[name] = zip_file.read(name)

    notes = []
    for row in rows:
        fields = row["flds"].split("\x1f")  # Anki field separator
        media_files = []
        for filename in detect_media_in_fields(fields):
            if filename in media_data:
                media_files.append(MediaFile(filename=filename, data=media_data[filename]))
            else:
                logger.warning(f"Media file not found: {filename}")

        notes.append(
            ApkgNote(
                id=row["id"],
                guid=row["guid"],
                mid=row["mid"],
                fields=fields,
                tags=row["tags"].split() if row["tags"] else [],
                sfld=str(row["sfld"]),
                csum=row["csum"],
                media_files=media_files,
            )
        )
    return notes


def load_cards_from_apkg(apkg_path: Path) -> list[ApkgCard]:
    """Load cards from an .apkg file, resolving deck names from ``col.decks``."""
    decks = load_collection_row(apkg_path)["decks"]
    with open_apkg_collection(apkg_path) as conn:
        rows = conn.execute(
            "SELECT id, nid, did, ord, type, queue, due FROM cards ORDER BY id"
        ).fetchall()

    return [
        ApkgCard(
            id=row["id"],
            note_id=row["nid"],
            deck_id=row["did"],
            deck_name=decks.get(str(row["did"]), {}).get("name", ""),
            ord=row["ord"],
            type=row["type"],
            queue=row["queue"],
            due=row["due"],
        )
        for row in rows
    ]
