"""End-to-end export of selected decks to an .apkg file."""

import logging
import random
import re
import shutil
import tempfile
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pydantic
from unidecode import unidecode

from knowviz.config import Settings
from knowviz.core.collection import build
from knowviz.core.errors import ExportError, PackagingError, ValidationError
from knowviz.core.media import collect_media
from knowviz.core.package import pack
from knowviz.core.serialize import COLLECTION_FILENAME, serialize
from knowviz.models.deck_models import ExportRequest, ExportResult

logger = logging.getLogger(__name__)

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._ -]")


def parse_request(body: Any) -> ExportRequest:
    """Validate a decoded JSON request body.

    Raises:
        ValidationError: if the body is malformed or selects no decks.
    """
    if isinstance(body, ExportRequest):
        request = body
    elif not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    else:
        if not body.get("selectedDeckIds"):
            raise ValidationError("No decks selected for export")
        try:
            request = ExportRequest.model_validate(body)
        except pydantic.ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ValidationError(f"Invalid export request: {problems}") from e

    if not request.selected_deck_ids:
        raise ValidationError("No decks selected for export")
    if not request.filename.strip():
        raise ValidationError("Filename must not be empty")
    return request


def safe_filename(name: str) -> str:
    """ASCII-only filename usable inside the staging directory."""
    cleaned = _UNSAFE_CHARS_RE.sub("_", unidecode(name)).strip(" .")
    return cleaned or "export"


def remove_export_dir(path: Path) -> bool:
    """Delete a staging directory. Failures are logged, never raised."""
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.warning(f"Cleanup of {path} failed: {e}")
        return False
    logger.debug(f"Removed export directory {path}")
    return True


def schedule_cleanup(path: Path, delay: float) -> threading.Timer | None:
    """Remove ``path`` after ``delay`` seconds, or right away when ``delay`` is 0."""
    if delay <= 0:
        remove_export_dir(path)
        return None
    timer = threading.Timer(delay, remove_export_dir, args=(path,))
    timer.daemon = True
    timer.start()
    return timer


def export_anki_package(
    body: Any,
    settings: Settings,
    clock: Callable[[], float] = time.time,
    rng: random.Random | None = None,
) -> ExportResult:
    """Build, serialize and pack the selected decks.

    The package is written to a fresh directory under ``settings.temp_root``.
    The caller owns that directory on success; on failure it is removed here.

    Raises:
        ValidationError: for malformed requests, before anything touches disk.
        SerializationFatalError: if the collection database cannot be created.
        PackagingError: if the archive cannot be written.
    """
    request = parse_request(body)
    collection = build(request.sections, request.selected_deck_ids, clock=clock, rng=rng)
    logger.info(
        f"Exporting {len(collection.notes)} notes from {len(collection.decks) - 1} decks "
        f"to '{request.filename}.apkg'"
    )

    try:
        settings.temp_root.mkdir(parents=True, exist_ok=True)
        export_dir = Path(tempfile.mkdtemp(prefix="export-", dir=settings.temp_root))
    except OSError as e:
        raise PackagingError(f"Cannot create export directory: {e}") from e

    try:
        db_bytes = serialize(collection)
        (export_dir / COLLECTION_FILENAME).write_bytes(db_bytes)
        bundle = collect_media(collection.media_sources)
        package_path = pack(
            db_bytes,
            bundle.files,
            bundle.manifest,
            export_dir / f"{safe_filename(request.filename)}.apkg",
        )
    except ExportError:
        remove_export_dir(export_dir)
        raise
    except Exception as e:
        remove_export_dir(export_dir)
        raise PackagingError(f"Failed to stage export: {e}") from e

    result = ExportResult(
        package_path=package_path,
        export_dir=export_dir,
        download_name=f"{request.filename}.apkg",
        notes_exported=len(collection.notes),
        cards_exported=len(collection.cards),
        media_exported=len(bundle.entries),
        message=(
            f"Exported {len(collection.notes)} notes and {len(bundle.entries)} media files "
            f"to '{request.filename}.apkg'"
        ),
    )
    logger.info(result.message)
    return result
