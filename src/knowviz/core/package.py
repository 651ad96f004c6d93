"""Write the .apkg zip container."""

import json
import logging
import zipfile
from pathlib import Path

from knowviz.core.errors import PackagingError
from knowviz.core.serialize import COLLECTION_FILENAME

logger = logging.getLogger(__name__)

MEDIA_MANIFEST_NAME = "media"
RESERVED_NAMES = {COLLECTION_FILENAME, MEDIA_MANIFEST_NAME}


def pack(
    db_bytes: bytes,
    media_files: dict[str, bytes],
    manifest: dict[str, str],
    output_path: Path,
) -> Path:
    """Zip the collection, media files and manifest into ``output_path``.

    Media files are stored under their numeric key; the manifest maps each key
    to its display filename. The archive is closed before this returns, and a
    partially written file is removed on failure.

    Raises:
        PackagingError: if the media does not match the manifest or writing fails.
    """
    if set(media_files) != set(manifest):
        raise PackagingError("Media files and manifest keys differ")
    if RESERVED_NAMES & set(media_files):
        raise PackagingError("Media key collides with a reserved archive name")

    try:
        with zipfile.ZipFile(
            output_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9
        ) as zip_file:
            zip_file.writestr(COLLECTION_FILENAME, db_bytes)
            for key, data in media_files.items():
                zip_file.writestr(key, data)
            zip_file.writestr(MEDIA_MANIFEST_NAME, json.dumps(manifest, separators=(",", ":")))
    except (OSError, zipfile.BadZipFile, ValueError) as e:
        output_path.unlink(missing_ok=True)
        raise PackagingError(f"Failed to write {output_path.name}: {e}") from e

    logger.debug(f"Packed {len(media_files)} media files into {output_path}")
    return output_path
