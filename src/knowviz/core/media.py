"""Collection of card images into Anki's numbered media files."""

import base64
import binascii
import logging

from knowviz.core.errors import MediaDecodeError
from knowviz.models.deck_models import MediaBundle, MediaEntry

logger = logging.getLogger(__name__)


def media_filename(key: str) -> str:
    """Display name recorded in the manifest for media ``key``."""
    return f"image-{key}.png"


def decode_data_uri(source: str) -> bytes:
    """Decode a base64 image, with or without a ``data:...;base64,`` prefix.

    Raises:
        MediaDecodeError: if the payload is not valid base64.
    """
    payload = source
    if source.startswith("data:"):
        _, sep, payload = source.partition(",")
        if not sep:
            raise MediaDecodeError("Data URI has no payload")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MediaDecodeError(f"Invalid base64 image data: {e}") from e


class MediaCollector:
    """Assigns sequential keys ("0", "1", ...) to images in first-seen order.

    Images that do not decode are rejected up front and get no key, so no
    note ever references a missing media file.
    """

    def __init__(self):
        self.sources: dict[str, str] = {}

    def add(self, source: str) -> str | None:
        try:
            decode_data_uri(source)
        except MediaDecodeError as e:
            logger.warning(f"Dropping image: {e}")
            return None
        key = str(len(self.sources))
        self.sources[key] = source
        return key

    def finalize(self) -> MediaBundle:
        return collect_media(self.sources)


def collect_media(sources: dict[str, str]) -> MediaBundle:
    """Decode collected images. Entries that fail to decode are left out entirely."""
    entries = []
    for key, source in sources.items():
        try:
            data = decode_data_uri(source)
        except MediaDecodeError as e:
            logger.warning(f"Skipping media {key}: {e}")
            continue
        entries.append(MediaEntry(key=key, filename=media_filename(key), data=data))
    return MediaBundle(entries=entries)
