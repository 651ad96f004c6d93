"""Conversion of editor cards into Anki note and card rows."""

import hashlib
import re

from knowviz.core.errors import RowInsertError
from knowviz.core.media import MediaCollector
from knowviz.models.deck_models import Card, CardRow, NoteRow

FIELD_SEPARATOR = "\x1f"
DEFAULT_CATEGORY = "general"

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
)


def plain_text(html: str | None) -> str:
    """Strip HTML remnants from card text. Markdown is left as-is."""
    if not html:
        return ""
    text = _BR_RE.sub("\n", html)
    text = _TAG_RE.sub("", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text.strip()


def field_checksum(text: str) -> int:
    """Anki's duplicate-detection checksum: first 8 hex digits of SHA-1 as an int."""
    return int(hashlib.sha1(text.encode("utf-8")).hexdigest()[:8], 16)


def image_tag(key: str) -> str:
    return f'<br/><img src="{key}" style="max-width:100%;" />'


def tag_string(card: Card, deck_title: str) -> str:
    # Anki stores tags space-delimited with a leading and trailing space
    return f" {card.category or DEFAULT_CATEGORY} {deck_title} "


def note_guid(note_id: int, card: Card) -> str:
    return f"note-{note_id}-{card.id}"


def encode_card(
    card: Card,
    deck_title: str,
    *,
    note_id: int,
    card_id: int,
    deck_id: int,
    model_id: int,
    due: int,
    mod: int,
    media: MediaCollector,
) -> tuple[NoteRow, CardRow]:
    """Build the note and card rows for one editor card.

    The back image, when it is a data URI, is registered with ``media`` and
    referenced from the back field by its numeric key. An image that does
    not decode is dropped and the card exports without it. The front image
    is not exported.

    Raises:
        RowInsertError: if the card text contains the field separator.
    """
    front_text = plain_text(card.front)
    back_html = card.back or ""
    if FIELD_SEPARATOR in front_text or FIELD_SEPARATOR in back_html:
        raise RowInsertError(f"Card {card.id} contains the field separator")

    if card.back_image and card.back_image.startswith("data:"):
        key = media.add(card.back_image)
        if key is not None:
            back_html += image_tag(key)

    note = NoteRow(
        id=note_id,
        guid=note_guid(note_id, card),
        mid=model_id,
        mod=mod,
        tags=tag_string(card, deck_title),
        flds=f"{front_text}{FIELD_SEPARATOR}{back_html}",
        sfld=front_text,
        csum=field_checksum(front_text),
    )
    card_row = CardRow(id=card_id, nid=note_id, did=deck_id, mod=mod, due=due)
    return note, card_row
