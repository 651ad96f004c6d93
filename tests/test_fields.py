"""Test note field encoding."""

import hashlib

import pytest

from knowviz.core.errors import RowInsertError
from knowviz.core.fields import (
    FIELD_SEPARATOR,
    encode_card,
    field_checksum,
    plain_text,
    tag_string,
)
from knowviz.core.media import MediaCollector
from knowviz.models.deck_models import Card


def encode(card, media=None, deck_title="Basics"):
    return encode_card(
        card,
        deck_title,
        note_id=1_700_000_000_000,
        card_id=1_700_001_000_000,
        deck_id=555,
        model_id=777,
        due=3,
        mod=1_700_000_000,
        media=media or MediaCollector(),
    )


def test_plain_text_strips_html():
    """Tags are removed, <br> becomes a newline and entities are unescaped."""
    html = "  <p>Line&nbsp;one<br>Line <b>two</b><BR/>a &lt; b &amp;&amp; c &gt; d &quot;q&quot;</p>  "

    assert plain_text(html) == 'Line one\nLine two\na < b && c > d "q"'


def test_plain_text_keeps_markdown():
    """Markdown syntax is not interpreted."""
    assert plain_text("What is **Reliability**?") == "What is **Reliability**?"


def test_plain_text_empty():
    assert plain_text(None) == ""
    assert plain_text("") == ""


def test_checksum_of_empty_string():
    """The checksum of the empty string is the SHA-1 prefix da39a3ee."""
    assert field_checksum("") == 0xDA39A3EE


def test_checksum_matches_sha1_prefix():
    """Checksums are the first 8 hex digits of SHA-1 read as an unsigned int."""
    for text in ["abc", "What is **Reliability**?", "日本語", "a\nb"]:
        expected = int(hashlib.sha1(text.encode("utf-8")).hexdigest()[:8], 16)
        assert field_checksum(text) == expected
        assert field_checksum(text) == field_checksum(text)

    assert field_checksum("abc") == 0xA9993E36


def test_fields_have_exactly_one_separator():
    """The note holds plain-text front and back HTML joined by one separator."""
    card = Card(id=1, front="<i>Q</i><br>more", back="<b>A</b>")

    note, _ = encode(card)

    assert note.flds.count(FIELD_SEPARATOR) == 1
    assert note.flds.split(FIELD_SEPARATOR) == ["Q\nmore", "<b>A</b>"]
    assert note.sfld == "Q\nmore"
    assert note.csum == field_checksum("Q\nmore")


def test_missing_text_encodes_as_empty_fields():
    card = Card(id=1, front=None, back=None)

    note, _ = encode(card)

    assert note.flds == FIELD_SEPARATOR
    assert note.csum == 0xDA39A3EE


def test_tags_and_guid():
    """Tags are space padded and default to the general category."""
    card = Card(id=42, front="Q", back="A")

    note, _ = encode(card, deck_title="Engines")

    assert note.tags == " general Engines "
    assert note.guid == "note-1700000000000-42"
    assert tag_string(Card(id=1, category="Basics"), "Deck") == " Basics Deck "


def test_card_row_references():
    card = Card(id=1, front="Q", back="A")

    note, card_row = encode(card)

    assert card_row.nid == note.id
    assert card_row.did == 555
    assert card_row.due == 3
    assert (card_row.type, card_row.queue, card_row.ivl, card_row.reps) == (0, 0, 0, 0)
    assert note.mid == 777


def test_back_image_is_registered_and_referenced():
    """A data URI back image gets the next media key and an <img> reference."""
    media = MediaCollector()
    media.add("data:image/png;base64,AAAA")
    card = Card(id=1, front="Q", back="A", backImage="data:image/png;base64,BBBB")

    note, _ = encode(card, media=media)

    assert note.flds.endswith('A<br/><img src="1" style="max-width:100%;" />')
    assert media.sources["1"] == "data:image/png;base64,BBBB"


def test_front_image_is_not_exported():
    media = MediaCollector()
    card = Card(id=1, front="Q", back="A", frontImage="data:image/png;base64,AAAA")

    note, _ = encode(card, media=media)

    assert media.sources == {}
    assert "<img" not in note.flds


def test_non_data_uri_image_is_ignored():
    media = MediaCollector()
    card = Card(id=1, front="Q", back="A", backImage="https://example.com/x.png")

    note, _ = encode(card, media=media)

    assert media.sources == {}
    assert note.flds == f"Q{FIELD_SEPARATOR}A"


def test_separator_in_text_is_rejected_without_side_effects():
    """A card that would produce a third field is refused before media is registered."""
    media = MediaCollector()
    card = Card(id=1, front="Q", back=f"A{FIELD_SEPARATOR}B", backImage="data:image/png;base64,AAAA")

    with pytest.raises(RowInsertError):
        encode(card, media=media)

    assert media.sources == {}


def test_undecodable_back_image_leaves_no_reference():
    media = MediaCollector()
    card = Card(id=1, front="Q", back="A", backImage="data:image/png;base64,@@@")

    note, _ = encode(card, media=media)

    assert note.flds == f"Q{FIELD_SEPARATOR}A"
    assert media.sources == {}
