"""Pydantic models for the editor's card tree and the Anki rows derived from it."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Card(BaseModel):
    """A flashcard as stored by the editor."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | str
    display_id: str | None = Field(default=None, alias="displayId")
    front: str | None = ""
    back: str | None = ""
    category: str | None = None
    # Accepted but not embedded by the exporter (only backImage is).
    front_image: str | None = Field(default=None, alias="frontImage")
    back_image: str | None = Field(default=None, alias="backImage")


class Deck(BaseModel):
    """A deck of cards inside a section."""

    id: str
    title: str
    cards: list[Card] = Field(default_factory=list)


class Section(BaseModel):
    """Top level grouping of decks."""

    id: str
    title: str
    decks: list[Deck] = Field(default_factory=list)


class ExportRequest(BaseModel):
    """Body of an export request."""

    model_config = ConfigDict(populate_by_name=True)

    selected_deck_ids: list[str] = Field(alias="selectedDeckIds")
    filename: str
    sections: list[Section]


class DeckRow(BaseModel):
    """One entry of the collection's deck table."""

    id: int
    name: str
    mod: int
    desc: str = ""
    browser_collapsed: bool = False

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "mod": self.mod,
            "usn": 0,
            "collapsed": False,
            "browserCollapsed": self.browser_collapsed,
            "desc": self.desc,
            "dyn": 0,
            "conf": 1,
            "lrnToday": [0, 0],
            "revToday": [0, 0],
            "newToday": [0, 0],
            "timeToday": [0, 0],
            "extendNew": 0,
            "extendRev": 0,
        }


class NoteRow(BaseModel):
    """A row of the ``notes`` table."""

    id: int
    guid: str
    mid: int
    mod: int
    usn: int = 0
    tags: str
    flds: str
    sfld: str
    csum: int
    flags: int = 0
    data: str = ""


class CardRow(BaseModel):
    """A row of the ``cards`` table. Scheduling columns stay at their new-card values."""

    id: int
    nid: int
    did: int
    ord: int = 0
    mod: int
    usn: int = 0
    type: int = 0  # 0=new
    queue: int = 0  # 0=new
    due: int
    ivl: int = 0
    factor: int = 0
    reps: int = 0
    lapses: int = 0
    left: int = 0
    odue: int = 0
    odid: int = 0
    flags: int = 0
    data: str = ""


class CollectionMeta(BaseModel):
    """The single row of the ``col`` table."""

    id: int = 1
    crt: int
    mod: int
    scm: int
    ver: int
    dty: int = 0
    usn: int = 0
    ls: int = 0
    conf: dict[str, Any]
    models: dict[str, Any]
    decks: dict[str, Any]
    dconf: dict[str, Any]
    tags: dict[str, Any] = Field(default_factory=dict)


class Collection(BaseModel):
    """Everything needed to write one ``collection.anki2``."""

    model_config = ConfigDict(protected_namespaces=())

    meta: CollectionMeta
    model_id: int
    decks: list[DeckRow]
    notes: list[NoteRow] = Field(default_factory=list)
    cards: list[CardRow] = Field(default_factory=list)
    # media key -> data URI, in first-seen order
    media_sources: dict[str, str] = Field(default_factory=dict)


class MediaEntry(BaseModel):
    """A decoded media file keyed by its numeric archive name."""

    key: str
    filename: str
    data: bytes


class MediaBundle(BaseModel):
    """Decoded media plus the manifest written as the ``media`` file."""

    entries: list[MediaEntry] = Field(default_factory=list)

    @property
    def files(self) -> dict[str, bytes]:
        return {entry.key: entry.data for entry in self.entries}

    @property
    def manifest(self) -> dict[str, str]:
        return {entry.key: entry.filename for entry in self.entries}


class ExportResult(BaseModel):
    """Result of building an .apkg file."""

    package_path: Path
    export_dir: Path
    download_name: str
    notes_exported: int
    cards_exported: int
    media_exported: int
    message: str = ""


class MediaFile(BaseModel):
    """Represents a media file with its filename and binary data."""

    filename: str
    data: bytes


class ApkgNote(BaseModel):
    """A note read back from an .apkg file."""

    id: int
    guid: str
    mid: int
    fields: list[str]
    tags: list[str]
    sfld: str
    csum: int
    media_files: list[MediaFile] = Field(default_factory=list)


class ApkgCard(BaseModel):
    """A card read back from an .apkg file."""

    id: int
    note_id: int
    deck_id: int
    deck_name: str
    ord: int
    type: int
    queue: int
    due: int
