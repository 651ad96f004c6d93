"""Exceptions raised while exporting an Anki package."""


class ExportError(Exception):
    """Base class for export failures."""


class ValidationError(ExportError):
    """The export request is malformed or selects no decks."""


class MediaDecodeError(ExportError):
    """A card image is not a decodable base64 data URI. Recovered per entry."""


class RowInsertError(ExportError):
    """A single note/card could not be encoded or inserted. Recovered per card."""


class SerializationFatalError(ExportError):
    """The collection database itself could not be created."""


class PackagingError(ExportError):
    """Writing the .apkg archive failed."""
