"""JSON file store for the editor's section tree."""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def load_sections(data_file: Path) -> list[Any]:
    """Return the stored tree, or an empty list when nothing has been saved."""
    if not data_file.exists():
        return []
    return json.loads(data_file.read_text(encoding="utf-8"))


def save_sections(data_file: Path, sections: Any) -> None:
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text(json.dumps(sections, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug(f"Saved decks to {data_file}")


def read_raw(data_file: Path) -> str | None:
    """Raw file contents for download, or None if the store is empty."""
    if not data_file.exists():
        return None
    return data_file.read_text(encoding="utf-8")
