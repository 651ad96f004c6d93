"""Runtime settings, read from environment variables."""

import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_MAX_CONTENT_LENGTH = 50 * 1024 * 1024


def default_temp_root() -> Path:
    return Path(tempfile.gettempdir()) / "knowviz-exports"


class Settings(BaseModel):
    """Settings for the export server and CLI."""

    data_file: Path = Field(default=Path("data") / "decks.json", description="JSON card store")
    temp_root: Path = Field(
        default_factory=default_temp_root, description="Parent of per-export staging dirs"
    )
    cleanup_delay: float = Field(
        default=1.0, ge=0, description="Seconds to wait after sending before deleting an export"
    )
    port: int = 3001
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        values = {}
        if "KNOWVIZ_DATA_FILE" in env:
            values["data_file"] = env["KNOWVIZ_DATA_FILE"]
        if "KNOWVIZ_TEMP_DIR" in env:
            values["temp_root"] = env["KNOWVIZ_TEMP_DIR"]
        if "KNOWVIZ_CLEANUP_DELAY" in env:
            values["cleanup_delay"] = env["KNOWVIZ_CLEANUP_DELAY"]
        if "PORT" in env:
            values["port"] = env["PORT"]
        if "KNOWVIZ_MAX_CONTENT_LENGTH" in env:
            values["max_content_length"] = env["KNOWVIZ_MAX_CONTENT_LENGTH"]
        if "KNOWVIZ_LOG_LEVEL" in env:
            values["log_level"] = env["KNOWVIZ_LOG_LEVEL"].upper()
        return cls.model_validate(values)
