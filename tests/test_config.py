"""Test settings loading."""

from pathlib import Path

from knowviz.config import DEFAULT_MAX_CONTENT_LENGTH, Settings


def test_defaults():
    settings = Settings.from_env({})

    assert settings.data_file == Path("data") / "decks.json"
    assert settings.cleanup_delay == 1.0
    assert settings.port == 3001
    assert settings.max_content_length == DEFAULT_MAX_CONTENT_LENGTH
    assert settings.temp_root.name == "knowviz-exports"


def test_environment_overrides(tmp_path):
    settings = Settings.from_env(
        {
            "KNOWVIZ_DATA_FILE": str(tmp_path / "store.json"),
            "KNOWVIZ_TEMP_DIR": str(tmp_path / "exports"),
            "KNOWVIZ_CLEANUP_DELAY": "2.5",
            "PORT": "8080",
            "KNOWVIZ_LOG_LEVEL": "debug",
        }
    )

    assert settings.data_file == tmp_path / "store.json"
    assert settings.temp_root == tmp_path / "exports"
    assert settings.cleanup_delay == 2.5
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
