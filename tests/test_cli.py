"""Test the command line script."""

import importlib.util
import json
import sys
from pathlib import Path

import pytest

SCRIPT = Path(__file__).parent.parent / "scripts" / "knowviz.py"


@pytest.fixture
def cli(tmp_path, monkeypatch):
    monkeypatch.setenv("KNOWVIZ_TEMP_DIR", str(tmp_path / "exports"))
    spec = importlib.util.spec_from_file_location("knowviz_cli", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run(cli, monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["knowviz", *args])
    cli.main()


def test_export_missing_input_reports_failure(cli, tmp_path, monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc_info:
        run(cli, monkeypatch, "export", str(tmp_path / "missing.json"), "--deck", "d")

    assert exc_info.value.code == 1
    assert "Export failed:" in capsys.readouterr().err


def test_export_writes_package(cli, sections_data, tmp_path, monkeypatch, capsys):
    decks_json = tmp_path / "decks.json"
    decks_json.write_text(json.dumps(sections_data), encoding="utf-8")
    output = tmp_path / "out" / "deck.apkg"

    run(cli, monkeypatch, "export", str(decks_json), "--deck", "deck-1", "--output", str(output))

    assert output.exists()
    assert f"Wrote {output}" in capsys.readouterr().out
