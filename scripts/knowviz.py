#!/usr/bin/env python3
"""Main CLI interface for knowviz."""

import argparse
import json
import logging
import shutil
import sys
from pathlib import Path

from knowviz.config import Settings
from knowviz.core.errors import ExportError
from knowviz.core.export import export_anki_package, remove_export_dir
from knowviz.core.import_apkg import (
    get_apkg_deck_names,
    load_cards_from_apkg,
    load_media_manifest,
    load_notes_from_apkg,
)
from knowviz.server import create_app


def serve(settings: Settings, port: int | None):
    """Run the development server."""
    app = create_app(settings)
    port = port or settings.port
    print(f"Sync server running on http://localhost:{port}")
    print(f"Data file: {settings.data_file}")
    app.run(port=port)


def export_decks(settings: Settings, decks_json: str, deck_ids: list[str], output: str | None):
    """Export decks from a saved JSON tree to an .apkg file."""
    decks_path = Path(decks_json)
    if not decks_path.exists():
        raise FileNotFoundError(f"Input file not found: {decks_path}")

    output_path = Path(output) if output else Path(f"{decks_path.stem}.apkg")
    body = {
        "selectedDeckIds": deck_ids,
        "filename": output_path.stem,
        "sections": json.loads(decks_path.read_text(encoding="utf-8")),
    }

    result = export_anki_package(body, settings)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(result.package_path, output_path)
    finally:
        remove_export_dir(result.export_dir)

    print(f"{result.message}")
    print(f"Wrote {output_path}")


def inspect_apkg(apkg_file: str):
    """Inspect contents of an .apkg file."""
    apkg_path = Path(apkg_file)
    print(f"Inspecting {apkg_path}...")

    deck_names = get_apkg_deck_names(apkg_path)
    print(f"Deck names: {', '.join(deck_names)}")

    notes = load_notes_from_apkg(apkg_path, sort_by_field=True)
    cards = load_cards_from_apkg(apkg_path)
    manifest = load_media_manifest(apkg_path)
    print(f"Total notes: {len(notes)}")
    print(f"Total cards: {len(cards)}")
    print(f"Media files: {len(manifest)}")
    for key, filename in manifest.items():
        print(f"  {key} -> {filename}")

    if notes:
        print("\nSample notes:")
        for i, note in enumerate(notes[:5], 1):
            fields_preview = " | ".join(
                field[:30] + ("..." if len(field) > 30 else "") for field in note.fields
            )
            print(f"  {i}. [Note {note.id}] {fields_preview}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Knowledge Visualizer - flashcard store and Anki exporter"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--port", type=int, help="Port to listen on")

    # Export
    export_parser = subparsers.add_parser("export", help="Export decks to an .apkg file")
    export_parser.add_argument("decks_json", help="Saved decks JSON file")
    export_parser.add_argument(
        "--deck", action="append", default=[], dest="deck_ids", help="Deck id to export"
    )
    export_parser.add_argument("--output", help="Output .apkg file path")

    # Inspect APKG
    inspect_parser = subparsers.add_parser("inspect", help="Inspect contents of .apkg file")
    inspect_parser.add_argument("apkg", help="Path to .apkg file to inspect")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if args.command == "serve":
        serve(settings, args.port)
    elif args.command == "export":
        try:
            export_decks(settings, args.decks_json, args.deck_ids, args.output)
        except (ExportError, OSError, ValueError) as e:
            print(f"Export failed: {e}", file=sys.stderr)
            sys.exit(1)
    elif args.command == "inspect":
        inspect_apkg(args.apkg)


if __name__ == "__main__":
    main()
