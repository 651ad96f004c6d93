"""Flask server: JSON card store plus the Anki package export."""

import io
import logging
import time
from collections.abc import Callable
from pathlib import Path

from flask import Flask, jsonify, request, send_file

from knowviz.config import Settings
from knowviz.core.errors import ValidationError
from knowviz.core.export import export_anki_package, schedule_cleanup
from knowviz.core.store import load_sections, read_raw, save_sections

logger = logging.getLogger(__name__)


class ExportDownload(io.FileIO):
    """Package file handed to ``send_file``; runs ``on_close`` once the server closes it."""

    def __init__(self, path: Path, on_close: Callable[[], None]):
        self._on_close = on_close
        super().__init__(path, "rb")

    def close(self):
        was_closed = self.closed
        super().close()
        if not was_closed:
            self._on_close()


def create_app(settings: Settings | None = None, clock: Callable[[], float] = time.time) -> Flask:
    """Create the Flask application.

    Args:
        settings: Runtime settings. Read from the environment when omitted.
        clock: Time source for export ids and timestamps.
    """
    settings = settings or Settings.from_env()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length
    app.config["KNOWVIZ_SETTINGS"] = settings

    @app.get("/api/decks")
    def get_decks():
        try:
            return jsonify(load_sections(settings.data_file))
        except (OSError, ValueError) as e:
            logger.error(f"Error reading decks: {e}")
            return jsonify({"error": "Failed to read decks"}), 500

    @app.post("/api/decks/save")
    def save_decks():
        try:
            save_sections(settings.data_file, request.get_json(force=True))
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error saving decks: {e}")
            return jsonify({"error": "Failed to save decks"}), 500
        return jsonify({"success": True, "message": "Decks saved successfully"})

    @app.get("/api/decks/export")
    def export_decks_json():
        try:
            data = read_raw(settings.data_file)
        except OSError as e:
            logger.error(f"Error exporting decks: {e}")
            return jsonify({"error": "Failed to export decks"}), 500
        if data is None:
            return jsonify({"error": "No decks to export"}), 404
        response = app.response_class(data, mimetype="application/json")
        response.headers["Content-Disposition"] = 'attachment; filename="decks-export.json"'
        return response

    @app.post("/export")
    @app.post("/api/decks/export-anki")
    def export_anki():
        body = request.get_json(silent=True)
        try:
            result = export_anki_package(body, settings, clock=clock)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            logger.exception("Export failed")
            return jsonify({"error": f"Failed to export Anki deck: {e}"}), 500

        try:
            download = ExportDownload(
                result.package_path,
                lambda: schedule_cleanup(result.export_dir, settings.cleanup_delay),
            )
        except OSError as e:
            schedule_cleanup(result.export_dir, 0)
            logger.exception("Sending export failed")
            return jsonify({"error": f"Failed to export Anki deck: {e}"}), 500

        return send_file(
            download,
            mimetype="application/octet-stream",
            as_attachment=True,
            download_name=result.download_name,
        )

    return app
