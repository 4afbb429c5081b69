"""Preview how article HTML looks once managed images are expanded.

    PELICAN_CONFIG=pelicanconf.py flask --app app run

    curl -X POST --data-binary @article.html http://127.0.0.1:8000/api/preview
"""
import os

from flask import Flask, jsonify, request
from pelican.settings import read_settings

from adaptive_media import (
    AssetNotFoundError,
    AssetResolutionError,
    HTMLContentProcessor,
    MediaLibrary,
)


def load_library():
    settings = read_settings(os.getenv("PELICAN_CONFIG", "pelicanconf.py"))
    return MediaLibrary.from_settings(settings)


def create_app(library=None) -> Flask:
    app = Flask(__name__)
    app.secret_key = os.getenv("SECRET_KEY", "dev-only-change-me")
    processor = HTMLContentProcessor(library if library is not None else load_library())

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.post("/api/preview")
    def preview():
        payload = request.get_json(silent=True)
        if isinstance(payload, dict):
            html = payload.get("html")
        else:
            html = request.get_data(as_text=True)
        if not isinstance(html, str) or not html:
            return jsonify({"error": "no html supplied"}), 400

        try:
            rendered = processor.process(html)
        except AssetNotFoundError as err:
            return jsonify({"error": str(err), "asset_id": err.asset_id}), 404
        except AssetResolutionError as err:
            app.logger.error("Preview failed: %s", err)
            return jsonify({"error": str(err), "asset_id": err.asset_id}), 500
        return jsonify({"html": rendered})

    return app


if __name__ == "__main__":
    create_app().run(host="127.0.0.1", port=8000, debug=True)
