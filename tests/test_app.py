"""Tests for the preview web app."""

from __future__ import annotations

from pathlib import Path

import pytest

from adaptive_media import MediaLibrary, SizeVariant, StaticMediaLibrary
from app import create_app


@pytest.fixture
def client():
    library = StaticMediaLibrary({1: [SizeVariant("/media/images/one/one-320.jpg", 320)]})
    app = create_app(library)
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_preview_raw_body(client) -> None:
    response = client.post("/api/preview", data='<p><img data-fileEntryId="1" /></p>')
    assert response.status_code == 200
    assert response.get_json()["html"] == (
        '<p><picture><source media="(max-width:320px)" srcset="/media/images/one/one-320.jpg"/>'
        '<img data-fileEntryId="1" /></picture></p>'
    )


def test_preview_json_body(client) -> None:
    response = client.post("/api/preview", json={"html": '<img src="plain.jpg" />'})
    assert response.status_code == 200
    assert response.get_json()["html"] == '<img src="plain.jpg" />'


def test_preview_requires_html(client) -> None:
    response = client.post("/api/preview", json={"html": ""})
    assert response.status_code == 400


def test_preview_unknown_asset(client) -> None:
    response = client.post("/api/preview", data='<img data-fileEntryId="2" />')
    assert response.status_code == 404
    assert response.get_json()["asset_id"] == 2


def test_preview_broken_library(tmp_path: Path) -> None:
    manifest = tmp_path / "assets.json"
    manifest.write_text("{broken", encoding="utf-8")
    app = create_app(MediaLibrary(tmp_path, manifest=manifest))
    response = app.test_client().post("/api/preview", data='<img data-fileEntryId="2" />')
    assert response.status_code == 500
    assert "Cannot read media manifest" in response.get_json()["error"]


@pytest.mark.parametrize("value", [5, None, ["<img />"], {"a": 1}])
def test_preview_rejects_non_string_html(client, value) -> None:
    response = client.post("/api/preview", json={"html": value})
    assert response.status_code == 400
    assert response.get_json() == {"error": "no html supplied"}


def test_preview_unreadable_asset_folder(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "media" / "images" / "cat").mkdir(parents=True)

    def denied(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "iterdir", denied)
    app = create_app(MediaLibrary(tmp_path, assets={42: "cat"}))
    response = app.test_client().post("/api/preview", data='<img data-fileEntryId="42" />')
    assert response.status_code == 500
    assert response.get_json()["asset_id"] == 42
    assert "Cannot list" in response.get_json()["error"]
