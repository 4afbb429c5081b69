"""Shared pytest fixtures for the adaptive media tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from adaptive_media import AssetNotFoundError, SizeVariant, StoredAsset


class FixedFinder:
    """Hands back variant lists exactly as given and records each lookup."""

    def __init__(self, variants: dict[int, list[SizeVariant]]):
        self.variants = variants
        self.calls: list[tuple[int, bool]] = []

    def resolve(self, asset_id: int) -> StoredAsset:
        if asset_id not in self.variants:
            raise AssetNotFoundError(asset_id)
        return StoredAsset(asset_id, f"asset-{asset_id}")

    def list_variants(self, asset: StoredAsset, order_by_width: bool = True) -> list[SizeVariant]:
        self.calls.append((asset.asset_id, order_by_width))
        return list(self.variants[asset.asset_id])


def write_image(path: Path, width: int, height: int = 10) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (width, height), color=(200, 120, 180)).save(path)
    return path


@pytest.fixture
def finder() -> FixedFinder:
    return FixedFinder(
        {
            42: [
                SizeVariant("/media/images/cat/cat-320.jpg", 320),
                SizeVariant("/media/images/cat/cat-640.jpg", 640),
                SizeVariant("/media/images/cat/cat-1024.jpg", 1024),
            ],
            7: [],
        }
    )


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """A Pelican content folder with one asset rendered at three widths."""
    content = tmp_path / "content"
    images = content / "media" / "images" / "cat"
    write_image(images / "cat-640.jpg", 640)
    write_image(images / "cat-320.jpg", 320)
    write_image(images / "cat-1024.png", 1024)
    (images / "broken.webp").write_bytes(b"not an image")
    (images / "notes.txt").write_text("ignored", encoding="utf-8")
    return content


@pytest.fixture
def make_finder():
    return FixedFinder


@pytest.fixture
def image_writer():
    return write_image
