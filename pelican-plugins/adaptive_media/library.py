"""Media lookups backed by the site's ``content/media`` folder.

Assets are declared in ``pelicanconf.py``::

    ADAPTIVE_MEDIA_ASSETS = {42: 'cat', 43: 'goblin-hole'}
    ADAPTIVE_MEDIA_MANIFEST = 'media/assets.json'   # optional, {"44": "hop"}

and each asset's rendered sizes sit in a folder named after it::

    content/media/images/cat/cat-320.jpg
    content/media/images/cat/cat-640.webp
    ...

Widths are read from the files with Pillow (AVIF needs Pillow 11.2 or later);
a file Pillow cannot open is still offered, just without a width.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional
from urllib.parse import quote

from PIL import Image

from .errors import AssetNotFoundError, AssetResolutionError
from .finder import SizeVariant, StoredAsset

logger = logging.getLogger(__name__)

IMAGE_EXT = {'.avif', '.webp', '.jpg', '.jpeg', '.png', '.gif'}

DEFAULT_MEDIA_DIR = 'media/images'
DEFAULT_MEDIA_URL = '/media/images'


def _probe_width(path: Path) -> Optional[int]:
    try:
        with Image.open(path) as image:
            return int(image.size[0])
    except OSError:
        return None


def _by_width(variants: List[SizeVariant]) -> List[SizeVariant]:
    return sorted(variants, key=lambda v: (v.width is None, v.width or 0, v.uri))


class MediaLibrary:
    """Resolves asset ids to folders of rendered images under ``PATH``."""

    def __init__(
        self,
        content_path: Path,
        assets: Optional[Mapping[int, str]] = None,
        manifest: Optional[Path] = None,
        media_dir: str = DEFAULT_MEDIA_DIR,
        media_url: str = DEFAULT_MEDIA_URL,
    ):
        self.content_path = Path(content_path)
        self.media_root = self.content_path / media_dir
        self.media_url = media_url.rstrip('/')
        self.manifest = manifest
        self._declared = dict(assets or {})
        self._assets: Optional[Dict[int, str]] = None

    @classmethod
    def from_settings(cls, settings) -> 'MediaLibrary':
        content_path = Path(settings.get('PATH', 'content'))
        manifest = settings.get('ADAPTIVE_MEDIA_MANIFEST')
        return cls(
            content_path,
            assets=settings.get('ADAPTIVE_MEDIA_ASSETS') or {},
            manifest=content_path / manifest if manifest else None,
            media_dir=settings.get('ADAPTIVE_MEDIA_DIR', DEFAULT_MEDIA_DIR),
            media_url=settings.get('ADAPTIVE_MEDIA_URL', DEFAULT_MEDIA_URL),
        )

    def _load_manifest(self) -> Dict[int, str]:
        if self.manifest is None:
            return {}
        try:
            raw = json.loads(self.manifest.read_text(encoding='utf-8'))
        except (OSError, ValueError) as exc:
            raise AssetResolutionError(f'Cannot read media manifest {self.manifest}: {exc}') from exc
        if not isinstance(raw, dict):
            raise AssetResolutionError(f'Media manifest {self.manifest} must be a JSON object')
        try:
            return {int(key): str(value) for key, value in raw.items()}
        except ValueError as exc:
            raise AssetResolutionError(f'Media manifest {self.manifest} has a non-numeric id') from exc

    def assets(self) -> Dict[int, str]:
        if self._assets is None:
            merged = self._load_manifest()
            try:
                merged.update((int(key), str(value)) for key, value in self._declared.items())
            except (TypeError, ValueError) as exc:
                raise AssetResolutionError('ADAPTIVE_MEDIA_ASSETS has a non-numeric id') from exc
            self._assets = merged
            logger.debug('Loaded %d media asset(s)', len(merged))
        return self._assets

    def resolve(self, asset_id: int) -> StoredAsset:
        name = self.assets().get(asset_id)
        if name is None:
            raise AssetNotFoundError(asset_id)
        if not (self.media_root / name).is_dir():
            raise AssetNotFoundError(asset_id, f'missing folder {self.media_root / name}')
        return StoredAsset(asset_id, name)

    def list_variants(self, asset: StoredAsset, order_by_width: bool = True) -> List[SizeVariant]:
        folder = self.media_root / asset.name
        try:
            paths = sorted(folder.iterdir())
        except OSError as exc:
            raise AssetResolutionError(f'Cannot list {folder}: {exc}', asset.asset_id) from exc
        variants = []
        for path in paths:
            if not path.is_file() or path.suffix.lower() not in IMAGE_EXT:
                continue
            uri = quote(f'{self.media_url}/{asset.name}/{path.name}', safe='/:%')
            width = _probe_width(path)
            if width is None:
                logger.debug('No readable width for %s', path)
            variants.append(SizeVariant(uri, width))
        if order_by_width:
            return _by_width(variants)
        return variants


class StaticMediaLibrary:
    """In-memory lookups: asset id -> already rendered variants."""

    def __init__(self, variants: Mapping[int, List[SizeVariant]]):
        self.variants = dict(variants)

    def resolve(self, asset_id: int) -> StoredAsset:
        if asset_id not in self.variants:
            raise AssetNotFoundError(asset_id)
        return StoredAsset(asset_id, str(asset_id))

    def list_variants(self, asset: StoredAsset, order_by_width: bool = True) -> List[SizeVariant]:
        variants = list(self.variants[asset.asset_id])
        if order_by_width:
            return _by_width(variants)
        return variants
