"""Types shared between the HTML processor and the media lookups it queries.

The processor only ever asks two questions:

* which stored asset does an identifier refer to (``AssetResolver``)
* which rendered sizes exist for that asset (``VariantFinder``)

Anything that answers both, such as ``MediaLibrary`` or
``StaticMediaLibrary``, can be handed to ``HTMLContentProcessor``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class StoredAsset:
    asset_id: int
    name: str


@dataclass(frozen=True)
class SizeVariant:
    uri: str
    width: Optional[int] = None


class AssetResolver(Protocol):
    def resolve(self, asset_id: int) -> StoredAsset:
        ...


class VariantFinder(Protocol):
    def list_variants(self, asset: StoredAsset, order_by_width: bool = True) -> List[SizeVariant]:
        ...


class MediaFinder(AssetResolver, VariantFinder, Protocol):
    """Both lookups in one object."""
