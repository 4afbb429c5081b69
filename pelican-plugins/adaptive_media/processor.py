"""Expand managed ``<img>`` tags into responsive ``<picture>`` elements.

An image is managed when it carries the asset marker attribute::

    <img src="/media/images/cat.jpg" data-fileEntryId="42" alt="Cat" />

For an asset rendered at 320, 640 and 1024 pixels wide that becomes::

    <picture>
      <source media="(max-width:320px)" srcset="/media/images/cat/cat-320.jpg"/>
      <source media="(max-width:640px and min-width:320px)" srcset="..."/>
      <source media="(max-width:1024px and min-width:640px)" srcset="..."/>
      <img src="/media/images/cat.jpg" data-fileEntryId="42" alt="Cat" />
    </picture>

(without the whitespace). The markup is scanned as text: only self-closing
``<img .../>`` tags on a single line are candidates, and a tag with ``/>``
inside an attribute value ends at that first ``/>``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .finder import MediaFinder, SizeVariant

ADAPTIVE_ATTR = 'data-fileEntryId'

IMG_PATTERN = re.compile(r'<img.*?/>')
FILE_ENTRY_ID_PATTERN = re.compile(
    rf'<img .*?{ADAPTIVE_ATTR}="([0-9]+)".*?/>',
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ImageTag:
    span: Tuple[int, int]
    text: str
    asset_id: Optional[int] = None


def extract_asset_id(img: str) -> Optional[int]:
    """Return the asset id of a whole ``<img .../>`` tag, or None if it has none."""
    match = FILE_ENTRY_ID_PATTERN.fullmatch(img)
    if match is None:
        return None
    return int(match.group(1))


def scan(html: str) -> List[ImageTag]:
    return [
        ImageTag(match.span(), match.group(0), extract_asset_id(match.group(0)))
        for match in IMG_PATTERN.finditer(html)
    ]


def media_queries(variants: Sequence[SizeVariant]) -> Iterator[Optional[str]]:
    """Yield the media condition of each variant, in order.

    A variant covers widths up to its own and above the previous variant's.
    Variants without a known width get no condition.
    """
    previous_width: Optional[int] = None
    for variant in variants:
        if variant.width is None:
            yield None
        else:
            constraints = f'max-width:{variant.width}px'
            if previous_width is not None:
                constraints += f' and min-width:{previous_width}px'
            yield f'({constraints})'
        previous_width = variant.width


def build_source(variant: SizeVariant, media_query: Optional[str]) -> str:
    media_attr = f' media="{media_query}"' if media_query else ''
    return f'<source{media_attr} srcset="{variant.uri}"/>'


def build_picture(img: str, asset_id: int, finder: MediaFinder) -> str:
    """Return the ``<picture>`` markup replacing *img*.

    Raises ``AssetResolutionError`` when *asset_id* cannot be resolved.
    """
    asset = finder.resolve(asset_id)
    variants = finder.list_variants(asset, order_by_width=True)

    parts = ['<picture>']
    parts.extend(
        build_source(variant, query)
        for variant, query in zip(variants, media_queries(variants))
    )
    parts.append(img)
    parts.append('</picture>')
    return ''.join(parts)


def rewrite(html: str, finder: MediaFinder) -> str:
    chunks: List[str] = []
    position = 0
    for tag in scan(html):
        start, end = tag.span
        chunks.append(html[position:start])
        if tag.asset_id is None:
            chunks.append(tag.text)
        else:
            chunks.append(build_picture(tag.text, tag.asset_id, finder))
        position = end
    chunks.append(html[position:])
    return ''.join(chunks)


class HTMLContentProcessor:
    """Rewrites HTML content against a fixed media finder."""

    content_type = 'text/html'

    def __init__(self, finder: MediaFinder):
        self.finder = finder

    def process(self, html: str) -> str:
        return rewrite(html, self.finder)
