"""
Adaptive Media Plugin for Pelican

This plugin expands images that reference a managed media asset into
<picture> elements offering every rendered width of that asset.

It converts:
  <img src="/media/images/cat.jpg" data-fileEntryId="42" alt="Cat" />

To:
  <picture>
    <source media="(max-width:320px)" srcset="/media/images/cat/cat-320.jpg"/>
    <source media="(max-width:640px and min-width:320px)" srcset="/media/images/cat/cat-640.jpg"/>
    <img src="/media/images/cat.jpg" data-fileEntryId="42" alt="Cat" />
  </picture>

Settings (pelicanconf.py):
    ADAPTIVE_MEDIA_ENABLED = True
    ADAPTIVE_MEDIA_ASSETS = {42: 'cat'}        # asset id -> folder name
    ADAPTIVE_MEDIA_MANIFEST = 'media/assets.json'
    ADAPTIVE_MEDIA_DIR = 'media/images'        # relative to PATH
    ADAPTIVE_MEDIA_URL = '/media/images'

An id that does not resolve stops the build rather than publishing a page
with a broken image.
"""

import logging

from pelican import signals

from .errors import AssetNotFoundError, AssetResolutionError
from .finder import SizeVariant, StoredAsset
from .library import MediaLibrary, StaticMediaLibrary
from .processor import HTMLContentProcessor, rewrite, scan

logger = logging.getLogger(__name__)

__all__ = [
    'AssetNotFoundError',
    'AssetResolutionError',
    'HTMLContentProcessor',
    'MediaLibrary',
    'SizeVariant',
    'StaticMediaLibrary',
    'StoredAsset',
    'register',
    'rewrite',
    'scan',
]


def process_instances(instances, settings):
    """Rewrite content and summaries of articles or pages in place."""
    if not settings.get('ADAPTIVE_MEDIA_ENABLED', True):
        return
    processor = HTMLContentProcessor(MediaLibrary.from_settings(settings))
    for instance in instances:
        for attr in ('_content', '_summary'):
            text = getattr(instance, attr, None)
            if not text:
                continue
            try:
                setattr(instance, attr, processor.process(text))
            except AssetResolutionError:
                logger.error(
                    'Adaptive media: cannot expand images in %s',
                    getattr(instance, 'source_path', instance),
                )
                raise


def process_content(article_generator):
    """Process articles to expand managed images."""
    process_instances(article_generator.articles, article_generator.settings)


def process_pages(page_generator):
    """Process pages to expand managed images."""
    process_instances(page_generator.pages, page_generator.settings)


def register():
    """Register the plugin with Pelican."""
    signals.article_generator_finalized.connect(process_content)
    signals.page_generator_finalized.connect(process_pages)
