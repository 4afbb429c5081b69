
# --- Site Information ---
SITENAME = 'eloise.rip'
SITEURL = 'https://eloise.rip'

# --- Paths ---
PATH = 'content'
ARTICLE_PATHS = ['articles']
PAGE_PATHS = ['pages']
STATIC_PATHS = ['media', 'extra']

# --- Plugins ---
PLUGIN_PATHS = ['pelican-plugins']
PLUGINS = ['adaptive_media']

# --- Adaptive Media ---
ADAPTIVE_MEDIA_ENABLED = True
# Asset id -> folder of rendered widths under ADAPTIVE_MEDIA_DIR
ADAPTIVE_MEDIA_ASSETS = {}
ADAPTIVE_MEDIA_MANIFEST = 'media/assets.json'
ADAPTIVE_MEDIA_DIR = 'media/images'
ADAPTIVE_MEDIA_URL = '/media/images'

# --- Markdown Extensions ---
# xhtml output self-closes <img /> so ![Cat](cat.jpg){: data-fileEntryId="42" } is expanded too
MARKDOWN = {
    'extensions': [
        'markdown.extensions.extra',
        'markdown.extensions.meta',
    ],
    'output_format': 'xhtml',
}

RELATIVE_URLS = True
