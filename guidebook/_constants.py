"""Common literal values used across guidebook.

Examples
--------
>>> from guidebook import _constants
>>> _constants.GUIDE_META_TEMPLATE.format(key="laravel")
'.guidebook-laravel-meta.json'
"""

GUIDE_META_TEMPLATE = ".guidebook-{key}-meta.json"
DEFAULT_CONFIG_PATH = "config/guide.yaml"
