"""Load and validate guide configuration YAML.

This subpackage parses ``guide.yaml``, merges global defaults with per-guide
overrides and produces :class:`GuideSiteConfig` / :class:`GuideConfig`
dataclasses that the validator and page generator consume.

Examples
--------
>>> from pathlib import Path
>>> from guidebook.config import load_guide_config
>>> site = load_guide_config(Path("config/guide.yaml"))  # doctest: +SKIP
>>> site.get_guide("laravel").contents_heading  # doctest: +SKIP
'Contents'
"""

from .loader import load_guide_config
from .models import GuideConfig, GuideConfigError, GuideSiteConfig, ThemeConfig

__all__ = [
    "GuideConfig",
    "GuideConfigError",
    "GuideSiteConfig",
    "ThemeConfig",
    "load_guide_config",
]
