"""Dataclasses describing a guidebook site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from guidebook.errors import GuideConfigError
from guidebook.markdown_parser import (
    DEFAULT_BAD_LABELS,
    DEFAULT_CONTENTS_HEADING,
    DEFAULT_GOOD_LABELS,
)
from guidebook.sources import is_remote


@dc.dataclass(slots=True)
class ThemeConfig:
    """Visual theming applied to the rendered guide."""

    hero_eyebrow: str = "Style guide"
    hero_tagline: str = "Conventions and examples"
    site_name: str = "guidebook"
    bad_label: str = "Bad"
    good_label: str = "Good"


@dc.dataclass(slots=True)
class GuideConfig:
    """Resolved settings for one guide document.

    Attributes
    ----------
    key : str
        Identifier of the guide in the configuration file.
    label : str
        Human readable name shown in page titles.
    source : str
        Local path or ``http(s)`` URL of the Markdown guide.
    output_dir : Path
        Directory receiving the rendered HTML.
    filename : str
        Name of the rendered HTML file.
    pygments_style : str
        Pygments style used for highlighted examples.
    contents_heading : str
        Heading text of the table of contents block.
    entry_level : int
        Heading level introducing a topic entry.
    bad_labels, good_labels : tuple[str, ...]
        Label lines introducing non-preferred and preferred snippets.
    require_back_links : bool
        Whether every entry must link back to the contents anchor.
    strict : bool
        Refuse to render a guide with structural issues.
    theme : ThemeConfig
        Presentation settings.
    """

    key: str
    label: str
    source: str
    output_dir: Path = Path("public")
    filename: str = "index.html"
    pygments_style: str = "monokai"
    contents_heading: str = DEFAULT_CONTENTS_HEADING
    entry_level: int = 2
    bad_labels: tuple[str, ...] = DEFAULT_BAD_LABELS
    good_labels: tuple[str, ...] = DEFAULT_GOOD_LABELS
    require_back_links: bool = False
    strict: bool = False
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)

    @property
    def is_remote(self) -> bool:
        """Return ``True`` when ``source`` is an HTTP(S) URL."""
        return is_remote(self.source)

    @property
    def output_path(self) -> Path:
        """Return the full path of the rendered HTML file."""
        return self.output_dir / self.filename


@dc.dataclass(slots=True)
class GuideSiteConfig:
    """Top-level configuration holding every guide definition."""

    guides: dict[str, GuideConfig]
    default_guide: str | None = None

    def get_guide(self, key: str | None = None) -> GuideConfig:
        """Return the requested guide or fall back to the configured default.

        Raises
        ------
        GuideConfigError
            If ``key`` does not name a configured guide.
        """
        if key is None:
            return self._get_default_guide()
        try:
            return self.guides[key]
        except KeyError as exc:
            available = ", ".join(sorted(self.guides))
            msg = f"Unknown guide '{key}'. Known guides: {available}"
            raise GuideConfigError(msg) from exc

    def _get_default_guide(self) -> GuideConfig:
        """Return the configured default guide or the first defined guide."""
        if self.default_guide and self.default_guide in self.guides:
            return self.guides[self.default_guide]
        if not self.guides:  # pragma: no cover - rejected by the loader
            msg = "No guides configured."
            raise GuideConfigError(msg)
        return next(iter(self.guides.values()))


__all__ = ["GuideConfig", "GuideConfigError", "GuideSiteConfig", "ThemeConfig"]
