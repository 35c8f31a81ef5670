"""Load guide configuration YAML into typed dataclasses."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from guidebook.errors import GuideConfigError
from guidebook.markdown_parser import (
    DEFAULT_BAD_LABELS,
    DEFAULT_CONTENTS_HEADING,
    DEFAULT_GOOD_LABELS,
)

from .helpers import (
    _entry_level,
    _labels,
    _merge_theme,
    _optional_str,
)
from .models import GuideConfig, GuideSiteConfig, ThemeConfig


def load_guide_config(path: Path) -> GuideSiteConfig:
    """Load the YAML configuration describing one or more guides.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/guide.yaml``).

    Returns
    -------
    GuideSiteConfig
        Parsed configuration with defaults applied to every guide.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    GuideConfigError
        If the top-level structure is not a mapping, no guides are defined,
        or a guide lacks a ``source``.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from guidebook.config import load_guide_config
    >>> config = load_guide_config(Path("config/guide.yaml"))  # doctest: +SKIP
    >>> config.get_guide().source  # doctest: +SKIP
    'README.md'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise GuideConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    defaults = raw.get("defaults", {}) or {}

    guide_defaults = _GuideDefaults(
        theme=_merge_theme(ThemeConfig(), defaults.get("theme")),
        output_dir=Path(defaults.get("output_dir", "public")),
        filename=defaults.get("filename", "index.html"),
        pygments_style=defaults.get("pygments_style", "monokai"),
        contents_heading=defaults.get("contents_heading", DEFAULT_CONTENTS_HEADING),
        entry_level=_entry_level(defaults.get("entry_level"), 2),
        bad_labels=_labels(
            defaults.get("bad_labels"), DEFAULT_BAD_LABELS, field="bad_labels"
        ),
        good_labels=_labels(
            defaults.get("good_labels"), DEFAULT_GOOD_LABELS, field="good_labels"
        ),
        require_back_links=bool(defaults.get("require_back_links", False)),
        strict=bool(defaults.get("strict", False)),
    )

    guides_raw = raw.get("guides") or {}
    if not guides_raw:
        msg = "No guides defined in configuration."
        raise GuideConfigError(msg)

    guides: dict[str, GuideConfig] = {}
    for key, payload in guides_raw.items():
        match payload:
            case dict():
                guides[key] = _build_guide_config(
                    key=str(key), payload=payload, defaults=guide_defaults
                )
            case str():
                guides[key] = _build_guide_config(
                    key=str(key), payload={"source": payload}, defaults=guide_defaults
                )
            case _:
                continue

    return GuideSiteConfig(
        guides=guides, default_guide=_optional_str(defaults.get("default_guide"))
    )


@dc.dataclass(slots=True)
class _GuideDefaults:
    """Internal container for guide default configuration values."""

    theme: ThemeConfig
    output_dir: Path
    filename: str
    pygments_style: str
    contents_heading: str
    entry_level: int
    bad_labels: tuple[str, ...]
    good_labels: tuple[str, ...]
    require_back_links: bool
    strict: bool


def _build_guide_config(
    *,
    key: str,
    payload: typ.Mapping[str, typ.Any],
    defaults: _GuideDefaults,
) -> GuideConfig:
    """Build a GuideConfig for a single guide entry using defaults and overrides."""
    source = _optional_str(payload.get("source"))
    if not source:
        msg = f"Guide '{key}' is missing 'source'."
        raise GuideConfigError(msg)

    return GuideConfig(
        key=key,
        label=payload.get("label") or key.replace("-", " ").title(),
        source=source,
        output_dir=Path(payload.get("output_dir", defaults.output_dir)),
        filename=payload.get("filename", defaults.filename),
        pygments_style=payload.get("pygments_style", defaults.pygments_style),
        contents_heading=payload.get("contents_heading", defaults.contents_heading),
        entry_level=_entry_level(payload.get("entry_level"), defaults.entry_level),
        bad_labels=_labels(
            payload.get("bad_labels"), defaults.bad_labels, field="bad_labels"
        ),
        good_labels=_labels(
            payload.get("good_labels"), defaults.good_labels, field="good_labels"
        ),
        require_back_links=bool(
            payload.get("require_back_links", defaults.require_back_links)
        ),
        strict=bool(payload.get("strict", defaults.strict)),
        theme=_merge_theme(defaults.theme, payload.get("theme")),
    )


__all__ = ["load_guide_config"]
