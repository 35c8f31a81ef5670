"""Utility helpers shared by the guidebook configuration loader."""

from __future__ import annotations

import dataclasses as dc

from guidebook.errors import GuideConfigError

from .models import ThemeConfig


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _labels(value: object | None, fallback: tuple[str, ...], *, field: str) -> tuple[str, ...]:
    """Normalize a label list (or single label) into a tuple of strings."""
    if value is None:
        return fallback
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        msg = f"'{field}' must be a string or a list of strings."
        raise GuideConfigError(msg)
    labels = tuple(text for item in value if (text := _optional_str(item)))
    if not labels:
        msg = f"'{field}' must name at least one label."
        raise GuideConfigError(msg)
    return labels


def _entry_level(value: object | None, fallback: int) -> int:
    """Return a heading level between 2 and 6."""
    if value is None:
        return fallback
    if isinstance(value, bool) or not isinstance(value, int) or not 2 <= value <= 6:
        msg = f"'entry_level' must be an integer from 2 to 6, got {value!r}."
        raise GuideConfigError(msg)
    return value


_THEME_FIELDS = frozenset(field.name for field in dc.fields(ThemeConfig))


def _merge_theme(base: ThemeConfig, override: object | None) -> ThemeConfig:
    """Return ``base`` with the recognised keys of ``override`` applied."""
    if not override:
        return base
    if not isinstance(override, dict):
        msg = "'theme' must be a mapping."
        raise GuideConfigError(msg)
    changes = {
        key: str(value) for key, value in override.items() if key in _THEME_FIELDS
    }
    return dc.replace(base, **changes)
