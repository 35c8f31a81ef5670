"""Shared dataclasses used by the page generation pipeline."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True)
class EntryModel:
    """Structured data passed to the guide template for one entry.

    Attributes
    ----------
    title : str
        Entry heading.
    anchor : str
        Element id of the entry; equal to the topic index anchor.
    order : int
        1-based position of the entry in the guide.
    body_html : str
        Rendered HTML for the entry body.
    example_count : int
        Number of complete example pairs.
    incomplete_examples : int
        Number of example pairs missing one half.
    """

    title: str
    anchor: str
    order: int
    body_html: str
    example_count: int
    incomplete_examples: int


@dc.dataclass(slots=True)
class IssueModel:
    """A validator finding surfaced on the rendered page."""

    kind: str
    line: int
    message: str


__all__ = ["EntryModel", "IssueModel"]
