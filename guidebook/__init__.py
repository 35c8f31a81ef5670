"""Tooling for Markdown style guides built from "good vs bad" topic entries.

This package indexes guide entries by anchor, lints the document structure,
keeps the table of contents in step with the entries and renders the guide
to static HTML. The ``guide`` console script wraps those operations.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``TopicIndex``: Ordered, anchor-addressable entry collection.

Examples
--------
>>> from guidebook import TopicIndex
>>> index = TopicIndex()
>>> index.add_entry("Foo Bar", "Prefer foo.").anchor
'foo-bar'
"""

from __future__ import annotations

from .cli import app, main
from .topic_index import TopicIndex

__all__ = ["TopicIndex", "app", "main"]
