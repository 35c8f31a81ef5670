r"""Ordered, anchor-addressable collection of guide entries.

The index is append-only: entries keep their insertion order, which is the
only ordering it knows about, and every entry is reachable through the anchor
derived from its title.

Example
-------
>>> from guidebook.topic_index import TopicIndex
>>> index = TopicIndex()
>>> entry = index.add_entry("Foo Bar", "Prefer foo.")
>>> entry.anchor
'foo-bar'
>>> index.lookup("foo-bar").title
'Foo Bar'
>>> index.render_index()
[('Foo Bar', 'foo-bar')]
"""

from __future__ import annotations

import logging
import re
import typing as typ

from .errors import DuplicateAnchorError, NotFoundError
from .models import GuideEntry

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import ComparisonTable, ExamplePair

logger = logging.getLogger(__name__)

_PUNCTUATION_PATTERN = re.compile(r"[^\w\- ]")


def slugify(title: str) -> str:
    """Return the anchor for ``title``.

    Lower-cases the text, strips punctuation and turns each space into a
    hyphen. Hyphens and underscores already present are kept, so
    ``"Foo Bar"`` and ``"foo-bar"`` share the anchor ``foo-bar``.

    Examples
    --------
    >>> slugify("Fat models, skinny controllers")
    'fat-models-skinny-controllers'
    >>> slugify("Don't use `env()` outside config")
    'dont-use-env-outside-config'
    """
    lowered = title.strip().lower()
    return _PUNCTUATION_PATTERN.sub("", lowered).replace(" ", "-")


class TopicIndex:
    """Append-only list of :class:`GuideEntry` records with anchor lookup."""

    def __init__(self) -> None:
        self._entries: list[GuideEntry] = []
        self._positions: dict[str, int] = {}

    @classmethod
    def from_entries(cls, entries: cabc.Iterable[GuideEntry]) -> TopicIndex:
        """Build an index from entries, failing on the first anchor collision."""
        index = cls()
        for entry in entries:
            index.add(entry)
        return index

    def add_entry(
        self,
        title: str,
        body: str,
        *,
        examples: cabc.Iterable[ExamplePair] = (),
        tables: cabc.Iterable[ComparisonTable] = (),
        line: int = 0,
    ) -> GuideEntry:
        """Append a new entry whose anchor is derived from ``title``.

        Parameters
        ----------
        title : str
            Heading of the topic.
        body : str
            Markdown describing the convention.
        examples : Iterable[ExamplePair], optional
            Example pairs belonging to the entry.
        tables : Iterable[ComparisonTable], optional
            Comparison tables embedded in the body.
        line : int, optional
            Source line of the heading, when known.

        Returns
        -------
        GuideEntry
            The stored entry.

        Raises
        ------
        DuplicateAnchorError
            If another entry already owns the derived anchor. The index is
            left unchanged.
        ValueError
            If ``title`` produces an empty anchor.
        """
        entry = GuideEntry(
            title=title.strip(),
            anchor=slugify(title),
            body=body,
            examples=tuple(examples),
            tables=tuple(tables),
            line=line,
        )
        return self.add(entry)

    def add(self, entry: GuideEntry) -> GuideEntry:
        """Append a prebuilt entry, enforcing anchor uniqueness."""
        if not entry.anchor:
            msg = f"Title {entry.title!r} does not produce an anchor."
            raise ValueError(msg)
        if entry.anchor in self._positions:
            existing = self._entries[self._positions[entry.anchor]]
            msg = (
                f"'{entry.title}' slugifies to '{entry.anchor}', "
                f"already used by '{existing.title}'."
            )
            raise DuplicateAnchorError(msg, line=entry.line, anchor=entry.anchor)
        self._positions[entry.anchor] = len(self._entries)
        self._entries.append(entry)
        logger.debug("indexed entry %s as #%s", entry.title, entry.anchor)
        return entry

    def lookup(self, anchor: str) -> GuideEntry:
        """Return the entry for ``anchor``; a leading ``#`` is ignored.

        Raises
        ------
        NotFoundError
            If no entry owns the anchor.
        """
        key = anchor[1:] if anchor.startswith("#") else anchor
        position = self._positions.get(key)
        if position is None:
            raise NotFoundError(key)
        return self._entries[position]

    def render_index(self) -> list[tuple[str, str]]:
        """Return ``(title, anchor)`` pairs in insertion order."""
        return [(entry.title, entry.anchor) for entry in self._entries]

    @property
    def anchors(self) -> list[str]:
        """Return anchors in insertion order."""
        return [entry.anchor for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> cabc.Iterator[GuideEntry]:
        return iter(self._entries)

    def __contains__(self, anchor: object) -> bool:
        return isinstance(anchor, str) and anchor.lstrip("#") in self._positions


__all__ = ["TopicIndex", "slugify"]
