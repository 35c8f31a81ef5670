"""Value records describing a parsed style guide.

Every record is a frozen, slotted dataclass: entries are authored once in the
source document and never mutated by the toolchain.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

LinkSource = typ.Literal["toc", "body"]


@dc.dataclass(frozen=True, slots=True)
class CodeSample:
    """One fenced code block introduced by a "Bad" or "Good" label.

    Attributes
    ----------
    language : str | None
        Language tag from the opening fence, if any.
    code : str
        Body of the block without the fences.
    line : int
        1-based line of the opening fence.
    """

    language: str | None
    code: str
    line: int = 0


@dc.dataclass(frozen=True, slots=True)
class ExamplePair:
    """A non-preferred snippet and its preferred counterpart."""

    bad: CodeSample | None = None
    good: CodeSample | None = None

    @property
    def is_complete(self) -> bool:
        """Return ``True`` when both halves of the pair are present."""
        return self.bad is not None and self.good is not None

    @property
    def line(self) -> int:
        """Return the line of the first sample in the pair."""
        first = self.bad or self.good
        return first.line if first else 0


@dc.dataclass(frozen=True, slots=True)
class ComparisonRow:
    """A (concept, recommended form, discouraged form) row."""

    concept: str
    recommended: str
    discouraged: str
    cells: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class ComparisonTable:
    """Pipe-delimited table embedded in a single entry body."""

    headers: tuple[str, ...]
    rows: tuple[ComparisonRow, ...]
    line: int = 0


@dc.dataclass(frozen=True, slots=True)
class GuideEntry:
    """A single topic: title, prose and example pairs.

    Attributes
    ----------
    title : str
        Heading text as written in the guide.
    anchor : str
        Slug derived from ``title``; unique within a topic index.
    body : str
        Markdown body of the entry, heading excluded.
    examples : tuple[ExamplePair, ...]
        Example pairs in document order.
    tables : tuple[ComparisonTable, ...]
        Comparison tables found in the body.
    line : int
        1-based heading line, ``0`` for entries built in code.
    """

    title: str
    anchor: str
    body: str
    examples: tuple[ExamplePair, ...] = ()
    tables: tuple[ComparisonTable, ...] = ()
    line: int = 0

    @property
    def example(self) -> ExamplePair | None:
        """Return the first example pair, or ``None`` when the entry has none."""
        return self.examples[0] if self.examples else None


@dc.dataclass(frozen=True, slots=True)
class TocRow:
    """A (title, anchor) row of the rendered table of contents."""

    title: str
    anchor: str
    line: int = 0


@dc.dataclass(frozen=True, slots=True)
class AnchorLink:
    """An intra-document ``[text](#target)`` reference."""

    target: str
    text: str
    line: int
    source: LinkSource = "body"


@dc.dataclass(slots=True)
class ParsedGuide:
    """Everything the parser extracts from one guide document.

    Attributes
    ----------
    title : str
        Text of the first top-level heading; empty when absent.
    preamble : str
        Markdown between the title and the first entry or contents block.
    toc : list[TocRow]
        Rows of the contents block in document order.
    toc_span : tuple[int, int] | None
        Half-open 0-based line range ``[start, end)`` of the contents block
        (heading included when there is one).
    entries : list[GuideEntry]
        Topic entries in document order. Anchors are *not* deduplicated.
    links : list[AnchorLink]
        Every anchor link outside code fences.
    unterminated_fences : list[int]
        Lines of opening fences that are never closed.
    contents_anchor : str
        Anchor used by "back to contents" links.
    """

    title: str = ""
    preamble: str = ""
    toc: list[TocRow] = dc.field(default_factory=list)
    toc_span: tuple[int, int] | None = None
    entries: list[GuideEntry] = dc.field(default_factory=list)
    links: list[AnchorLink] = dc.field(default_factory=list)
    unterminated_fences: list[int] = dc.field(default_factory=list)
    contents_anchor: str = "contents"


__all__ = [
    "AnchorLink",
    "CodeSample",
    "ComparisonRow",
    "ComparisonTable",
    "ExamplePair",
    "GuideEntry",
    "LinkSource",
    "ParsedGuide",
    "TocRow",
]
