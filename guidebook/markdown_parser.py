r"""Parse a Markdown style guide into structured entries.

The parser walks the document line by line so it can report 1-based line
numbers for every heading, link and code fence it sees. Headings and links
inside fenced code blocks are ignored.

A guide looks like this::

    # Project best practices

    ## Contents

    [Fat models, skinny controllers](#fat-models-skinny-controllers)

    ## Fat models, skinny controllers

    Put database logic in models.

    Bad:

    ```php
    $clients = Client::where(...)->get();
    ```

    Good:

    ```php
    return view('index', ['clients' => $this->client->getWithNewOrders()]);
    ```

    [Back to contents](#contents)

Example
-------
>>> from guidebook.markdown_parser import parse_guide
>>> guide = parse_guide("# Guide\n\n## Contents\n\n- [Intro](#intro)\n\n## Intro\nBody\n")
>>> [entry.anchor for entry in guide.entries]
['intro']
>>> [row.anchor for row in guide.toc]
['intro']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ

from .models import (
    AnchorLink,
    CodeSample,
    ComparisonRow,
    ComparisonTable,
    ExamplePair,
    GuideEntry,
    ParsedGuide,
    TocRow,
)
from .topic_index import slugify

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

DEFAULT_CONTENTS_HEADING = "Contents"
DEFAULT_BAD_LABELS = ("Bad", "Bad example", "Don't")
DEFAULT_GOOD_LABELS = ("Good", "Good example", "Do")

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
FENCE_OPEN_PATTERN = re.compile(
    r"^(?P<indent>\s*)(?P<fence>`{3,}|~{3,})(?P<info>.*)$"
)
LINK_PATTERN = re.compile(r"\[([^\]]*)\]\(#([^)\s]*)\)")
INLINE_CODE_PATTERN = re.compile(r"`[^`\n]*`")
TOC_ITEM_PATTERN = re.compile(
    r"^\s*(?:(?:[-*+]|\d+[.)])\s+)?\[(?P<title>[^\]]+)\]\(#(?P<anchor>[^)\s]+)\)\s*$"
)
TABLE_SEPARATOR_PATTERN = re.compile(
    r"^\s*\|?\s*:?-+:?\s*(?:\|\s*:?-+:?\s*)*\|?\s*$"
)
CELL_SPLIT_PATTERN = re.compile(r"(?<!\\)\|")
EMPHASIS_WRAP_PATTERN = re.compile(r"^(\*{1,3}|_{1,3})(.+?)\1$")

_RECOMMENDED_HINTS = ("good", "recommended", "preferred", "shorter", "better")
_DISCOURAGED_HINTS = ("bad", "discouraged", "avoid", "common", "instead of")

ExampleRole = typ.Literal["bad", "good"]


@dc.dataclass(slots=True)
class _Fence:
    """Span of a fenced code block in the source lines."""

    start: int
    end: int | None
    language: str | None
    code: str


@dc.dataclass(slots=True)
class _Heading:
    index: int
    level: int
    text: str


@dc.dataclass(slots=True)
class _Scan:
    """Result of the first pass over the document."""

    headings: list[_Heading]
    fences: dict[int, _Fence]
    in_code: list[bool]


def _unwrap_emphasis(text: str) -> str:
    """Remove emphasis markers wrapping the whole of ``text``.

    ``**Title**`` becomes ``Title`` but ``*a* and *b*`` is left alone.
    """
    match = EMPHASIS_WRAP_PATTERN.match(text)
    while match and match.group(1) not in match.group(2):
        text = match.group(2).strip()
        match = EMPHASIS_WRAP_PATTERN.match(text)
    return text


def _clean_heading(text: str) -> str:
    """Return heading text without escapes or wrapping emphasis markers."""
    return _unwrap_emphasis(text.replace("\\", "").strip())


def fence_language(info: str) -> str | None:
    """Return the language tag of a fence info string (``rust,no_run`` -> ``rust``)."""
    token = info.strip().split(maxsplit=1)[0] if info.strip() else ""
    token = token.split(",", 1)[0].strip("{}.")
    return token or None


def _scan(lines: list[str]) -> _Scan:
    """Locate fences and headings, marking which lines sit inside code."""
    headings: list[_Heading] = []
    fences: dict[int, _Fence] = {}
    in_code = [False] * len(lines)
    idx = 0
    while idx < len(lines):
        line = lines[idx]
        opening = FENCE_OPEN_PATTERN.match(line)
        if opening and not (
            opening.group("fence")[0] == "`" and "`" in opening.group("info")
        ):
            fence = opening.group("fence")
            indent = len(opening.group("indent"))
            closing = re.compile(rf"^\s*{re.escape(fence[0])}{{{len(fence)},}}\s*$")
            end: int | None = None
            body: list[str] = []
            for cursor in range(idx + 1, len(lines)):
                if closing.match(lines[cursor]):
                    end = cursor
                    break
                body.append(_dedent(lines[cursor], indent))
            stop = end if end is not None else len(lines) - 1
            for covered in range(idx, stop + 1):
                in_code[covered] = True
            fences[idx] = _Fence(
                start=idx,
                end=end,
                language=fence_language(opening.group("info")),
                code="\n".join(body),
            )
            idx = stop + 1
            continue
        heading = HEADING_PATTERN.match(line)
        if heading:
            headings.append(
                _Heading(
                    index=idx,
                    level=len(heading.group(1)),
                    text=_clean_heading(heading.group(2)),
                )
            )
        idx += 1
    return _Scan(headings=headings, fences=fences, in_code=in_code)


def _dedent(line: str, width: int) -> str:
    """Strip up to ``width`` leading spaces from ``line``."""
    stripped = 0
    while stripped < width and stripped < len(line) and line[stripped] == " ":
        stripped += 1
    return line[stripped:]


def _normalize_label(text: str) -> str:
    """Return a label line lower-cased without emphasis or a trailing colon."""
    cleaned = _unwrap_emphasis(text.strip())
    cleaned = _unwrap_emphasis(cleaned.rstrip(":").strip())
    return cleaned.lower()


class LabelMatcher:
    """Classify "Bad:" / "Good:" style lines that introduce example blocks."""

    def __init__(
        self, bad_labels: cabc.Iterable[str], good_labels: cabc.Iterable[str]
    ) -> None:
        self._bad = {label.strip().lower() for label in bad_labels}
        self._good = {label.strip().lower() for label in good_labels}

    def classify(self, line: str) -> ExampleRole | None:
        label = _normalize_label(line)
        if not label:
            return None
        if label in self._bad:
            return "bad"
        if label in self._good:
            return "good"
        return None


def _split_cells(line: str) -> tuple[str, ...]:
    """Split a pipe-delimited table row into trimmed cells."""
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    return tuple(cell.strip() for cell in CELL_SPLIT_PATTERN.split(stripped))


def _column_matching(headers: tuple[str, ...], hints: tuple[str, ...]) -> int | None:
    for position, header in enumerate(headers):
        lowered = header.lower()
        if any(hint in lowered for hint in hints):
            return position
    return None


def _build_table(
    headers: tuple[str, ...], raw_rows: list[tuple[str, ...]], line: int
) -> ComparisonTable:
    """Map raw rows onto (concept, recommended, discouraged) triples."""
    recommended_col = _column_matching(headers, _RECOMMENDED_HINTS)
    discouraged_col = _column_matching(headers, _DISCOURAGED_HINTS)
    if recommended_col is None and len(headers) > 1:
        recommended_col = len(headers) - 1
    rows = [
        ComparisonRow(
            concept=_pick(cells, 0),
            recommended=_pick(cells, recommended_col),
            discouraged=_pick(cells, discouraged_col),
            cells=cells,
        )
        for cells in raw_rows
    ]
    return ComparisonTable(headers=headers, rows=tuple(rows), line=line)


def _pick(cells: tuple[str, ...], position: int | None) -> str:
    if position is None or position >= len(cells):
        return ""
    return cells[position]


def _extract_tables(
    lines: list[str], start: int, stop: int, in_code: list[bool]
) -> list[ComparisonTable]:
    """Return every pipe table between ``start`` and ``stop`` (exclusive)."""
    tables: list[ComparisonTable] = []
    idx = start
    while idx < stop - 1:
        line = lines[idx]
        if (
            not in_code[idx]
            and "|" in line
            and not in_code[idx + 1]
            and TABLE_SEPARATOR_PATTERN.match(lines[idx + 1])
            and "-" in lines[idx + 1]
        ):
            headers = _split_cells(line)
            rows: list[tuple[str, ...]] = []
            cursor = idx + 2
            while cursor < stop and not in_code[cursor] and "|" in lines[cursor]:
                if lines[cursor].strip():
                    rows.append(_split_cells(lines[cursor]))
                cursor += 1
            tables.append(_build_table(headers, rows, line=idx + 1))
            idx = cursor
            continue
        idx += 1
    return tables


def _extract_examples(
    lines: list[str],
    start: int,
    stop: int,
    scan: _Scan,
    labels: LabelMatcher,
) -> list[ExamplePair]:
    """Pair labelled code blocks between ``start`` and ``stop`` (exclusive).

    A bad sample waits for the next good sample. A second bad sample, or the
    end of the range, leaves the waiting one unpaired; a good sample with
    nothing waiting forms a good-only pair.
    """
    pairs: list[ExamplePair] = []
    pending_role: ExampleRole | None = None
    waiting_bad: CodeSample | None = None
    for idx in range(start, stop):
        fence = scan.fences.get(idx)
        if fence is not None:
            if pending_role is None:
                continue
            sample = CodeSample(language=fence.language, code=fence.code, line=idx + 1)
            if pending_role == "bad":
                if waiting_bad is not None:
                    pairs.append(ExamplePair(bad=waiting_bad))
                waiting_bad = sample
            else:
                pairs.append(ExamplePair(bad=waiting_bad, good=sample))
                waiting_bad = None
            pending_role = None
            continue
        if scan.in_code[idx]:
            continue
        role = labels.classify(lines[idx])
        if role is not None:
            pending_role = role
    if waiting_bad is not None:
        pairs.append(ExamplePair(bad=waiting_bad))
    return pairs


def _collect_links(
    lines: list[str], in_code: list[bool], toc_span: tuple[int, int] | None
) -> list[AnchorLink]:
    links: list[AnchorLink] = []
    for idx, line in enumerate(lines):
        if in_code[idx]:
            continue
        visible = INLINE_CODE_PATTERN.sub("", line)
        in_toc = toc_span is not None and toc_span[0] <= idx < toc_span[1]
        for match in LINK_PATTERN.finditer(visible):
            links.append(
                AnchorLink(
                    target=match.group(2),
                    text=match.group(1),
                    line=idx + 1,
                    source="toc" if in_toc else "body",
                )
            )
    return links


def _toc_rows(lines: list[str], start: int, stop: int) -> list[TocRow]:
    rows: list[TocRow] = []
    for idx in range(start, stop):
        match = TOC_ITEM_PATTERN.match(lines[idx])
        if match:
            rows.append(
                TocRow(
                    title=match.group("title").strip(),
                    anchor=match.group("anchor"),
                    line=idx + 1,
                )
            )
    return rows


def _bare_toc_span(lines: list[str], start: int, stop: int) -> tuple[int, int] | None:
    """Find a heading-less run of link-list lines between ``start`` and ``stop``."""
    first: int | None = None
    last: int | None = None
    for idx in range(start, stop):
        line = lines[idx]
        if TOC_ITEM_PATTERN.match(line):
            if first is None:
                first = idx
            last = idx
        elif line.strip() and first is not None:
            break
    if first is None or last is None:
        return None
    return first, last + 1


def parse_guide(
    markdown_text: str,
    *,
    contents_heading: str = DEFAULT_CONTENTS_HEADING,
    entry_level: int = 2,
    bad_labels: cabc.Iterable[str] = DEFAULT_BAD_LABELS,
    good_labels: cabc.Iterable[str] = DEFAULT_GOOD_LABELS,
) -> ParsedGuide:
    """Split a guide document into its title, contents block and entries.

    Parameters
    ----------
    markdown_text : str
        Raw Markdown of the guide.
    contents_heading : str, optional
        Heading text of the table of contents block. Matching is done on the
        slug, so ``"Table of Contents"`` and ``"table of contents"`` agree.
    entry_level : int, optional
        Heading level that introduces a topic entry (``2`` for ``##``).
    bad_labels, good_labels : Iterable[str], optional
        Label lines that introduce the non-preferred and preferred snippets.

    Returns
    -------
    ParsedGuide
        Parsed guide. Entries appear in document order and keep duplicate
        anchors so the validator can report them.
    """
    lines = markdown_text.splitlines()
    scan = _scan(lines)
    labels = LabelMatcher(bad_labels, good_labels)
    contents_anchor = slugify(contents_heading)

    title_heading = next((h for h in scan.headings if h.level == 1), None)
    contents = next(
        (
            h
            for h in scan.headings
            if h.level > 1 and slugify(h.text) == contents_anchor
        ),
        None,
    )

    toc_span: tuple[int, int] | None = None
    toc: list[TocRow] = []
    body_start = title_heading.index + 1 if title_heading else 0
    first_other = next(
        (h.index for h in scan.headings if h is not title_heading and h.index >= body_start),
        len(lines),
    )
    if contents is not None:
        block_end = next(
            (h.index for h in scan.headings if h.index > contents.index), len(lines)
        )
        toc_span = (contents.index, block_end)
        toc = _toc_rows(lines, contents.index + 1, block_end)
    else:
        toc_span = _bare_toc_span(lines, body_start, first_other)
        if toc_span is not None:
            toc = _toc_rows(lines, *toc_span)

    preamble_end = first_other
    if toc_span is not None and toc_span[0] < preamble_end:
        preamble_end = toc_span[0]
    preamble = "\n".join(lines[body_start:preamble_end]).strip()

    entries: list[GuideEntry] = []
    for position, heading in enumerate(scan.headings):
        if heading.level != entry_level or heading is contents:
            continue
        stop = next(
            (
                later.index
                for later in scan.headings[position + 1 :]
                if later.level <= entry_level
            ),
            len(lines),
        )
        start = heading.index + 1
        entries.append(
            GuideEntry(
                title=heading.text,
                anchor=slugify(heading.text),
                body="\n".join(lines[start:stop]).strip("\n"),
                examples=tuple(_extract_examples(lines, start, stop, scan, labels)),
                tables=tuple(_extract_tables(lines, start, stop, scan.in_code)),
                line=heading.index + 1,
            )
        )

    unterminated = [fence.start + 1 for fence in scan.fences.values() if fence.end is None]
    logger.debug(
        "parsed %d entries, %d contents rows, %d unterminated fences",
        len(entries),
        len(toc),
        len(unterminated),
    )
    return ParsedGuide(
        title=title_heading.text if title_heading else "",
        preamble=preamble,
        toc=toc,
        toc_span=toc_span,
        entries=entries,
        links=_collect_links(lines, scan.in_code, toc_span),
        unterminated_fences=unterminated,
        contents_anchor=contents_anchor,
    )


__all__ = [
    "DEFAULT_BAD_LABELS",
    "DEFAULT_CONTENTS_HEADING",
    "DEFAULT_GOOD_LABELS",
    "ExampleRole",
    "LabelMatcher",
    "fence_language",
    "parse_guide",
]
