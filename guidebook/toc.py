r"""Render and synchronise a guide's table of contents.

The contents block is derived data: every entry gets exactly one row, in
entry order, linking to the entry's anchor. :func:`sync_toc` rewrites the
rows of an existing block in place (keeping its bullet style and spacing) or
inserts a new block after the preamble when the guide has none. Other text
found between rows is kept below the rewritten rows, and a guide without
entries is returned as is.

Example
-------
>>> from guidebook.toc import sync_toc
>>> print(sync_toc("# Guide\n\n## One\nBody\n"), end="")
# Guide
<BLANKLINE>
## Contents
<BLANKLINE>
- [One](#one)
<BLANKLINE>
## One
Body
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from .markdown_parser import (
    DEFAULT_BAD_LABELS,
    DEFAULT_CONTENTS_HEADING,
    DEFAULT_GOOD_LABELS,
    parse_guide,
)
from .topic_index import TopicIndex

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import ParsedGuide

_BULLET_PATTERN = re.compile(r"^(\s*(?:[-*+]|\d+[.)])\s+)?\[")


@dc.dataclass(frozen=True, slots=True)
class TocStyle:
    """Presentation of contents rows.

    Attributes
    ----------
    bullet : str
        List marker written before each link (``"-"``, ``"*"``, ``"1."``) or
        an empty string for bare link lines.
    blank_lines : bool
        Separate rows with blank lines, as bare link lists need to.
    """

    bullet: str = "-"
    blank_lines: bool = False


def render_toc_lines(
    rows: cabc.Iterable[tuple[str, str]], style: TocStyle | None = None
) -> list[str]:
    """Return Markdown lines for ``(title, anchor)`` rows."""
    style = style or TocStyle()
    lines: list[str] = []
    for position, (title, anchor) in enumerate(rows, start=1):
        if style.blank_lines and lines:
            lines.append("")
        bullet = style.bullet
        if bullet and bullet[0].isdigit():
            bullet = f"{position}{bullet[-1]}"
        prefix = f"{bullet} " if bullet else ""
        lines.append(f"{prefix}[{title}](#{anchor})")
    return lines


def render_toc(index: TopicIndex, style: TocStyle | None = None) -> str:
    """Return the contents block rows for every entry in ``index``.

    Examples
    --------
    >>> index = TopicIndex()
    >>> _ = index.add_entry("Foo Bar", "")
    >>> render_toc(index)
    '- [Foo Bar](#foo-bar)\\n'
    """
    return "\n".join(render_toc_lines(index.render_index(), style)) + "\n"


def detect_style(lines: list[str], parsed: ParsedGuide) -> TocStyle:
    """Infer the bullet and spacing used by an existing contents block."""
    if not parsed.toc:
        return TocStyle()
    first = lines[parsed.toc[0].line - 1]
    match = _BULLET_PATTERN.match(first)
    bullet = (match.group(1) or "").strip() if match else "-"
    blank_lines = False
    if len(parsed.toc) > 1:
        first_idx, second_idx = parsed.toc[0].line - 1, parsed.toc[1].line - 1
        blank_lines = any(
            not lines[idx].strip() for idx in range(first_idx + 1, second_idx)
        )
    return TocStyle(bullet=bullet, blank_lines=blank_lines)


def sync_toc(
    markdown_text: str,
    *,
    contents_heading: str = DEFAULT_CONTENTS_HEADING,
    entry_level: int = 2,
    bad_labels: cabc.Iterable[str] = DEFAULT_BAD_LABELS,
    good_labels: cabc.Iterable[str] = DEFAULT_GOOD_LABELS,
) -> str:
    """Return ``markdown_text`` with its contents block matching its entries.

    Running the function on its own output returns the text unchanged.

    Raises
    ------
    DuplicateAnchorError
        If two entries share an anchor; no consistent contents block exists
        for such a guide.
    """
    parsed = parse_guide(
        markdown_text,
        contents_heading=contents_heading,
        entry_level=entry_level,
        bad_labels=bad_labels,
        good_labels=good_labels,
    )
    index = TopicIndex.from_entries(parsed.entries)
    lines = markdown_text.splitlines()
    rows = render_toc_lines(index.render_index(), detect_style(lines, parsed))
    if not rows and not parsed.toc:
        return markdown_text

    if parsed.toc:
        start = parsed.toc[0].line - 1
        stop = parsed.toc[-1].line
        row_indices = {row.line - 1 for row in parsed.toc}
        # Prose found between rows moves below the rewritten block.
        notes = [
            lines[idx]
            for idx in range(start, stop)
            if idx not in row_indices and lines[idx].strip()
        ]
        trailer = ["", *notes] if notes else []
        updated = lines[:start] + rows + trailer + lines[stop:]
    elif parsed.toc_span is not None:
        heading_idx = parsed.toc_span[0]
        updated = lines[: heading_idx + 1] + ["", *rows] + lines[heading_idx + 1 :]
    else:
        insert_at = parsed.entries[0].line - 1 if parsed.entries else len(lines)
        block = [f"## {contents_heading}", "", *rows, ""]
        if insert_at > 0 and lines[insert_at - 1].strip():
            block.insert(0, "")
        updated = lines[:insert_at] + block + lines[insert_at:]

    result = "\n".join(updated)
    if markdown_text.endswith("\n") or not markdown_text:
        result += "\n"
    return result


__all__ = ["TocStyle", "detect_style", "render_toc", "render_toc_lines", "sync_toc"]
