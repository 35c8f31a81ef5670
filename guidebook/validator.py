"""Structural checks for guide documents.

The validator never judges the advice a guide gives; it only looks at the
shape of the document. Every check returns :class:`~guidebook.errors.GuideIssue`
instances instead of raising, so one run reports every defect.

Example
-------
>>> from guidebook.validator import GuideValidator
>>> text = "# Guide\\n\\n## Contents\\n\\n- [Gone](#gone)\\n\\n## Here\\nBody\\n"
>>> [issue.kind for issue in GuideValidator().validate(text)]
['BrokenLinkError', 'TocMismatchError']
"""

from __future__ import annotations

import logging
import math
import typing as typ

from .errors import (
    BrokenLinkError,
    DuplicateAnchorError,
    GuideIssue,
    MalformedExampleError,
    MissingBackLinkError,
    TocMismatchError,
)
from .markdown_parser import parse_guide
from .topic_index import slugify

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import GuideConfig
    from .models import GuideEntry, ParsedGuide

logger = logging.getLogger(__name__)


def validate_guide(
    parsed: ParsedGuide, *, require_back_links: bool = False
) -> list[GuideIssue]:
    """Return every structural issue in ``parsed`` ordered by source line.

    Parameters
    ----------
    parsed : ParsedGuide
        Output of :func:`~guidebook.markdown_parser.parse_guide`.
    require_back_links : bool, optional
        When ``True``, report entries that never link back to the contents
        anchor.

    Returns
    -------
    list[GuideIssue]
        Issues sorted by line; empty when the guide is well formed.
    """
    issues: list[GuideIssue] = []
    issues.extend(_check_duplicate_anchors(parsed.entries))
    issues.extend(_check_links(parsed))
    issues.extend(_check_examples(parsed))
    issues.extend(_check_toc(parsed))
    if require_back_links:
        issues.extend(_check_back_links(parsed))
    issues.sort(key=lambda issue: issue.line)
    logger.debug("validated %d entries: %d issues", len(parsed.entries), len(issues))
    return issues


def _check_duplicate_anchors(entries: list[GuideEntry]) -> list[GuideIssue]:
    seen: dict[str, GuideEntry] = {}
    issues: list[GuideIssue] = []
    for entry in entries:
        if not entry.anchor:
            issues.append(
                DuplicateAnchorError(
                    f"'{entry.title}' does not produce an anchor.", line=entry.line
                )
            )
            continue
        first = seen.get(entry.anchor)
        if first is not None:
            issues.append(
                DuplicateAnchorError(
                    f"'{entry.title}' slugifies to '{entry.anchor}', already used "
                    f"by '{first.title}' on line {first.line}.",
                    line=entry.line,
                    anchor=entry.anchor,
                )
            )
            continue
        seen[entry.anchor] = entry
    return issues


def _valid_targets(parsed: ParsedGuide) -> set[str]:
    targets = {entry.anchor for entry in parsed.entries}
    if parsed.toc_span is not None:
        targets.add(parsed.contents_anchor)
    if parsed.title:
        targets.add(slugify(parsed.title))
    return targets


def _check_links(parsed: ParsedGuide) -> list[GuideIssue]:
    targets = _valid_targets(parsed)
    issues: list[GuideIssue] = []
    for link in parsed.links:
        if not link.target or link.target in targets:
            continue
        where = "contents" if link.source == "toc" else "body"
        issues.append(
            BrokenLinkError(
                f"{where} link '[{link.text}](#{link.target})' does not resolve "
                "to any entry.",
                line=link.line,
                anchor=link.target,
            )
        )
    return issues


def _check_examples(parsed: ParsedGuide) -> list[GuideIssue]:
    issues: list[GuideIssue] = [
        MalformedExampleError(
            f"code fence opened on line {line} is never closed.", line=line
        )
        for line in parsed.unterminated_fences
    ]
    for entry in parsed.entries:
        for pair in entry.examples:
            if pair.is_complete:
                continue
            missing = "good" if pair.good is None else "bad"
            present = "bad" if missing == "good" else "good"
            issues.append(
                MalformedExampleError(
                    f"'{entry.title}' has a {present} example with no {missing} "
                    "counterpart.",
                    line=pair.line,
                    anchor=entry.anchor,
                )
            )
    return issues


def _check_toc(parsed: ParsedGuide) -> list[GuideIssue]:
    """Report contents rows and entries that do not line up one-to-one."""
    if parsed.toc_span is None:
        if not parsed.entries:
            return []
        return [TocMismatchError("guide has entries but no table of contents.", line=1)]

    issues: list[GuideIssue] = []
    toc_line = parsed.toc_span[0] + 1
    toc_anchors = [row.anchor for row in parsed.toc]
    entry_anchors = [entry.anchor for entry in parsed.entries]

    listed = set(toc_anchors)
    for entry in parsed.entries:
        if entry.anchor and entry.anchor not in listed:
            issues.append(
                TocMismatchError(
                    f"entry '{entry.title}' is missing from the table of contents.",
                    line=entry.line,
                    anchor=entry.anchor,
                )
            )

    counted: dict[str, int] = {}
    for row in parsed.toc:
        counted[row.anchor] = counted.get(row.anchor, 0) + 1
        if counted[row.anchor] == 2:
            issues.append(
                TocMismatchError(
                    f"contents lists '#{row.anchor}' more than once.",
                    line=row.line,
                    anchor=row.anchor,
                )
            )

    shared = set(entry_anchors)
    toc_order = [anchor for anchor in dict.fromkeys(toc_anchors) if anchor in shared]
    entry_order = [anchor for anchor in dict.fromkeys(entry_anchors) if anchor in listed]
    if toc_order != entry_order:
        issues.append(
            TocMismatchError(
                "table of contents order differs from entry order.", line=toc_line
            )
        )
    return issues


def _check_back_links(parsed: ParsedGuide) -> list[GuideIssue]:
    back_link_lines = [
        link.line
        for link in parsed.links
        if link.source == "body" and link.target == parsed.contents_anchor
    ]
    starts = [entry.line for entry in parsed.entries]
    stops = [*starts[1:], math.inf]
    return [
        MissingBackLinkError(
            f"'{entry.title}' has no link back to #{parsed.contents_anchor}.",
            line=entry.line,
            anchor=entry.anchor,
        )
        for entry, stop in zip(parsed.entries, stops, strict=True)
        if not any(entry.line < line < stop for line in back_link_lines)
    ]


class GuideValidator:
    """Parse and validate guide text with a fixed set of parser options."""

    def __init__(self, guide: GuideConfig | None = None) -> None:
        self.guide = guide

    def parse(self, text: str) -> ParsedGuide:
        """Parse ``text`` using the configured headings and labels."""
        if self.guide is None:
            return parse_guide(text)
        return parse_guide(
            text,
            contents_heading=self.guide.contents_heading,
            entry_level=self.guide.entry_level,
            bad_labels=self.guide.bad_labels,
            good_labels=self.guide.good_labels,
        )

    def validate(self, text: str) -> list[GuideIssue]:
        """Return the issues found in ``text``."""
        require_back_links = self.guide.require_back_links if self.guide else False
        return validate_guide(self.parse(text), require_back_links=require_back_links)

    def validate_file(self, path: Path) -> list[GuideIssue]:
        """Read ``path`` as UTF-8 and return the issues found in it."""
        return self.validate(path.read_text(encoding="utf-8"))


__all__ = ["GuideValidator", "validate_guide"]
