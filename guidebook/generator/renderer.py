"""Render guide markdown into HTML with highlighted, role-tagged examples.

Python-Markdown's ``fenced_code`` extension only understands fences that
start in column zero and carry a bare language tag. Guides copied from
READMEs often indent fences inside lists or use info strings such as
``rust,no_run``, so fence openers are rewritten before conversion. The same
pass records each block's language and example role, which are attached to
the highlighted ``<div>`` elements afterwards.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from guidebook.markdown_parser import FENCE_OPEN_PATTERN, fence_language
from guidebook.topic_index import slugify

if typ.TYPE_CHECKING:
    from guidebook.markdown_parser import ExampleRole, LabelMatcher

HIGHLIGHT_CLASS = "codehilite"
HIGHLIGHT_OPEN_TAG = re.compile(rf'<div class="{HIGHLIGHT_CLASS}">')
LIST_ITEM_PATTERN = re.compile(r"^ {0,3}(?:[-*+]|\d+[.)])\s")
MARKDOWN_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists", "toc")


def _heading_id(value: str, separator: str) -> str:  # noqa: ARG001
    """Adapt :func:`slugify` to the ``toc`` extension's slugify signature."""
    return slugify(value)


@dc.dataclass(frozen=True, slots=True)
class _Block:
    """Language and example role of one fenced block."""

    language: str | None
    role: ExampleRole | None

    def attributes(self) -> str:
        attrs = f'data-language="{escape(self.language or "text", quote=True)}"'
        if self.role is not None:
            attrs = f'{attrs} data-example="{self.role}"'
        return attrs


def _indent_width(line: str) -> int:
    expanded = line.expandtabs(4)
    return len(expanded) - len(expanded.lstrip())


def _prepare_fences(
    text: str, labels: LabelMatcher | None
) -> tuple[str, list[_Block]]:
    """Return ``text`` with fences flattened, plus one record per block.

    Openers indented by up to three spaces move to column zero and keep only
    their language tag; the matching closer is rewritten to the same fence.
    Indented code blocks, including fences indented four spaces or more, are
    highlighted too, so each gets a record without a language or role.
    """
    output: list[str] = []
    blocks: list[_Block] = []
    closer: re.Pattern[str] | None = None
    fence = ""
    previous = ""
    after_blank = True
    in_list = False
    in_indented = False
    for line in text.splitlines():
        if closer is not None:
            if closer.match(line):
                closer = None
                line = fence
            output.append(line)
            after_blank = False
            continue
        if not line.strip():
            output.append(line)
            after_blank = True
            continue
        width = _indent_width(line)
        if width >= 4:
            # List items take four-space continuations; code needs eight.
            if not in_indented and after_blank and width >= (8 if in_list else 4):
                in_indented = True
                blocks.append(_Block(language=None, role=None))
            output.append(line)
            after_blank = False
            previous = line
            continue
        in_indented = False
        if LIST_ITEM_PATTERN.match(line):
            in_list = True
        elif after_blank:
            in_list = False
        after_blank = False
        opening = FENCE_OPEN_PATTERN.match(line)
        if opening and not (
            opening.group("fence")[0] == "`" and "`" in opening.group("info")
        ):
            fence = opening.group("fence")
            language = fence_language(opening.group("info"))
            role = labels.classify(previous) if labels is not None else None
            blocks.append(_Block(language=language, role=role))
            closer = re.compile(rf"^\s*{re.escape(fence[0])}{{{len(fence)},}}\s*$")
            line = f"{fence}{language or ''}"
        output.append(line)
        previous = line
    return "\n".join(output), blocks


def _tag_blocks(html: str, blocks: list[_Block]) -> str:
    """Add ``data-*`` attributes to highlighted blocks in document order."""
    if not blocks:
        return html
    remaining = iter(blocks)

    def _with_attributes(_match: re.Match[str]) -> str:
        block = next(remaining, _Block(language=None, role=None))
        return f'<div class="{HIGHLIGHT_CLASS}" {block.attributes()}>'

    return HIGHLIGHT_OPEN_TAG.sub(_with_attributes, html, count=len(blocks))


class HtmlContentRenderer:
    """Render guide markdown with consistent code styling.

    Highlighted blocks carry ``data-language`` and, when a "Bad:" or "Good:"
    label introduces them, ``data-example="bad"`` or ``data-example="good"``
    so templates can style the two halves of an example pair.
    """

    def __init__(
        self, pygments_style: str = "monokai", labels: LabelMatcher | None = None
    ) -> None:
        """Initialize a renderer.

        Parameters
        ----------
        pygments_style : str, optional
            Pygments style for highlighted examples.
        labels : LabelMatcher, optional
            Classifier for example label lines; pass ``None`` to skip role
            tagging.
        """
        self.pygments_style = pygments_style
        self.labels = labels
        self._md = Markdown(
            extensions=list(MARKDOWN_EXTENSIONS),
            extension_configs={
                "codehilite": {
                    "css_class": HIGHLIGHT_CLASS,
                    "guess_lang": False,
                    "linenums": False,
                    "pygments_style": pygments_style,
                },
                "toc": {"slugify": _heading_id},
            },
        )

    @property
    def stylesheet(self) -> str:
        """Return the CSS rules for highlighted blocks in the chosen style."""
        formatter = HtmlFormatter(style=self.pygments_style, cssclass=HIGHLIGHT_CLASS)
        return formatter.get_style_defs(f".{HIGHLIGHT_CLASS}")

    def markdown(self, text: str) -> str:
        """Render markdown into HTML; heading ids follow the guide anchor rule."""
        source, blocks = _prepare_fences(text, self.labels)
        if not source.strip():
            return ""
        self._md.reset()
        return _tag_blocks(self._md.convert(source), blocks)


__all__ = ["HIGHLIGHT_CLASS", "HtmlContentRenderer"]
