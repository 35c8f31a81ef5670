"""High-level orchestration for rendering a guide to static HTML.

:class:`GuidePageGenerator` loads the guide Markdown (from disk or over
HTTP), parses it, builds the :class:`~guidebook.topic_index.TopicIndex`,
renders every entry with :class:`HtmlContentRenderer` and writes a single
themed HTML page plus a metadata file listing the entry anchors.

Example
-------
>>> from pathlib import Path
>>> from guidebook.config import load_guide_config
>>> from guidebook.generator import GuidePageGenerator
>>> config = load_guide_config(Path("config/guide.yaml"))  # doctest: +SKIP
>>> GuidePageGenerator(config.get_guide()).run()  # doctest: +SKIP
[PosixPath('public/index.html')]
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import json
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from guidebook._constants import GUIDE_META_TEMPLATE
from guidebook.errors import DuplicateAnchorError, GuideBuildError
from guidebook.generator.models import EntryModel, IssueModel
from guidebook.generator.renderer import HtmlContentRenderer
from guidebook.markdown_parser import LabelMatcher
from guidebook.sources import fetch_markdown
from guidebook.topic_index import TopicIndex, slugify
from guidebook.validator import GuideValidator, validate_guide

if typ.TYPE_CHECKING:
    from guidebook.config import GuideConfig
    from guidebook.errors import GuideIssue
    from guidebook.models import GuideEntry

logger = logging.getLogger(__name__)


class GuidePageGenerator:
    """Load a guide and emit it as one themed HTML page."""

    def __init__(
        self,
        guide: GuideConfig,
        *,
        templates_dir: Path | None = None,
        output_dir: Path | None = None,
        strict: bool | None = None,
    ) -> None:
        """Initialize the generator with configuration and template context.

        Parameters
        ----------
        guide : GuideConfig
            Guide configuration describing the source, parser options and theme.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package templates.
        output_dir : Path, optional
            Override for the HTML output directory.
        strict : bool, optional
            Override for ``guide.strict``; when true, any structural issue
            aborts the build.
        """
        self.guide = dc.replace(guide, output_dir=output_dir) if output_dir else guide
        self.output_dir = self.guide.output_dir
        self.strict = guide.strict if strict is None else strict
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.validator = GuideValidator(guide)
        self.renderer = HtmlContentRenderer(
            guide.pygments_style,
            labels=LabelMatcher(guide.bad_labels, guide.good_labels),
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["guide_anchor"] = slugify
        self.template = self.env.get_template("guide.jinja")

    def run(self) -> list[Path]:
        """Render the guide into HTML on disk.

        Returns
        -------
        list[Path]
            Paths of the written HTML documents.

        Raises
        ------
        GuideBuildError
            When the guide has no entries, when two entries share an anchor,
            or when strict mode is on and the validator reports issues.
        """
        markdown_source = self._fetch_markdown()
        parsed = self.validator.parse(markdown_source)
        if not parsed.entries:
            msg = f"No entries were found in '{self.guide.source}'."
            raise GuideBuildError(msg)

        issues = validate_guide(
            parsed, require_back_links=self.guide.require_back_links
        )
        if issues and self.strict:
            details = "; ".join(
                f"line {issue.line}: {issue.kind}: {issue.message}" for issue in issues
            )
            msg = f"Guide '{self.guide.key}' has {len(issues)} issue(s): {details}"
            raise GuideBuildError(msg)

        try:
            index = TopicIndex.from_entries(parsed.entries)
        except DuplicateAnchorError as exc:
            msg = f"Guide '{self.guide.key}' cannot be rendered: {exc}"
            raise GuideBuildError(msg) from exc

        self.output_dir.mkdir(parents=True, exist_ok=True)
        generated_at = dt.datetime.now(dt.UTC)
        context = {
            "guide": self.guide,
            "theme": self.guide.theme,
            "title": parsed.title or self.guide.label,
            "preamble_html": self.renderer.markdown(parsed.preamble),
            "contents_anchor": parsed.contents_anchor,
            "contents_heading": self.guide.contents_heading,
            "toc": index.render_index(),
            "entries": [
                self._build_entry_model(entry, order)
                for order, entry in enumerate(index, start=1)
            ],
            "issues": [self._build_issue_model(issue) for issue in issues],
            "pygments_css": self.renderer.stylesheet,
            "generated_at": generated_at,
            "source": self.guide.source,
        }
        html = self.template.render(**context)
        output_path = self.guide.output_path
        output_path.write_text(html, encoding="utf-8")
        logger.debug("rendered %d entries to %s", len(index), output_path)
        self._write_metadata(index, generated_at, len(issues))
        return [output_path]

    def _fetch_markdown(self) -> str:
        """Return the guide Markdown from disk or from the configured URL."""
        return fetch_markdown(self.guide.source)

    def _build_entry_model(self, entry: GuideEntry, order: int) -> EntryModel:
        complete = sum(1 for pair in entry.examples if pair.is_complete)
        return EntryModel(
            title=entry.title,
            anchor=entry.anchor,
            order=order,
            body_html=self.renderer.markdown(entry.body),
            example_count=complete,
            incomplete_examples=len(entry.examples) - complete,
        )

    @staticmethod
    def _build_issue_model(issue: GuideIssue) -> IssueModel:
        return IssueModel(kind=issue.kind, line=issue.line, message=issue.message)

    def _metadata_path(self) -> Path:
        """Return the path to the metadata JSON file for this guide."""
        filename = GUIDE_META_TEMPLATE.format(key=self.guide.key)
        return self.output_dir / filename

    def _write_metadata(
        self, index: TopicIndex, generated_at: dt.datetime, issue_count: int
    ) -> None:
        """Persist the entry anchors and build summary next to the HTML."""
        metadata = {
            "file": self.guide.filename,
            "generated_at": generated_at.isoformat(),
            "anchors": index.anchors,
            "issues": issue_count,
        }
        path = self._metadata_path()
        try:
            path.write_text(json.dumps(metadata), encoding="utf-8")
        except OSError:  # pragma: no cover - IO issues
            logger.warning("could not write metadata to %s", path)


__all__ = ["GuidePageGenerator"]
