"""End-to-end tests for rendering a guide to HTML.

These tests drive :class:`guidebook.generator.GuidePageGenerator` with the
bundled ``docs/style-guide.md`` served through a stubbed ``requests.Session``
and check that the written page:

* gives every entry a section whose ``id`` equals its topic index anchor;
* lists the entries in the navigation block in document order;
* tags highlighted example blocks with ``data-language`` and
  ``data-example`` so bad and good halves can be styled apart;
* writes the ``.guidebook-<key>-meta.json`` file listing the anchors.

Failure modes (no entries, duplicate anchors, strict mode) are covered with
small inline documents.

Usage
-----
Run ``pytest tests/test_doc_generation.py -v``. No network access is needed.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

import msgspec
import msgspec.json as msgspec_json
import pytest
from bs4 import BeautifulSoup

from guidebook._constants import GUIDE_META_TEMPLATE
from guidebook.config import GuideConfig, ThemeConfig
from guidebook.errors import GuideBuildError
from guidebook.generator import GuidePageGenerator, HtmlContentRenderer
from guidebook.markdown_parser import LabelMatcher
from guidebook.sources import fetch_markdown

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

REPO_ROOT = Path(__file__).resolve().parents[1]
SOURCE_URL = "https://example.invalid/style-guide.md"


class GuideMeta(msgspec.Struct):
    """Shape of the metadata file written next to the page."""

    file: str
    generated_at: str
    anchors: list[str]
    issues: int


@pytest.fixture(scope="module")
def sample_markdown() -> str:
    """Return the bundled sample guide."""
    return (REPO_ROOT / "docs" / "style-guide.md").read_text(encoding="utf-8")


@pytest.fixture
def markdown_response(
    sample_markdown: str, monkeypatch: pytest.MonkeyPatch
) -> dict[str, typ.Any]:
    """Serve ``sample_markdown`` from a stubbed ``requests.Session``."""
    state: dict[str, typ.Any] = {"calls": []}

    class _Response:
        def __init__(self, body: str) -> None:
            self.text = body

        def raise_for_status(self) -> None:
            return None

    class _Session:
        def mount(self, *_args: typ.Any, **_kwargs: typ.Any) -> None:
            return None

        def get(self, url: str, timeout: float = 30) -> _Response:  # noqa: ARG002
            state["calls"].append(url)
            return _Response(sample_markdown)

        def close(self) -> None:
            return None

    monkeypatch.setattr("guidebook.sources.requests.Session", lambda: _Session())
    return state


@pytest.fixture
def guide_config(tmp_path: Path) -> GuideConfig:
    """Return settings for a remote guide rendered under ``tmp_path``."""
    return GuideConfig(
        key="sample",
        label="Sample guide",
        source=SOURCE_URL,
        output_dir=tmp_path / "public",
        require_back_links=True,
        theme=ThemeConfig(hero_tagline="Sample tagline"),
    )


@pytest.fixture
def generated_page(
    guide_config: GuideConfig,
    markdown_response: dict[str, typ.Any],
) -> Path:
    """Render the sample guide and return the written HTML path."""
    written = GuidePageGenerator(guide_config).run()
    assert markdown_response["calls"] == [SOURCE_URL], "expected one fetch of the guide"
    assert len(written) == 1
    return written[0]


@pytest.fixture
def generated_soup(generated_page: Path) -> BeautifulSoup:
    """Return the rendered page parsed with BeautifulSoup."""
    return BeautifulSoup(generated_page.read_text(encoding="utf-8"), "html.parser")


def _stub_fetch(monkeypatch: pytest.MonkeyPatch, markdown: str) -> None:
    def _fake_fetch(self: GuidePageGenerator) -> str:  # noqa: ARG001
        return markdown

    monkeypatch.setattr(GuidePageGenerator, "_fetch_markdown", _fake_fetch)


def test_page_is_written_to_configured_path(
    generated_page: Path, guide_config: GuideConfig
) -> None:
    """The page lands at ``output_dir / filename``."""
    assert generated_page == guide_config.output_path
    assert generated_page.exists()


def test_entry_sections_use_index_anchors(generated_soup: BeautifulSoup) -> None:
    """Each entry renders as a section whose id is the entry anchor."""
    sections = generated_soup.select("section.guide-entry")
    assert [section["id"] for section in sections] == [
        "single-responsibility-principle",
        "fat-models-skinny-controllers",
        "validation",
        "follow-naming-conventions",
        "use-shorter-and-more-readable-syntax",
    ]
    assert [section["data-order"] for section in sections] == ["1", "2", "3", "4", "5"]
    assert sections[0]["data-examples"] == "1"
    assert sections[0]["data-incomplete-examples"] == "0"
    heading_link = sections[1].select_one("h2 a")
    assert heading_link is not None
    assert heading_link["href"] == "#fat-models-skinny-controllers"


def test_navigation_links_every_entry(generated_soup: BeautifulSoup) -> None:
    """The contents block links every entry and carries the contents anchor."""
    nav = generated_soup.select_one('[data-test="guide-toc"]')
    assert nav is not None, "expected a contents navigation block"
    assert nav["id"] == "contents"
    hrefs = [link["href"] for link in nav.select("a")]
    section_ids = [
        f"#{section['id']}" for section in generated_soup.select("section.guide-entry")
    ]
    assert hrefs == section_ids


def test_title_and_theme(generated_soup: BeautifulSoup) -> None:
    """The hero shows the guide title with its anchor and the theme text."""
    heading = generated_soup.select_one("h1")
    assert heading is not None
    assert heading.get_text(strip=True) == "Web application best practices"
    assert heading["id"] == "web-application-best-practices"
    tagline = generated_soup.select_one(".guide-hero__tagline")
    assert tagline is not None
    assert tagline.get_text(strip=True) == "Sample tagline"
    assert generated_soup.select_one('[data-test="guide-issues"]') is None


def test_legend_uses_theme_labels(
    guide_config: GuideConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    """The bad and good captions come from the theme."""
    _stub_fetch(monkeypatch, "# G\n\n## Contents\n\n- [One](#one)\n\n## One\nBody\n")
    themed = dc.replace(
        guide_config, theme=ThemeConfig(bad_label="Avoid", good_label="Prefer")
    )
    (page,) = GuidePageGenerator(themed).run()
    soup = BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")
    legend = soup.select('[data-test="guide-legend"] [data-example]')
    assert [(item["data-example"], item.get_text(strip=True)) for item in legend] == [
        ("bad", "Avoid"),
        ("good", "Prefer"),
    ]


def test_example_blocks_are_tagged(generated_soup: BeautifulSoup) -> None:
    """Highlighted blocks carry their language and example role."""
    first = generated_soup.select_one("#single-responsibility-principle")
    assert first is not None
    blocks = first.select("div.codehilite")
    assert [block.get("data-language") for block in blocks] == ["php", "php"]
    assert [block.get("data-example") for block in blocks] == ["bad", "good"]
    assert "getFullNameShort" in blocks[1].get_text()


def test_comparison_tables_render(generated_soup: BeautifulSoup) -> None:
    """Pipe tables in entry bodies become HTML tables."""
    naming = generated_soup.select_one("#follow-naming-conventions")
    assert naming is not None
    headers = [cell.get_text(strip=True) for cell in naming.select("th")]
    assert headers == ["What", "How", "Good", "Bad"]


def test_metadata_lists_anchors(
    generated_page: Path, guide_config: GuideConfig
) -> None:
    """The metadata file records the page name and entry anchors."""
    meta_path = guide_config.output_dir / GUIDE_META_TEMPLATE.format(key="sample")
    meta = msgspec_json.decode(meta_path.read_bytes(), type=GuideMeta)
    assert meta.file == generated_page.name
    assert meta.anchors[0] == "single-responsibility-principle"
    assert len(meta.anchors) == 5
    assert meta.issues == 0


def test_issues_are_listed_when_not_strict(
    guide_config: GuideConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A non-strict build still renders and lists structural issues."""
    _stub_fetch(
        monkeypatch,
        "# G\n\n## Contents\n\n- [One](#one)\n\n## One\n\nBad:\n\n```php\nx\n```\n",
    )
    guide_config.require_back_links = False
    (page,) = GuidePageGenerator(guide_config).run()
    soup = BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")
    items = soup.select('[data-test="guide-issues"] li')
    assert [item["data-kind"] for item in items] == ["MalformedExampleError"]
    section = soup.select_one("#one")
    assert section is not None
    assert section["data-incomplete-examples"] == "1"


def test_strict_build_fails_on_issues(
    guide_config: GuideConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Strict mode refuses to render a guide with findings."""
    _stub_fetch(monkeypatch, "# G\n\n## Contents\n\n- [Gone](#gone)\n\n## One\nBody\n")
    with pytest.raises(GuideBuildError, match="BrokenLinkError"):
        GuidePageGenerator(guide_config, strict=True).run()
    assert not guide_config.output_path.exists()


def test_duplicate_anchors_fail_the_build(
    guide_config: GuideConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Entries sharing an anchor cannot be rendered even when not strict."""
    _stub_fetch(monkeypatch, "# G\n\n## Foo Bar\nA\n\n## foo-bar\nB\n")
    with pytest.raises(GuideBuildError, match="foo-bar"):
        GuidePageGenerator(guide_config).run()


def test_guide_without_entries_fails(
    guide_config: GuideConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A document with no entry headings has nothing to render."""
    _stub_fetch(monkeypatch, "# Just a title\n\nSome prose.\n")
    with pytest.raises(GuideBuildError, match="No entries"):
        GuidePageGenerator(guide_config).run()


def test_output_dir_override(
    guide_config: GuideConfig, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """An explicit output directory wins over the configured one."""
    _stub_fetch(monkeypatch, "# G\n\n## Contents\n\n- [One](#one)\n\n## One\nBody\n")
    override = tmp_path / "elsewhere"
    generator = GuidePageGenerator(guide_config, output_dir=override)
    (page,) = generator.run()
    assert page == override / "index.html"
    assert generator.guide.output_path == page
    assert guide_config.output_dir == tmp_path / "public"
    assert (override / ".guidebook-sample-meta.json").exists()


def test_renderer_without_labels_skips_roles() -> None:
    """Without a label matcher only the language is attached."""
    html = HtmlContentRenderer().markdown("Bad:\n\n```python\nx = 1\n```\n")
    soup = BeautifulSoup(html, "html.parser")
    block = soup.select_one("div.codehilite")
    assert block is not None
    assert block["data-language"] == "python"
    assert block.get("data-example") is None


def test_indented_code_does_not_shift_example_roles() -> None:
    """Indented code blocks are highlighted without taking a pair's role."""
    renderer = HtmlContentRenderer(labels=LabelMatcher(("Bad",), ("Good",)))
    html = renderer.markdown(
        "Install first:\n\n    composer install\n\n"
        "Bad:\n\n```php\n$a = new Foo;\n```\n\n"
        "Good:\n\n```php\n$a = app(Foo::class);\n```\n"
    )
    blocks = BeautifulSoup(html, "html.parser").select("div.codehilite")
    assert [block.get("data-example") for block in blocks] == [None, "bad", "good"]
    assert [block["data-language"] for block in blocks] == ["text", "php", "php"]
    assert "composer install" in blocks[0].get_text()
    assert "new Foo" in blocks[1].get_text()
    assert "app(Foo::class)" in blocks[2].get_text()


def test_list_continuations_are_not_counted_as_code() -> None:
    """Four-space list continuations are prose, not code blocks."""
    renderer = HtmlContentRenderer(labels=LabelMatcher(("Bad",), ("Good",)))
    html = renderer.markdown(
        "- Step one\n\n    More about step one.\n\n"
        "Good:\n\n```sh\nmake test\n```\n"
    )
    blocks = BeautifulSoup(html, "html.parser").select("div.codehilite")
    assert [block.get("data-example") for block in blocks] == ["good"]
    assert "make test" in blocks[0].get_text()


def test_renderer_heading_ids_follow_anchor_rule() -> None:
    """Headings inside bodies get ids built the same way as entry anchors."""
    renderer = HtmlContentRenderer(labels=LabelMatcher(("Bad",), ("Good",)))
    soup = BeautifulSoup(renderer.markdown("### Don't repeat yourself\n"), "html.parser")
    heading = soup.select_one("h3")
    assert heading is not None
    assert heading["id"] == "dont-repeat-yourself"


def test_fetch_markdown_reads_local_files(tmp_path: Path) -> None:
    """Local sources are read from disk as UTF-8."""
    path = tmp_path / "guide.md"
    path.write_text("# Guide – notes\n", encoding="utf-8")
    assert fetch_markdown(str(path)) == "# Guide – notes\n"


def test_fetch_markdown_uses_retrying_session(mocker: MockerFixture) -> None:
    """Remote sources are fetched through a session with retry adapters."""
    session = mocker.Mock()
    session.get.return_value.text = "# Remote\n"
    mocker.patch("guidebook.sources.requests.Session", return_value=session)
    assert fetch_markdown(SOURCE_URL, timeout=5) == "# Remote\n"
    session.get.assert_called_once_with(SOURCE_URL, timeout=5)
    session.get.return_value.raise_for_status.assert_called_once_with()
    mounted = [call.args[0] for call in session.mount.call_args_list]
    assert mounted == ["https://", "http://"]
    session.close.assert_called_once_with()
