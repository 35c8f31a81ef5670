"""Cyclopts CLI entrypoint for checking, indexing and rendering style guides.

The ``guide`` console script defined here lints a guide's structure, prints
or rewrites its table of contents, looks up single entries by anchor and
renders the guide to HTML. Each command reads either the guide named in
``config/guide.yaml`` or the file passed with ``--path``.

Examples
--------
Lint the default guide:

>>> from guidebook.cli import main
>>> main()  # doctest: +SKIP

Rewrite the contents block of a README in place:

>>> from guidebook.cli import app
>>> app(["toc", "--path", "README.md", "--write"])  # doctest: +SKIP
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG_PATH
from .config import GuideConfig, load_guide_config
from .errors import GuideError
from .generator import GuidePageGenerator
from .sources import fetch_markdown
from .toc import sync_toc
from .topic_index import TopicIndex
from .validator import GuideValidator, validate_guide

DEFAULT_CONFIG = Path(DEFAULT_CONFIG_PATH)

app = App(name="guide", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to guide config", env_var="INPUT_CONFIG")
]
GuideOption = typ.Annotated[
    str | None, Parameter(help="Guide identifier", env_var="INPUT_GUIDE")
]
PathOption = typ.Annotated[
    Path | None,
    Parameter(
        help="Read this Markdown file instead of the configured source",
        env_var="INPUT_PATH",
    ),
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _resolve_guide(config: Path, guide: str | None, path: Path | None) -> GuideConfig:
    """Return the guide settings for a command.

    ``--path`` wins over the configuration file: when the file named by
    ``config`` exists its settings for ``guide`` are reused with the source
    swapped, otherwise defaults apply.
    """
    if path is None:
        return load_guide_config(config).get_guide(guide)
    if not config.exists():
        return GuideConfig(key=path.stem, label=path.stem, source=str(path))
    resolved = load_guide_config(config).get_guide(guide)
    resolved.source = str(path)
    return resolved


def _source_label(guide: GuideConfig) -> str:
    return guide.source if guide.is_remote else _format_path(Path(guide.source))


@app.command(help="Check a guide for broken links, duplicate anchors and bad examples.")
def lint(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    guide: GuideOption = None,
    path: PathOption = None,
    require_back_links: typ.Annotated[
        bool, Parameter(help="Require a link back to the contents on every entry")
    ] = False,
) -> int:
    """Report structural issues in a guide.

    Parameters
    ----------
    config : Path, optional
        Path to the ``guide.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    guide : str or None, optional
        Guide key; defaults to the configured default or the only guide.
    path : Path or None, optional
        Markdown file to lint instead of the configured source.
    require_back_links : bool, optional
        Also report entries without a link back to the contents anchor.

    Returns
    -------
    int
        ``0`` when the guide is clean, ``1`` when issues were printed.
    """
    settings = _resolve_guide(config, guide, path)
    if require_back_links:
        settings.require_back_links = True
    validator = GuideValidator(settings)
    text = fetch_markdown(settings.source)
    parsed = validator.parse(text)
    issues = validate_guide(parsed, require_back_links=settings.require_back_links)
    label = _source_label(settings)
    for issue in issues:
        print(f"{label}:{issue.line}: {issue.kind}: {issue.message}")
    if issues:
        print(f"{len(issues)} issue(s) found")
        return 1
    print(f"ok: {len(parsed.entries)} entries")
    return 0


@app.command(help="Print or rewrite the table of contents generated from entries.")
def toc(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    guide: GuideOption = None,
    path: PathOption = None,
    write: typ.Annotated[
        bool, Parameter(help="Rewrite the guide file in place")
    ] = False,
) -> int:
    """Print the regenerated contents block, or write it back with ``--write``.

    Returns
    -------
    int
        ``0`` on success, ``1`` when the guide has duplicate anchors or the
        source cannot be written.
    """
    settings = _resolve_guide(config, guide, path)
    text = fetch_markdown(settings.source)
    try:
        updated = sync_toc(
            text,
            contents_heading=settings.contents_heading,
            entry_level=settings.entry_level,
            bad_labels=settings.bad_labels,
            good_labels=settings.good_labels,
        )
    except (GuideError, ValueError) as exc:
        print(f"error: {exc}")
        return 1
    if not write:
        print(updated, end="")
        return 0
    if settings.is_remote:
        print(f"error: cannot rewrite remote source {settings.source}")
        return 1
    target = Path(settings.source)
    if updated == text:
        print(f"unchanged {_format_path(target)}")
        return 0
    target.write_text(updated, encoding="utf-8")
    print(f"wrote {_format_path(target)}")
    return 0


@app.command(help="Print the entry behind an anchor.")
def show(
    anchor: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    guide: GuideOption = None,
    path: PathOption = None,
) -> int:
    """Look up ``anchor`` and print the entry's title and body.

    Returns
    -------
    int
        ``0`` when the entry exists, ``1`` otherwise.
    """
    settings = _resolve_guide(config, guide, path)
    parsed = GuideValidator(settings).parse(fetch_markdown(settings.source))
    try:
        entry = TopicIndex.from_entries(parsed.entries).lookup(anchor)
    except (GuideError, ValueError) as exc:
        print(f"error: {exc}")
        return 1
    print(f"## {entry.title}")
    print()
    print(entry.body)
    return 0


@app.command(help="Render the guide to a static HTML page.")
def build(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    guide: GuideOption = None,
    path: PathOption = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    strict: typ.Annotated[
        bool | None, Parameter(help="Fail when the guide has structural issues")
    ] = None,
) -> int:
    """Render the selected guide and print the written paths.

    Returns
    -------
    int
        ``0`` on success, ``1`` when the build fails.
    """
    settings = _resolve_guide(config, guide, path)
    generator = GuidePageGenerator(settings, output_dir=output_dir, strict=strict)
    try:
        written = generator.run()
    except GuideError as exc:
        print(f"error: {exc}")
        return 1
    for written_path in written:
        print(f"wrote {_format_path(written_path)}")
    return 0


def main() -> None:
    """Invoke the Cyclopts application that powers the ``guide`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    exit_code = app()
    if isinstance(exit_code, int) and exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
