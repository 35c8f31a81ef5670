"""Unit tests for the topic index and its anchor rule.

These tests cover anchor derivation, insertion-order preservation, anchor
uniqueness and lookup failures for :class:`guidebook.topic_index.TopicIndex`.

Usage
-----
Run ``pytest tests/test_topic_index.py -v``. No fixtures beyond pytest's
built-ins are required.
"""

from __future__ import annotations

import pytest

from guidebook.errors import DuplicateAnchorError, NotFoundError
from guidebook.models import CodeSample, ExamplePair, GuideEntry
from guidebook.topic_index import TopicIndex, slugify

TITLES = [
    "Single responsibility principle",
    "Fat models, skinny controllers",
    "Don't execute queries in Blade templates",
    "Use IoC container or facades instead of new Class",
]


@pytest.fixture
def populated_index() -> TopicIndex:
    """Return an index holding every title in ``TITLES``."""
    index = TopicIndex()
    for title in TITLES:
        index.add_entry(title, f"Body for {title}.")
    return index


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Foo Bar", "foo-bar"),
        ("foo-bar", "foo-bar"),
        ("Fat models, skinny controllers", "fat-models-skinny-controllers"),
        ("Don't use `env()` outside config", "dont-use-env-outside-config"),
        ("  Padded title  ", "padded-title"),
        ("snake_case names", "snake_case-names"),
    ],
)
def test_slugify(title: str, expected: str) -> None:
    """Anchors are lower-cased, punctuation-free and hyphen-joined."""
    assert slugify(title) == expected, f"slugify({title!r}) should be {expected!r}"


def test_lookup_round_trips_every_entry(populated_index: TopicIndex) -> None:
    """Every stored entry is returned by a lookup of its own anchor."""
    for entry in populated_index:
        assert populated_index.lookup(entry.anchor) is entry, (
            f"lookup({entry.anchor!r}) did not return the stored entry"
        )


def test_anchors_are_unique(populated_index: TopicIndex) -> None:
    """No two entries in the index share an anchor."""
    anchors = populated_index.anchors
    assert len(anchors) == len(set(anchors))


def test_render_index_preserves_insertion_order(populated_index: TopicIndex) -> None:
    """The rendered index lists one row per entry in insertion order."""
    rows = populated_index.render_index()
    assert len(rows) == len(populated_index) == len(TITLES)
    assert [title for title, _anchor in rows] == TITLES
    assert rows[1] == (
        "Fat models, skinny controllers",
        "fat-models-skinny-controllers",
    )


def test_duplicate_anchor_is_rejected() -> None:
    """A title slugifying to an existing anchor fails and leaves the index intact."""
    index = TopicIndex()
    index.add_entry("Foo Bar", "first")
    with pytest.raises(DuplicateAnchorError) as excinfo:
        index.add_entry("foo-bar", "second")
    assert excinfo.value.anchor == "foo-bar"
    assert isinstance(excinfo.value, ValueError)
    assert len(index) == 1
    assert index.lookup("foo-bar").body == "first"


def test_lookup_missing_anchor_raises() -> None:
    """Looking up an unknown anchor raises NotFoundError."""
    index = TopicIndex()
    index.add_entry("Foo Bar", "body")
    with pytest.raises(NotFoundError) as excinfo:
        index.lookup("nonexistent")
    assert excinfo.value.anchor == "nonexistent"
    assert isinstance(excinfo.value, LookupError)


def test_lookup_accepts_hash_prefix(populated_index: TopicIndex) -> None:
    """Anchors copied from links, ``#`` included, resolve too."""
    entry = populated_index.lookup("#single-responsibility-principle")
    assert entry.title == "Single responsibility principle"
    assert "#single-responsibility-principle" in populated_index
    assert "missing" not in populated_index


def test_lookup_has_no_side_effects(populated_index: TopicIndex) -> None:
    """Lookups, successful or not, leave the index unchanged."""
    before = populated_index.render_index()
    populated_index.lookup("fat-models-skinny-controllers")
    with pytest.raises(NotFoundError):
        populated_index.lookup("validation")
    assert populated_index.render_index() == before


def test_add_entry_keeps_examples() -> None:
    """Example pairs passed to add_entry are stored on the entry."""
    pair = ExamplePair(
        bad=CodeSample(language="php", code="$a = new Foo;"),
        good=CodeSample(language="php", code="$a = app(Foo::class);"),
    )
    entry = TopicIndex().add_entry("Use the container", "Body", examples=[pair])
    assert entry.examples == (pair,)
    assert entry.example is pair
    assert pair.is_complete


def test_empty_anchor_is_rejected() -> None:
    """A title made only of punctuation cannot be indexed."""
    with pytest.raises(ValueError, match="does not produce an anchor"):
        TopicIndex().add_entry("?!", "body")


def test_from_entries_stops_at_first_collision() -> None:
    """Building from parsed entries reports the colliding entry's line."""
    entries = [
        GuideEntry(title="Foo Bar", anchor="foo-bar", body="", line=3),
        GuideEntry(title="foo-bar", anchor="foo-bar", body="", line=9),
    ]
    with pytest.raises(DuplicateAnchorError) as excinfo:
        TopicIndex.from_entries(entries)
    assert excinfo.value.line == 9
