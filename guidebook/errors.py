"""Exception hierarchy shared by the guidebook toolchain.

Two families live here. Lookup and insertion failures on the topic index
(:class:`NotFoundError`, :class:`DuplicateAnchorError`) are raised to the
caller. Structural findings produced by the validator derive from
:class:`GuideIssue`; the validator returns them as values so a single lint
run can report every defect in a document, while callers that want to fail
fast can still ``raise`` any of them.

Examples
--------
>>> issue = BrokenLinkError("no entry for '#missing'", line=12, anchor="missing")
>>> issue.line, issue.anchor
(12, 'missing')
>>> isinstance(NotFoundError("x"), LookupError)
True
"""

from __future__ import annotations


class GuideError(Exception):
    """Base class for every error raised by guidebook."""


class GuideIssue(GuideError):
    """A structural defect found in a guide document.

    Attributes
    ----------
    message : str
        Human readable description of the defect.
    line : int
        1-based line in the source document, or ``0`` when unknown.
    anchor : str | None
        Anchor the defect relates to, when there is one.
    """

    def __init__(self, message: str, *, line: int = 0, anchor: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.anchor = anchor

    @property
    def kind(self) -> str:
        """Return the issue class name used in lint output."""
        return type(self).__name__

    def __repr__(self) -> str:
        return f"{self.kind}({self.message!r}, line={self.line}, anchor={self.anchor!r})"


class DuplicateAnchorError(GuideIssue, ValueError):
    """Raised when two entries slugify to the same anchor."""


class BrokenLinkError(GuideIssue):
    """A contents or in-body anchor link that resolves to no entry."""


class MalformedExampleError(GuideIssue):
    """An example pair missing one half, or an unterminated code fence."""


class TocMismatchError(GuideIssue):
    """Contents rows and entries are not in one-to-one, same-order correspondence."""


class MissingBackLinkError(GuideIssue):
    """An entry has no link back to the table of contents."""


class NotFoundError(GuideError, LookupError):
    """Raised when an anchor does not resolve to any entry."""

    def __init__(self, anchor: str) -> None:
        super().__init__(f"No entry with anchor '{anchor}'.")
        self.anchor = anchor


class GuideConfigError(GuideError, ValueError):
    """Raised when the guide configuration is invalid or incomplete."""


class GuideBuildError(GuideError, RuntimeError):
    """Raised when a guide cannot be rendered to HTML."""


__all__ = [
    "BrokenLinkError",
    "DuplicateAnchorError",
    "GuideBuildError",
    "GuideConfigError",
    "GuideError",
    "GuideIssue",
    "MalformedExampleError",
    "MissingBackLinkError",
    "NotFoundError",
    "TocMismatchError",
]
