"""Utilities for rendering guide documents to static HTML."""

from .models import EntryModel, IssueModel
from .page_generator import GuidePageGenerator
from .renderer import HtmlContentRenderer

__all__ = [
    "EntryModel",
    "GuidePageGenerator",
    "HtmlContentRenderer",
    "IssueModel",
]
