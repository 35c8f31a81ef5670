"""Read guide Markdown from a local path or an HTTP(S) URL."""

from __future__ import annotations

import logging
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


def is_remote(source: str) -> bool:
    """Return ``True`` when ``source`` is an HTTP(S) URL."""
    return source.startswith(("http://", "https://"))


def fetch_markdown(source: str, *, timeout: float = 30) -> str:
    """Return the Markdown text behind ``source``.

    Local paths are read as UTF-8. URLs are fetched with retries on
    connection errors and 5xx responses.

    Raises
    ------
    FileNotFoundError
        If ``source`` is a path that does not exist.
    requests.HTTPError
        If the server answers with an error status once retries are spent.
    """
    if not is_remote(source):
        return Path(source).read_text(encoding="utf-8")
    logger.debug("fetching %s", source)
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    try:
        resp = session.get(source, timeout=timeout)
        resp.raise_for_status()
        return resp.text
    finally:
        session.close()


__all__ = ["fetch_markdown", "is_remote"]
