"""Utilities for mapping file names and paths to page slugs."""

from __future__ import annotations

import re


_NON_WORD_RE = re.compile(r"[^a-z0-9_]+")
_RESERVED_SEGMENTS = {"index", "404"}


def slugify(value: str, *, fallback: str = "page") -> str:
    """Return a URL-safe path segment derived from ``value``.

    Lowercases the input, replaces runs of characters other than letters,
    digits and underscores with a single hyphen and trims hyphens from both
    ends.
    """

    value = value.lower().strip()
    if value in _RESERVED_SEGMENTS:
        return value
    value = _NON_WORD_RE.sub("-", value)
    value = value.strip("-")
    if not value:
        return fallback
    return value[:120]


def path_basename(value: str) -> str:
    """Return the last segment of a slash-separated path.

    Trailing slashes are ignored (``"news/today/"`` gives ``"today"``); a path
    made only of slashes gives ``"/"``.
    """

    stripped = value.rstrip("/")
    if not stripped:
        return "/" if value else ""
    return stripped.rsplit("/", 1)[-1]


def humanize(segment: str) -> str:
    """Turn a slug such as ``about-us`` into a default title (``About us``)."""

    words = segment.replace("-", " ").replace("_", " ").strip()
    return words[:1].upper() + words[1:]
