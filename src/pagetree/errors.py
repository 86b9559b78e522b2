"""Exceptions raised by the page tree."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class PageTreeError(Exception):
    """Base exception for all page tree errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class EmptyFullpathError(PageTreeError, ValueError):
    """Raised when a page has no fullpath to derive structural information from."""

    def __init__(self, page_id: Optional[str] = None):
        self.page_id = page_id
        label = f"Page {page_id!r}" if page_id else "Page"
        super().__init__(f"{label} has no fullpath")


class PageNotFoundError(PageTreeError, LookupError):
    """Raised when a page cannot be resolved from the repository."""


class DuplicatePageError(PageTreeError):
    """Raised when a page id is registered twice."""


class LoaderError(PageTreeError):
    """Raised when a page file cannot be imported."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class ConfigError(PageTreeError):
    """Raised when no valid configuration can be resolved."""


class CyclicHierarchyError(PageTreeError):
    """Raised when a page would become its own ancestor."""
