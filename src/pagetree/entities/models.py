"""Dataclasses representing the pages of a site."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from pagetree.errors import EmptyFullpathError
from pagetree.local.naming import path_basename


INDEX_FULLPATH = "index"
NOT_FOUND_FULLPATH = "404"
ROOT_FULLPATHS = (INDEX_FULLPATH, NOT_FOUND_FULLPATH)
NO_CACHE = "none"
DEFAULT_RESPONSE_TYPE = "text/html"


@dataclass(slots=True)
class Site:
    """Site owning a tree of pages. The first locale is the default one."""

    name: str
    handle: Optional[str] = None
    locales: list[str] = field(default_factory=lambda: ["en"])
    id: Optional[str] = None

    @property
    def default_locale(self) -> str:
        return self.locales[0]


@dataclass(slots=True)
class EditableElement:
    """Piece of page content editable independently of the template."""

    block: Optional[str]
    slug: Optional[str]
    content: dict[str, str] = field(default_factory=dict)
    hint: Optional[str] = None


@dataclass(slots=True)
class Page:
    """One addressable page of a site.

    Parent and children are stored as identifiers and resolved through a
    :class:`~pagetree.local.repository.PageRepository`. Locale-keyed
    attributes are plain dicts whose insertion order defines the default
    locale of the page.
    """

    id: Optional[str] = None
    site_id: Optional[str] = None
    parent_id: Optional[str] = None
    children: list[str] = field(default_factory=list)
    title: dict[str, str] = field(default_factory=dict)
    slug: dict[str, str] = field(default_factory=dict)
    fullpath: dict[str, str] = field(default_factory=dict)
    redirect_url: Optional[str] = None
    redirect_type: Optional[int] = None
    template: dict[str, str] = field(default_factory=dict)
    handle: Optional[str] = None
    listed: bool = True
    searchable: bool = True
    templatized: bool = False
    content_type: Optional[str] = None
    published: bool = False
    cache_strategy: str = NO_CACHE
    response_type: str = DEFAULT_RESPONSE_TYPE
    position: int = 0
    seo_title: dict[str, str] = field(default_factory=dict)
    meta_keywords: dict[str, str] = field(default_factory=dict)
    meta_description: dict[str, str] = field(default_factory=dict)
    editable_elements: Optional[list[EditableElement]] = field(default_factory=list)
    site: Optional[Site] = field(default=None, repr=False, compare=False)
    templatized_from_parent: bool = field(default=False, compare=False)
    source: Optional[dict[str, str]] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.fullpath:
            self.set_fullpath(self.fullpath)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------
    @property
    def default_fullpath(self) -> str:
        """Fullpath of the first locale found, used for depth, index and 404 checks."""

        fullpath = next(iter(self.fullpath.values()), None) if self.fullpath else None
        if fullpath is None:
            raise EmptyFullpathError(self.id)
        return fullpath

    @property
    def is_index(self) -> bool:
        return self.default_fullpath == INDEX_FULLPATH

    @property
    def is_not_found(self) -> bool:
        return self.default_fullpath == NOT_FOUND_FULLPATH

    @property
    def is_index_or_404(self) -> bool:
        return self.default_fullpath in ROOT_FULLPATHS

    is_index_or_not_found = is_index_or_404

    @property
    def depth(self) -> int:
        """Depth of the page in the site tree. Index and 404 pages are 0-depth."""

        fullpath = self.default_fullpath
        if fullpath in ROOT_FULLPATHS:
            return 0
        stripped = fullpath.rstrip("/")
        if not stripped:
            return 0
        return len(stripped.split("/"))

    def set_fullpath(self, fullpath: Mapping[str, Optional[str]]) -> None:
        """Assign the fullpath, deriving the slug of every locale which has none."""

        for locale, value in fullpath.items():
            if value is None:
                continue
            if self.slug is None:
                self.slug = {}
            if self.slug.get(locale) is None:
                self.slug[locale] = path_basename(value)
        self.fullpath = dict(fullpath)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    @property
    def with_cache(self) -> bool:
        return self.cache_strategy != NO_CACHE

    @property
    def has_default_response_type(self) -> bool:
        return self.response_type == DEFAULT_RESPONSE_TYPE

    @property
    def is_redirect(self) -> bool:
        # redirect_url is ignored, pages never redirect.
        return False

    @property
    def unpublished(self) -> bool:
        return not self.published

    def set_raw_template(self, content: str, locale: str) -> None:
        """Set the template source of a locale without any pre-rendering."""

        if self.source is None:
            self.source = {}
        self.source[locale] = content

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------
    def find_editable_element(self, block: object, slug: object) -> Optional[EditableElement]:
        """Return the editable element identified by ``block`` and ``slug`` (the pair is unique)."""

        block, slug = _as_str(block), _as_str(slug)
        for element in self.editable_elements or []:
            if _as_str(element.block) == block and _as_str(element.slug) == slug:
                return element
        return None

    def localized(self, attribute: str, locale: Optional[str] = None) -> Optional[str]:
        """Return a locale-keyed attribute, falling back to the default locale."""

        values = getattr(self, attribute) or {}
        if locale is not None and values.get(locale) is not None:
            return values[locale]
        default_locale = next(iter(self.fullpath), None)
        if default_locale is not None and values.get(default_locale) is not None:
            return values[default_locale]
        return next(iter(values.values()), None)


def _as_str(value: object) -> str:
    if value is None:
        return ""
    return str(value)
