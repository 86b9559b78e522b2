"""Import page files with YAML front matter into a page repository.

Directory structure::

    pages/
    ├── index.liquid          # "index", default locale
    ├── index.fr.liquid       # "index", fr locale
    ├── 404.liquid
    ├── about.md              # "about", rendered from Markdown
    └── about/
        └── team.liquid       # "about/team", child of "about"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import frontmatter
import yaml

from pagetree.config import PageDefaults
from pagetree.entities.models import INDEX_FULLPATH, ROOT_FULLPATHS, EditableElement, Page, Site
from pagetree.errors import LoaderError

from .converters import ContentConverter
from .naming import humanize, path_basename, slugify
from .repository import PageRepository


logger = logging.getLogger(__name__)

PAGE_SUFFIXES = (".liquid", ".html", ".md", ".markdown")
LOCALIZED_FIELDS = ("title", "seo_title", "meta_keywords", "meta_description")
SHARED_FIELDS = (
    "handle",
    "listed",
    "published",
    "searchable",
    "position",
    "cache_strategy",
    "response_type",
    "redirect_url",
    "redirect_type",
    "content_type",
)
_INTEGER_FIELDS = {"position", "redirect_type"}
_BOOLEAN_FIELDS = {"listed", "published", "searchable"}
_BOOLEAN_STRINGS = {"true": True, "yes": True, "false": False, "no": False}


@dataclass(slots=True)
class PageFile:
    """One locale variant of a page read from disk."""

    path: Path
    key: str
    locale: str
    body: str
    metadata: dict = field(default_factory=dict)


class FilesystemLoader:
    """Read a directory of page files into a :class:`PageRepository`.

    Template bodies are injected with :meth:`Page.set_raw_template`, without
    any rendering setup.
    """

    def __init__(
        self,
        root: Path,
        *,
        site: Site,
        converter: Optional[ContentConverter] = None,
        defaults: Optional[PageDefaults] = None,
    ) -> None:
        self.root = root
        self.site = site
        self.converter = converter or ContentConverter()
        self.defaults = defaults or PageDefaults()

    def load(self, repository: Optional[PageRepository] = None) -> PageRepository:
        """Load every page file below ``root`` and return the populated repository."""

        if not self.root.is_dir():
            raise LoaderError("Pages directory does not exist", self.root)

        repository = repository if repository is not None else PageRepository(self.site)
        grouped = self._group(self.read_files())

        pages_by_key: dict[str, Page] = {}
        for key in sorted(grouped, key=_tree_order):
            variants = grouped[key]
            parent = self._resolve_parent(key, pages_by_key, variants)
            page = self._build_page(key, variants, parent)
            repository.add(page)
            pages_by_key[key] = page

        repository.build_hierarchy()
        logger.info("Loaded %d page(s) from %s", len(pages_by_key), self.root)
        return repository

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    def iter_page_paths(self) -> Iterable[Path]:
        for candidate in sorted(self.root.rglob("*")):
            if candidate.is_file() and candidate.suffix.lower() in PAGE_SUFFIXES:
                yield candidate

    def read_files(self) -> list[PageFile]:
        return [self.read_file(path) for path in self.iter_page_paths()]

    def read_file(self, path: Path) -> PageFile:
        relative = path.relative_to(self.root)
        stem = relative.name[: -len(path.suffix)]
        locale = self.site.default_locale
        name, _, suffix = stem.rpartition(".")
        if name and suffix in self.site.locales:
            stem, locale = name, suffix

        segments = [slugify(part) for part in relative.parts[:-1]] + [slugify(stem)]
        key = "/".join(segments)

        try:
            post = frontmatter.load(path)
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise LoaderError(f"Unable to parse front matter: {exc}", path) from exc

        logger.debug("Read %s as %s [%s]", relative, key, locale)
        return PageFile(path=path, key=key, locale=locale, body=post.content.strip(), metadata=dict(post.metadata))

    def _group(self, files: Iterable[PageFile]) -> dict[str, dict[str, PageFile]]:
        grouped: dict[str, dict[str, PageFile]] = {}
        for page_file in files:
            variants = grouped.setdefault(page_file.key, {})
            if page_file.locale in variants:
                raise LoaderError(
                    f"Duplicate {page_file.locale!r} variant of page {page_file.key!r} "
                    f"(already read from {variants[page_file.locale].path})",
                    page_file.path,
                )
            variants[page_file.locale] = page_file
        return grouped

    # ------------------------------------------------------------------
    # Page building
    # ------------------------------------------------------------------
    def _resolve_parent(
        self,
        key: str,
        pages_by_key: dict[str, Page],
        variants: dict[str, PageFile],
    ) -> Optional[Page]:
        if key in ROOT_FULLPATHS:
            return None
        parent_key = key.rpartition("/")[0] or INDEX_FULLPATH
        parent = pages_by_key.get(parent_key)
        if parent is None:
            path = next(iter(variants.values())).path
            raise LoaderError(f"Missing parent page {parent_key!r}", path)
        return parent

    def _build_page(self, key: str, variants: dict[str, PageFile], parent: Optional[Page]) -> Page:
        locales = [locale for locale in self.site.locales if locale in variants]
        page = Page(
            listed=self.defaults.listed,
            published=self.defaults.published,
            searchable=self.defaults.searchable,
            cache_strategy=self.defaults.cache_strategy,
            response_type=self.defaults.response_type,
            parent_id=parent.id if parent is not None else None,
        )

        for name in SHARED_FIELDS:
            for locale in locales:
                variant = variants[locale]
                if variant.metadata.get(name) is not None:
                    setattr(page, name, _coerce(name, variant.metadata[name], variant.path))
                    break
        if page.content_type:
            page.templatized = True

        fullpath: dict[str, str] = {}
        for locale in locales:
            variant = variants[locale]
            for name in LOCALIZED_FIELDS:
                value = variant.metadata.get(name)
                if value is not None:
                    getattr(page, name)[locale] = str(value)
            page.title.setdefault(locale, humanize(path_basename(key)))
            fullpath[locale] = self._localized_fullpath(key, locale, variant.metadata.get("slug"), parent)
            page.set_raw_template(self.converter.to_template(variant.body, variant.path.suffix), locale)
            self._merge_editable_elements(page, variant)

        page.set_fullpath(fullpath)
        return page

    def _localized_fullpath(
        self,
        key: str,
        locale: str,
        slug: Optional[object],
        parent: Optional[Page],
    ) -> str:
        if key in ROOT_FULLPATHS:
            return key
        segment = slugify(str(slug)) if slug else path_basename(key)
        if parent is None or parent.is_index:
            return segment
        base = parent.fullpath.get(locale) or parent.default_fullpath
        return f"{base}/{segment}"

    def _merge_editable_elements(self, page: Page, variant: PageFile) -> None:
        elements = variant.metadata.get("editable_elements")
        if elements is None:
            return
        if not isinstance(elements, dict):
            raise LoaderError("editable_elements must be a mapping of 'block/slug' to content", variant.path)

        for name, content in elements.items():
            block, _, slug = str(name).rpartition("/")
            element = page.find_editable_element(block, slug)
            if element is None:
                element = EditableElement(block=block, slug=slug)
                page.editable_elements.append(element)
            element.content[variant.locale] = "" if content is None else str(content)


def _tree_order(key: str) -> tuple[bool, int, str]:
    return (key != INDEX_FULLPATH, key.count("/"), key)


def _coerce(name: str, value: object, path: Path) -> object:
    if name in _INTEGER_FIELDS:
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise LoaderError(f"{name} must be an integer, got {value!r}", path) from exc
    if name in _BOOLEAN_FIELDS:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in _BOOLEAN_STRINGS:
            return _BOOLEAN_STRINGS[value.strip().lower()]
        raise LoaderError(f"{name} must be a boolean, got {value!r}", path)
    return str(value)
