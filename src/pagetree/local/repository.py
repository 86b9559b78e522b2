"""In-memory repository of the pages of a site."""

from __future__ import annotations

import logging
import uuid
from typing import Iterable, Iterator, Optional

from pagetree.entities.models import Page, Site
from pagetree.errors import CyclicHierarchyError, DuplicatePageError, PageNotFoundError


logger = logging.getLogger(__name__)


class PageRepository:
    """Store pages keyed by identifier and resolve the tree through identifiers."""

    def __init__(self, site: Optional[Site] = None, pages: Iterable[Page] = ()) -> None:
        self.site = site
        self._pages: dict[str, Page] = {}
        self._own_templatization: dict[str, tuple[bool, Optional[str]]] = {}
        for page in pages:
            self.add(page)

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(list(self._pages.values()))

    def __contains__(self, page: object) -> bool:
        page_id = page.id if isinstance(page, Page) else page
        return page_id in self._pages

    # ------------------------------------------------------------------
    # Write helpers
    # ------------------------------------------------------------------
    def add(self, page: Page) -> Page:
        """Register a page and link it into its parent's children."""

        if page.id is None:
            page.id = str(uuid.uuid4())
        if page.id in self._pages:
            raise DuplicatePageError(f"Page id {page.id!r} is already registered")
        if self.site is not None:
            page.site = self.site
            page.site_id = self.site.id
        self._pages[page.id] = page
        parent = self.find(page.parent_id)
        if parent is not None:
            self._link_child(parent, page)
        logger.debug("Registered page %s (%s)", page.id, page.fullpath)
        return page

    def attach(self, page: Page, parent: Optional[Page]) -> None:
        """Move ``page`` under ``parent``. ``None`` turns the page into a root."""

        if parent is not None and any(item.id == parent.id for item in self.iter_subtree(page)):
            raise CyclicHierarchyError(
                f"Cannot attach page {page.id!r} under its own descendant {parent.id!r}"
            )
        previous = self.find(page.parent_id)
        if previous is not None and page.id in previous.children:
            previous.children.remove(page.id)
        page.parent_id = parent.id if parent is not None else None
        if parent is not None:
            self._link_child(parent, page)

    def remove(self, page: Page) -> int:
        """Remove the page and all of its descendants. Return the number of removed pages."""

        doomed = list(self.iter_subtree(page))
        for item in doomed:
            self._own_templatization.pop(item.id, None)
        parent = self.find(page.parent_id)
        if parent is not None and page.id in parent.children:
            parent.children.remove(page.id)
        for item in doomed:
            self._pages.pop(item.id, None)
        logger.debug("Removed %d page(s) under %s", len(doomed), page.id)
        return len(doomed)

    def build_hierarchy(self) -> None:
        """Rebuild every children list from ``parent_id`` and propagate templatization."""

        for page_id, (templatized, content_type) in self._own_templatization.items():
            page = self._pages.get(page_id)
            if page is not None:
                page.templatized = templatized
                page.content_type = content_type
        self._own_templatization.clear()
        for page in self._pages.values():
            page.children = []
            page.templatized_from_parent = False
        for page in self._pages.values():
            parent = self.find(page.parent_id)
            if parent is not None:
                self._link_child(parent, page)
        for root in self.roots():
            self._propagate_templatized(root)

    def _link_child(self, parent: Page, child: Page) -> None:
        if child.id not in parent.children:
            parent.children.append(child.id)
        parent.children.sort(key=lambda child_id: self._position_of(child_id))

    def _position_of(self, page_id: str) -> int:
        page = self._pages.get(page_id)
        return page.position if page is not None else 0

    def _propagate_templatized(self, page: Page) -> None:
        for child in self.children_of(page):
            if page.templatized or page.templatized_from_parent:
                self._own_templatization.setdefault(child.id, (child.templatized, child.content_type))
                child.templatized_from_parent = True
                child.templatized = True
                if child.content_type is None:
                    child.content_type = page.content_type
            self._propagate_templatized(child)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def find(self, page_id: Optional[str]) -> Optional[Page]:
        if page_id is None:
            return None
        return self._pages.get(page_id)

    def get(self, page_id: str) -> Page:
        page = self.find(page_id)
        if page is None:
            raise PageNotFoundError(f"No page with id {page_id!r}")
        return page

    def by_fullpath(self, fullpath: str, locale: Optional[str] = None) -> Optional[Page]:
        """Find a page by fullpath, in ``locale`` or in its default locale."""

        for page in self._pages.values():
            if locale:
                candidate = page.fullpath.get(locale)
            else:
                candidate = next(iter(page.fullpath.values()), None)
            if candidate == fullpath:
                return page
        return None

    def by_handle(self, handle: str) -> Optional[Page]:
        for page in self._pages.values():
            if page.handle == handle:
                return page
        return None

    def root(self) -> Page:
        """Return the index page."""

        page = self.by_fullpath("index")
        if page is None:
            raise PageNotFoundError("The site has no index page")
        return page

    def not_found(self) -> Page:
        """Return the 404 page."""

        page = self.by_fullpath("404")
        if page is None:
            raise PageNotFoundError("The site has no 404 page")
        return page

    def roots(self) -> list[Page]:
        return [page for page in self._pages.values() if self.find(page.parent_id) is None]

    def parent_of(self, page: Page) -> Optional[Page]:
        return self.find(page.parent_id)

    def children_of(self, page: Page) -> list[Page]:
        return [self._pages[child_id] for child_id in page.children if child_id in self._pages]

    def ancestors_of(self, page: Page) -> list[Page]:
        """Return the ancestors of ``page``, root first."""

        ancestors: list[Page] = []
        seen = {page.id}
        parent = self.parent_of(page)
        while parent is not None and parent.id not in seen:
            ancestors.append(parent)
            seen.add(parent.id)
            parent = self.parent_of(parent)
        ancestors.reverse()
        return ancestors

    def iter_subtree(self, page: Page) -> Iterator[Page]:
        """Yield the page and all descendants in depth-first order."""

        yield page
        for child in self.children_of(page):
            yield from self.iter_subtree(child)
