"""Tests for the in-memory page repository."""

import pytest

from pagetree.entities.models import Page
from pagetree.errors import CyclicHierarchyError, DuplicatePageError, PageNotFoundError
from pagetree.local.repository import PageRepository


@pytest.fixture
def repository(site):
    """Repository holding index, 404, about, about/team and contact."""
    repository = PageRepository(site)
    index = repository.add(Page(id="index", fullpath={"en": "index"}))
    repository.add(Page(id="404", fullpath={"en": "404"}))
    about = repository.add(Page(id="about", parent_id=index.id, position=2, fullpath={"en": "about", "fr": "a-propos"}))
    repository.add(Page(id="team", parent_id=about.id, handle="team", fullpath={"en": "about/team"}))
    repository.add(Page(id="contact", parent_id=index.id, position=1, fullpath={"en": "contact"}))
    return repository


class TestAdd:
    """Tests for page registration."""

    def test_assigns_id(self):
        repository = PageRepository()

        page = repository.add(Page(fullpath={"en": "about"}))

        assert page.id
        assert page in repository
        assert page.id in repository

    def test_stamps_site(self, site):
        repository = PageRepository(site)

        page = repository.add(Page(fullpath={"en": "index"}))

        assert page.site is site
        assert page.site_id == "site-1"

    def test_rejects_duplicate_id(self, repository):
        with pytest.raises(DuplicatePageError):
            repository.add(Page(id="about", fullpath={"en": "other"}))

    def test_links_children_by_position(self, repository):
        index = repository.get("index")

        assert index.children == ["contact", "about"]

    def test_initial_pages(self):
        repository = PageRepository(pages=[Page(id="a", fullpath={"en": "index"})])

        assert len(repository) == 1


class TestQueries:
    """Tests for page lookups."""

    def test_get_missing_page(self, repository):
        with pytest.raises(PageNotFoundError):
            repository.get("missing")

    def test_find_missing_page(self, repository):
        assert repository.find("missing") is None
        assert repository.find(None) is None

    def test_by_fullpath_default_locale(self, repository):
        assert repository.by_fullpath("about").id == "about"
        assert repository.by_fullpath("a-propos") is None

    def test_by_fullpath_locale(self, repository):
        assert repository.by_fullpath("a-propos", "fr").id == "about"

    def test_by_fullpath_skips_pages_without_fullpath(self, repository):
        repository.add(Page(id="draft"))

        assert repository.by_fullpath("about").id == "about"

    def test_by_handle(self, repository):
        assert repository.by_handle("team").id == "team"
        assert repository.by_handle("unknown") is None

    def test_root_and_not_found(self, repository):
        assert repository.root().id == "index"
        assert repository.not_found().id == "404"

    def test_root_missing(self):
        with pytest.raises(PageNotFoundError):
            PageRepository().root()

    def test_roots(self, repository):
        assert [page.id for page in repository.roots()] == ["index", "404"]


class TestTree:
    """Tests for tree navigation."""

    def test_parent_of(self, repository):
        team = repository.get("team")

        assert repository.parent_of(team).id == "about"
        assert repository.parent_of(repository.root()) is None

    def test_children_of(self, repository):
        children = repository.children_of(repository.root())

        assert [child.id for child in children] == ["contact", "about"]

    def test_ancestors_of(self, repository):
        ancestors = repository.ancestors_of(repository.get("team"))

        assert [page.id for page in ancestors] == ["index", "about"]

    def test_iter_subtree(self, repository):
        ids = [page.id for page in repository.iter_subtree(repository.root())]

        assert ids == ["index", "contact", "about", "team"]

    def test_attach_moves_page(self, repository):
        team = repository.get("team")
        contact = repository.get("contact")

        repository.attach(team, contact)

        assert team.parent_id == "contact"
        assert repository.get("about").children == []
        assert contact.children == ["team"]

    def test_attach_under_descendant_is_rejected(self, repository):
        about = repository.get("about")
        team = repository.get("team")

        with pytest.raises(CyclicHierarchyError):
            repository.attach(about, team)

        assert about.parent_id == "index"
        assert team.children == []
        assert repository.remove(about) == 2

    def test_attach_under_itself_is_rejected(self, repository):
        about = repository.get("about")

        with pytest.raises(CyclicHierarchyError):
            repository.attach(about, about)

    def test_attach_to_none_detaches(self, repository):
        team = repository.get("team")

        repository.attach(team, None)

        assert team.parent_id is None
        assert team in repository.roots()

    def test_remove_subtree(self, repository):
        removed = repository.remove(repository.get("about"))

        assert removed == 2
        assert "about" not in repository
        assert "team" not in repository
        assert repository.root().children == ["contact"]

    def test_child_added_before_parent(self):
        repository = PageRepository()
        repository.add(Page(id="child", parent_id="parent", fullpath={"en": "parent/child"}))
        repository.add(Page(id="parent", fullpath={"en": "parent"}))

        repository.build_hierarchy()

        assert repository.get("parent").children == ["child"]


class TestBuildHierarchy:
    """Tests for hierarchy processing."""

    def test_templatized_propagation(self):
        repository = PageRepository()
        repository.add(Page(id="index", fullpath={"en": "index"}))
        repository.add(
            Page(id="articles", parent_id="index", templatized=True, content_type="articles", fullpath={"en": "articles"})
        )
        repository.add(Page(id="comments", parent_id="articles", fullpath={"en": "articles/comments"}))
        repository.add(Page(id="replies", parent_id="comments", fullpath={"en": "articles/comments/replies"}))

        repository.build_hierarchy()

        comments = repository.get("comments")
        replies = repository.get("replies")
        assert comments.templatized_from_parent is True
        assert comments.templatized is True
        assert comments.content_type == "articles"
        assert replies.templatized_from_parent is True
        assert replies.content_type == "articles"
        assert repository.get("articles").templatized_from_parent is False

    def test_keeps_own_content_type(self):
        repository = PageRepository()
        repository.add(Page(id="articles", templatized=True, content_type="articles", fullpath={"en": "articles"}))
        repository.add(Page(id="authors", parent_id="articles", content_type="authors", fullpath={"en": "articles/authors"}))

        repository.build_hierarchy()

        assert repository.get("authors").content_type == "authors"

    def test_plain_tree_is_not_templatized(self, repository):
        repository.build_hierarchy()

        assert not any(page.templatized_from_parent for page in repository)
        assert repository.root().children == ["contact", "about"]

    def test_moved_page_loses_inherited_templatization(self):
        repository = PageRepository()
        repository.add(Page(id="posts", templatized=True, content_type="posts", fullpath={"en": "posts"}))
        repository.add(Page(id="plain", fullpath={"en": "plain"}))
        repository.add(Page(id="comments", parent_id="posts", fullpath={"en": "posts/comments"}))
        repository.build_hierarchy()
        comments = repository.get("comments")
        assert (comments.templatized, comments.content_type) == (True, "posts")

        repository.attach(comments, repository.get("plain"))
        repository.build_hierarchy()

        assert comments.templatized_from_parent is False
        assert (comments.templatized, comments.content_type) == (False, None)

    def test_rebuild_keeps_own_templatization(self):
        repository = PageRepository()
        repository.add(Page(id="posts", templatized=True, content_type="posts", fullpath={"en": "posts"}))
        repository.add(Page(id="plain", fullpath={"en": "plain"}))
        repository.add(
            Page(id="authors", parent_id="posts", templatized=True, content_type="authors", fullpath={"en": "posts/authors"})
        )
        repository.build_hierarchy()

        repository.attach(repository.get("authors"), repository.get("plain"))
        repository.build_hierarchy()

        authors = repository.get("authors")
        assert (authors.templatized, authors.content_type) == (True, "authors")
        assert authors.templatized_from_parent is False
