"""Pytest fixtures for pagetree tests."""

import textwrap

import pytest

from pagetree.entities.models import EditableElement, Page, Site


def write_page(directory, relative, text):
    """Write a page file below ``directory`` and return its path."""
    path = directory / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


@pytest.fixture
def site():
    """A bilingual site, English being the default locale."""
    return Site(name="Acme", handle="acme", locales=["en", "fr"], id="site-1")


@pytest.fixture
def header_page():
    """Page carrying a couple of editable elements."""
    return Page(
        fullpath={"en": "about"},
        editable_elements=[
            EditableElement(block="header", slug="logo", content={"en": "<img>"}),
            EditableElement(block="header", slug="title", content={"en": "Acme"}),
            EditableElement(block="footer", slug="logo", content={"en": "<small>"}),
        ],
    )


@pytest.fixture
def pages_dir(tmp_path):
    """A pages directory covering locales, nesting, Markdown and editable elements."""
    root = tmp_path / "pages"
    write_page(root, "index.liquid", """
        ---
        title: Home
        listed: false
        editable_elements:
          header/logo: "<img src='logo.png'>"
        ---
        <h1>Welcome</h1>
    """)
    write_page(root, "index.fr.liquid", """
        ---
        title: Accueil
        editable_elements:
          header/logo: "<img src='logo-fr.png'>"
        ---
        <h1>Bienvenue</h1>
    """)
    write_page(root, "404.liquid", """
        ---
        title: Not found
        ---
        Nothing here
    """)
    write_page(root, "about.md", """
        ---
        title: About us
        position: 2
        cache_strategy: hourly
        ---
        # About
    """)
    write_page(root, "about.fr.md", """
        ---
        title: A propos
        slug: a-propos
        ---
        # A propos
    """)
    write_page(root, "about/team.liquid", """
        ---
        title: Team
        handle: team
        ---
        <p>Team</p>
    """)
    write_page(root, "about/team.fr.liquid", """
        ---
        title: Equipe
        slug: equipe
        ---
        <p>Equipe</p>
    """)
    write_page(root, "contact.html", """
        ---
        title: Contact
        position: 1
        published: false
        ---
        <form></form>
    """)
    write_page(root, "articles.liquid", """
        ---
        title: Articles
        content_type: articles
        position: 3
        ---
        {{ article.title }}
    """)
    write_page(root, "articles/comments.liquid", """
        ---
        title: Comments
        ---
        {{ comments }}
    """)
    return root
