"""Command-line interface to inspect the page tree of a site."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import frontmatter
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import PageTreeConfig, ensure_config
from .entities.models import Page, Site
from .errors import PageTreeError
from .local.converters import ContentConverter
from .local.loader import FilesystemLoader
from .local.repository import PageRepository

app = typer.Typer(help="Inspect the pages of a site stored as template files with front matter.")
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_repository(config: PageTreeConfig) -> PageRepository:
    site = Site(
        name=config.site.name,
        handle=config.site.handle,
        locales=list(config.site.locales),
    )
    loader = FilesystemLoader(
        config.site.pages_path.resolve(),
        site=site,
        converter=ContentConverter(),
        defaults=config.defaults,
    )
    return loader.load()


def _resolve_config(
    ctx: typer.Context,
    *,
    pages_path: Optional[Path],
    locales: Optional[str],
) -> PageTreeConfig:
    config_path: Optional[Path] = ctx.obj.get("config_path")
    return ensure_config(
        pages_path=pages_path,
        locales=locales.split(",") if locales else None,
        config_path=config_path,
    )


def _fail(error: PageTreeError) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error.message}")
    raise typer.Exit(code=1)


def _flag(value: bool) -> str:
    return "yes" if value else "no"


def _find_page(repository: PageRepository, fullpath: str, locale: Optional[str]) -> Page:
    page = repository.by_fullpath(fullpath.strip("/") or "index", locale)
    if page is None:
        console.print(f"[bold red]Error:[/bold red] No page found at {fullpath!r}")
        raise typer.Exit(code=1)
    return page


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a configuration TOML file",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    setup_logging(verbose)
    ctx.obj = {"config_path": config_path}


PagesOption = typer.Option(None, "--pages", "-p", help="Directory containing the page files")
LocalesOption = typer.Option(None, "--locales", "-l", help="Comma separated locales, default locale first")


@app.command()
def tree(
    ctx: typer.Context,
    pages_path: Optional[Path] = PagesOption,
    locales: Optional[str] = LocalesOption,
    locale: Optional[str] = typer.Option(None, "--locale", help="Locale used to display titles and paths"),
) -> None:
    """List the pages of the site in tree order."""

    try:
        config = _resolve_config(ctx, pages_path=pages_path, locales=locales)
        repository = _load_repository(config)
    except PageTreeError as error:
        _fail(error)

    table = Table(title=f"{config.site.name} pages")
    table.add_column("Fullpath")
    table.add_column("Title")
    table.add_column("Slug")
    table.add_column("Depth", justify="right")
    table.add_column("Published")
    table.add_column("Listed")
    table.add_column("Cache")

    for root in repository.roots():
        for page in repository.iter_subtree(root):
            table.add_row(
                page.localized("fullpath", locale) or "",
                page.localized("title", locale) or "",
                page.localized("slug", locale) or "",
                str(page.depth),
                _flag(page.published),
                _flag(page.listed),
                page.cache_strategy if page.with_cache else "-",
            )

    console.print(table)
    console.print(f"{len(repository)} page(s)")


@app.command()
def show(
    ctx: typer.Context,
    fullpath: str = typer.Argument(..., help="Fullpath of the page, e.g. about/team"),
    pages_path: Optional[Path] = PagesOption,
    locales: Optional[str] = LocalesOption,
    locale: Optional[str] = typer.Option(None, "--locale", help="Locale of the given fullpath"),
) -> None:
    """Display the attributes of a page."""

    try:
        config = _resolve_config(ctx, pages_path=pages_path, locales=locales)
        repository = _load_repository(config)
    except PageTreeError as error:
        _fail(error)

    page = _find_page(repository, fullpath, locale)
    parent = repository.parent_of(page)

    table = Table(title=page.localized("title", locale) or page.default_fullpath)
    table.add_column("Attribute")
    table.add_column("Value")
    table.add_row("Fullpath", ", ".join(f"{key}: {value}" for key, value in page.fullpath.items()))
    table.add_row("Slug", ", ".join(f"{key}: {value}" for key, value in page.slug.items()))
    table.add_row("Handle", page.handle or "-")
    table.add_row("Parent", parent.default_fullpath if parent is not None else "-")
    table.add_row("Children", str(len(page.children)))
    table.add_row("Depth", str(page.depth))
    table.add_row("Index or 404", _flag(page.is_index_or_404))
    table.add_row("Published", _flag(page.published))
    table.add_row("Listed", _flag(page.listed))
    table.add_row("Searchable", _flag(page.searchable))
    table.add_row("Templatized", _flag(page.templatized))
    if page.templatized:
        table.add_row("Content type", page.content_type or "-")
    table.add_row("Redirect", _flag(page.is_redirect))
    table.add_row("Cache strategy", str(page.cache_strategy))
    table.add_row("Response type", str(page.response_type))
    table.add_row("Position", str(page.position))
    for element in page.editable_elements or []:
        table.add_row("Editable element", f"{element.block}/{element.slug}")
    console.print(table)


@app.command()
def element(
    ctx: typer.Context,
    fullpath: str = typer.Argument(..., help="Fullpath of the page"),
    block: str = typer.Argument(..., help="Name of the block"),
    slug: str = typer.Argument(..., help="Slug of the editable element"),
    pages_path: Optional[Path] = PagesOption,
    locales: Optional[str] = LocalesOption,
    locale: Optional[str] = typer.Option(None, "--locale", help="Locale of the content to print"),
) -> None:
    """Print the content of an editable element."""

    try:
        config = _resolve_config(ctx, pages_path=pages_path, locales=locales)
        repository = _load_repository(config)
    except PageTreeError as error:
        _fail(error)

    page = _find_page(repository, fullpath, locale)
    found = page.find_editable_element(block, slug)
    if found is None:
        console.print(f"[bold red]Error:[/bold red] No editable element {block}/{slug} in {fullpath!r}")
        raise typer.Exit(code=1)

    resolved_locale = locale or config.site.locales[0]
    content = found.content.get(resolved_locale)
    if content is None:
        content = next(iter(found.content.values()), "")
    console.print(content, markup=False, highlight=False)


@app.command()
def init(
    directory: Path = typer.Option(
        Path.cwd() / "pages",
        "--directory",
        "-d",
        help="Directory that will hold the page files",
    ),
    title: str = typer.Option("Home page", "--title", "-t", help="Title of the index page"),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite existing index and 404 pages",
    ),
) -> None:
    """Create a pages directory with an index and a 404 page."""

    directory = directory.resolve()
    directory.mkdir(parents=True, exist_ok=True)

    pages = {
        "index.liquid": (title, "<h1>" + title + "</h1>\n"),
        "404.liquid": ("Page not found", "<h1>Page not found</h1>\n"),
    }
    for filename, (page_title, body) in pages.items():
        page_file = directory / filename
        if page_file.exists() and not force:
            raise typer.BadParameter(f"{page_file} already exists. Use --force to overwrite it.")

        post = frontmatter.Post(body)
        post.metadata.update({"title": page_title, "published": True, "listed": False})
        with page_file.open("w", encoding="utf-8") as handle:
            handle.write(frontmatter.dumps(post))
            handle.write("\n")

    console.print(f"Initialized pages directory at [bold]{directory}[/bold].")


def run() -> None:
    """Entry point for console scripts."""

    app()


if __name__ == "__main__":  # pragma: no cover
    run()
