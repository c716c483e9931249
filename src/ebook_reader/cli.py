"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ebook_reader.cache.manager import CacheManager
from ebook_reader.commands.paginate import execute_paginate
from ebook_reader.commands.parse import execute_parse
from ebook_reader.commands.search import execute_search
from ebook_reader.config import ReaderConfig, ReadingTheme
from ebook_reader.core.errors import (
    PARSE_FAILURE_MESSAGE,
    ParseError,
    UnsupportedFormatError,
)
from ebook_reader.core.parser_factory import ParserFactory

app = typer.Typer(
    name="ebook-reader",
    help="Parse EPUB and text books and lay them out into pages.",
    add_completion=False,
)

console = Console()

# Cache subcommand group
cache_app = typer.Typer(help="Cache management commands")
app.add_typer(cache_app, name="cache")

BookPath = Annotated[
    Path,
    typer.Argument(
        help="Path to the book file (EPUB, TXT, HTML or Markdown)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


def _check_supported(book_path: Path) -> None:
    if not ParserFactory.is_supported(book_path):
        console.print(f"[red]Unsupported file format: {escape(book_path.suffix)}[/]")
        supported = ", ".join(ParserFactory.SUPPORTED_FORMATS)
        console.print(f"[dim]Supported formats: {supported}[/]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging",
        ),
    ] = False,
) -> None:
    """Parse EPUB and text books and lay them out into pages."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@app.command()
def info(book_path: BookPath) -> None:
    """Display library metadata (title, author, format) for a book."""
    try:
        book = ParserFactory.get_book_info(book_path)
    except UnsupportedFormatError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)

    info_lines = [
        f"[bold]{escape(book.title)}[/]",
        "",
        f"[dim]Author:[/] {escape(book.author)}",
        f"[dim]Format:[/] {book.format.value.upper()}",
        f"[dim]MIME type:[/] {book.format.mime_type}",
        f"[dim]Readable:[/] {'yes' if ParserFactory.is_supported(book_path) else 'no'}",
    ]

    console.print()
    console.print(
        Panel(
            "\n".join(info_lines),
            title="Book Information",
            border_style="green",
        )
    )


@app.command()
def parse(
    book_path: BookPath,
    toc: Annotated[
        bool,
        typer.Option(
            "--toc",
            "-t",
            help="Also display the table of contents",
        ),
    ] = False,
    html_output: Annotated[
        Optional[Path],
        typer.Option(
            "--html",
            help="Write the styled HTML document to this file",
        ),
    ] = None,
    theme: Annotated[
        ReadingTheme,
        typer.Option(
            "--theme",
            help="Colour theme for the styled HTML document",
        ),
    ] = ReadingTheme.LIGHT,
    font_size: Annotated[
        float,
        typer.Option(
            "--font-size",
            help="Base font size for the styled HTML document",
            min=1.0,
        ),
    ] = 16.0,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress progress output",
        ),
    ] = False,
) -> None:
    """Parse an EPUB file and list its chapters."""
    if book_path.suffix.lower() != ".epub":
        console.print(f"[red]Not an EPUB file: {escape(book_path.name)}[/]")
        raise typer.Exit(1)

    try:
        execute_parse(
            book_path=book_path,
            show_toc=toc,
            html_output=html_output,
            quiet=quiet,
            console=console,
            theme=theme,
            font_size=font_size,
        )
    except ParseError:
        console.print(f"[red]{PARSE_FAILURE_MESSAGE}[/]")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def paginate(
    book_path: BookPath,
    page: Annotated[
        int,
        typer.Option(
            "--page",
            "-p",
            help="Page to display (clamped to the book)",
        ),
    ] = 1,
    font_size: Annotated[
        float,
        typer.Option(
            "--font-size",
            help="Font size in points",
            min=1.0,
        ),
    ] = 16.0,
    width: Annotated[
        int,
        typer.Option(
            "--width",
            help="Screen width in pixels",
            min=1,
        ),
    ] = 1080,
    height: Annotated[
        int,
        typer.Option(
            "--height",
            help="Screen height in pixels",
            min=1,
        ),
    ] = 1920,
    density: Annotated[
        float,
        typer.Option(
            "--density",
            help="Screen density (pixels per density-independent unit)",
            min=0.1,
        ),
    ] = 3.0,
    wpm: Annotated[
        int,
        typer.Option(
            "--wpm",
            help="Reading speed in words per minute",
            min=1,
        ),
    ] = 200,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Force re-pagination, ignore cache",
        ),
    ] = False,
) -> None:
    """Lay out a book into pages and display one page."""
    _check_supported(book_path)

    config = ReaderConfig(
        font_size=font_size,
        screen_width=width,
        screen_height=height,
        density=density,
        words_per_minute=wpm,
    )

    try:
        execute_paginate(
            book_path=book_path,
            page=page,
            config=config,
            force=force,
            console=console,
        )
    except ParseError:
        console.print(f"[red]{PARSE_FAILURE_MESSAGE}[/]")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def search(
    book_path: BookPath,
    query: Annotated[str, typer.Argument(help="Text to search for")],
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of matches",
            min=1,
        ),
    ] = 50,
    font_size: Annotated[
        float,
        typer.Option(
            "--font-size",
            help="Font size used to number pages of non-EPUB books",
            min=1.0,
        ),
    ] = 16.0,
) -> None:
    """Search a book for text (case-insensitive)."""
    _check_supported(book_path)

    if not query.strip():
        console.print("[red]Search query must not be empty[/]")
        raise typer.Exit(1)

    try:
        execute_search(
            book_path=book_path,
            query=query,
            limit=limit,
            config=ReaderConfig(font_size=font_size),
            console=console,
        )
    except ParseError:
        console.print(f"[red]{PARSE_FAILURE_MESSAGE}[/]")
        raise typer.Exit(1)


@app.command()
def themes() -> None:
    """List the reading themes available for styled documents."""
    table = Table(title="Reading Themes", show_header=True, header_style="bold cyan")
    table.add_column("Theme", style="white")
    table.add_column("Background", style="dim")
    table.add_column("Text", style="dim")
    table.add_column("Surface", style="dim")

    for theme in ReadingTheme:
        background, text, surface = theme.colors
        table.add_row(theme.display_name, background, text, surface)

    console.print(table)


@cache_app.command("clear")
def cache_clear(
    project_dir: Annotated[
        Path,
        typer.Option(
            "--dir",
            "-d",
            help="Directory containing the cache (default: current directory)",
        ),
    ] = Path("."),
) -> None:
    """Clear all cached pagination results."""
    cache_manager = CacheManager(project_dir.resolve())
    count = cache_manager.clear_cache()

    if count > 0:
        console.print(f"[green]Cleared {count} cached result(s)[/]")
    else:
        console.print("[dim]No cache to clear[/]")


@cache_app.command("list")
def cache_list(
    project_dir: Annotated[
        Path,
        typer.Option(
            "--dir",
            "-d",
            help="Directory containing the cache (default: current directory)",
        ),
    ] = Path("."),
) -> None:
    """List all cached pagination results."""
    cache_manager = CacheManager(project_dir.resolve())
    cached = cache_manager.list_cached()

    if not cached:
        console.print("[dim]No cached results[/]")
        return

    table = Table(title="Cached Results", show_header=True, header_style="bold cyan")
    table.add_column("Path", style="white")
    table.add_column("Fingerprint", style="dim", width=12)

    for path, fingerprint in cached:
        # Truncate path for display
        display_path = path if len(path) < 60 else "..." + path[-57:]
        table.add_row(escape(display_path) or "-", fingerprint[:12])

    console.print(table)


if __name__ == "__main__":
    app()
