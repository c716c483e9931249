"""Search command implementation."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ebook_reader.config import ReaderConfig
from ebook_reader.core.parser_factory import EpubBookParser, ParserFactory
from ebook_reader.core.reading_session import ReadingSession, search_document
from ebook_reader.models.pagination import SearchResult


def _highlight(result: SearchResult, query: str) -> str:
    start, end = result.match_index, result.match_index + len(query)
    context = result.context.replace("\n", " ")
    return (
        f"{escape(context[:start])}[bold yellow]{escape(context[start:end])}[/]"
        f"{escape(context[end:])}"
    )


def execute_search(
    book_path: Path,
    query: str,
    limit: int,
    config: ReaderConfig,
    console: Console,
) -> list[SearchResult]:
    """Execute the search command.

    EPUB books are searched chapter by chapter; other formats are paginated
    first and searched page by page.
    """
    reader = ParserFactory.create(book_path)

    if isinstance(reader, EpubBookParser):
        results = search_document(reader.parse(), query, limit)
    else:
        session = ReadingSession(reader.read_text(), config)
        results = session.search(query, limit)

    if not results:
        console.print(f"[dim]No matches for '{escape(query)}'[/]")
        return results

    table = Table(
        title=f"Matches for '{escape(query)}'",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Page", justify="right", style="green", width=6)
    table.add_column("Location", style="white")
    table.add_column("Context", style="dim")

    for result in results:
        table.add_row(
            str(result.page_number),
            escape(result.chapter_title),
            _highlight(result, query),
        )

    console.print(table)
    if len(results) >= limit:
        console.print(f"[dim]Showing first {limit} matches[/]")
    return results
