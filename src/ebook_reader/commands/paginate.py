"""Paginate command implementation."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ebook_reader.cache.manager import CacheManager
from ebook_reader.config import ReaderConfig
from ebook_reader.core.paginator import PageCalculator, estimate_reading_time
from ebook_reader.core.parser_factory import ParserFactory
from ebook_reader.core.reading_session import ReadingSession
from ebook_reader.models.pagination import PaginationResult


def load_pagination(
    book_path: Path,
    content: str,
    config: ReaderConfig,
    calculator: PageCalculator,
    force: bool,
) -> tuple[PaginationResult, bool]:
    """Paginate through the on-disk cache. Returns (result, cache hit)."""
    cache_manager = CacheManager(book_path.parent)
    layout = config.layout()
    fingerprint = calculator.create_cache_key(content, layout)

    if not force:
        cached = cache_manager.get(fingerprint)
        if cached is not None:
            return cached, True

    result = calculator.calculate_pages(content, layout)
    cache_manager.save(fingerprint, result, len(content), source_path=book_path)
    return result, False


def execute_paginate(
    book_path: Path,
    page: int,
    config: ReaderConfig,
    force: bool,
    console: Console,
) -> ReadingSession:
    """Execute the paginate command."""
    reader = ParserFactory.create(book_path)
    content = reader.read_text()

    calculator = PageCalculator()
    result, cache_hit = load_pagination(book_path, content, config, calculator, force)
    if cache_hit:
        console.print("[dim]Using cached pagination[/]")
        # Seed the in-memory cache so the session does not paginate again
        calculator.cache.put(calculator.create_cache_key(content, result.configuration), result)

    session = ReadingSession(content, config, calculator, start_page=page)
    stats = session.page_statistics()

    console.print()
    console.print(
        Panel(
            escape(session.current_page_content),
            title=f"Page {session.current_page} of {session.total_pages}",
            subtitle=(
                f"Words: {stats.words} • Characters: {stats.characters} • "
                f"Est. time: {stats.reading_minutes}min"
            ),
            border_style="blue",
        )
    )

    summary_lines = [
        f"[dim]Pages:[/] {result.total_pages}",
        f"[dim]Words:[/] {result.total_words:,}",
        f"[dim]Reading time:[/] "
        f"{estimate_reading_time(result.total_words, config.words_per_minute)} min",
        f"[dim]Progress:[/] {session.progress_percentage()}%",
        f"[dim]Time left:[/] {session.estimate_time_left()} min",
    ]
    console.print(Panel("\n".join(summary_lines), title="Summary", border_style="green"))
    return session
