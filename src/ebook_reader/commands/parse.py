"""Parse command implementation."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ebook_reader.config import ReadingTheme
from ebook_reader.core.epub_parser import EpubParser
from ebook_reader.models.epub import EpubDocument, TOCEntry


def display_chapters(document: EpubDocument, console: Console) -> None:
    """Display chapters in reading order."""
    table = Table(title="Chapters", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("Source", style="dim")
    table.add_column("Words", justify="right", style="green")
    table.add_column("Images", justify="right", style="dim")

    for i, chapter in enumerate(document.chapters):
        table.add_row(
            str(i + 1),
            escape(chapter.title),
            escape(chapter.href),
            f"{chapter.word_count:,}",
            str(len(chapter.images)),
        )

    console.print(table)


def display_toc(toc: list[TOCEntry], console: Console) -> None:
    """Display table of contents."""
    table = Table(
        title="Table of Contents", show_header=True, header_style="bold cyan"
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("Href", style="dim")

    for entry in toc:
        indent = "  " * entry.level
        table.add_row(
            str(entry.index + 1), f"{indent}{escape(entry.title)}", escape(entry.href)
        )

    console.print(table)


def execute_parse(
    book_path: Path,
    show_toc: bool,
    html_output: Path | None,
    quiet: bool,
    console: Console,
    theme: ReadingTheme = ReadingTheme.LIGHT,
    font_size: float = 16.0,
) -> EpubDocument:
    """Execute the parse command."""
    parser = EpubParser()

    if quiet:
        document = parser.parse(book_path)
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("Parsing EPUB...", total=None)
            document = parser.parse(book_path)

    if html_output is not None:
        styled = parser.processor.build_styled_document(
            document.metadata, document.chapters, font_size=font_size, theme=theme
        )
        html_output.write_text(styled, encoding="utf-8")

    if quiet:
        return document

    metadata = document.metadata
    info_lines = [
        f"[bold]{escape(metadata.title)}[/]",
        f"[dim]Author:[/] {escape(metadata.author)}",
        f"[dim]Language:[/] {escape(metadata.language or 'Unknown')}",
        f"[dim]Publisher:[/] {escape(metadata.publisher or 'Unknown')}",
        f"[dim]Chapters:[/] {len(document.chapters)}",
        f"[dim]Images:[/] {len(document.images)}",
        f"[dim]Cover:[/] {'yes' if metadata.cover_image else 'no'}",
    ]
    if metadata.description:
        info_lines.extend(["", escape(metadata.description)])

    console.print()
    console.print(Panel("\n".join(info_lines), title="Book Info", border_style="green"))
    console.print()
    display_chapters(document, console)

    if show_toc:
        console.print()
        if document.table_of_contents:
            display_toc(document.table_of_contents, console)
        else:
            console.print("[dim]No table of contents[/]")

    if html_output is not None:
        console.print()
        console.print(f"[dim]Styled document written to[/] {escape(str(html_output))}")

    return document
