from __future__ import annotations

import asyncio
import io
from collections.abc import Callable
from pathlib import Path

import pytest

from ebook_reader.core.epub_parser import (
    EpubParser,
    extract_quick_metadata,
    parse_document,
    parse_document_async,
)
from ebook_reader.core.errors import (
    ArchiveError,
    InvalidContainerError,
    MissingRootfileError,
    ParseError,
)

from conftest import JPEG_BYTES, PNG_BYTES, package_xml, xhtml


def test_parse_sample_document(sample_epub: bytes) -> None:
    document = parse_document(sample_epub)

    assert document.metadata.title == "Sample Book"
    assert document.metadata.author == "Sample Author"
    assert document.metadata.cover_image == JPEG_BYTES
    assert document.metadata.cover_media_type == "image/jpeg"
    assert set(document.images) == {"images/fig.png", "images/front.jpg"}
    assert len(document.table_of_contents) == 4


def test_chapters_follow_spine_and_skip_unusable_items(sample_epub: bytes) -> None:
    chapters = parse_document(sample_epub).chapters

    # blank.xhtml has no text and the font is not HTML
    assert [c.id for c in chapters] == ["ch1", "ch2", "ch3"]
    assert [c.order for c in chapters] == [0, 2, 4]
    assert [c.title for c in chapters] == ["The Beginning", "The Middle", "Chapter 5"]
    assert chapters[0].content == "One It was a dark & stormy night."
    assert chapters[1].content == "The second chapter."
    assert chapters[0].href == "text/ch1.xhtml"
    assert chapters[0].word_count == 8


def test_image_rewrite_uses_markup_literal_href(sample_epub: bytes) -> None:
    chapter = parse_document(sample_epub).chapters[0]

    assert chapter.images == ["images/fig.png"]
    assert 'src="../images/fig.png"' in chapter.html_content
    assert "data:image/png;base64," in chapter.html_content


def test_full_text_prefixes_titles(sample_epub: bytes) -> None:
    document = parse_document(sample_epub)
    assert document.full_text == (
        "The Beginning\n\nOne It was a dark & stormy night.\n\n"
        "The Middle\n\nThe second chapter.\n\n"
        "Chapter 5\n\nThird and final chapter."
    )
    assert "<h2 class=\"chapter-title\">The Middle</h2>" in document.html_content
    assert "Sample Book" in document.html_content


def test_order_matches_position_when_all_items_are_chapters(
    make_epub: Callable[..., bytes],
) -> None:
    ids = ["c", "a", "d", "b"]
    files: dict[str, str | bytes] = {
        "OEBPS/content.opf": package_xml(
            [(i, f"{i}.xhtml", "application/xhtml+xml") for i in sorted(ids)], ids
        )
    }
    for i in ids:
        files[f"OEBPS/{i}.xhtml"] = xhtml(f"<p>Text of {i}</p>")

    chapters = parse_document(make_epub(files)).chapters
    assert [c.id for c in chapters] == ids
    assert [c.order for c in chapters] == list(range(len(ids)))
    assert [c.title for c in chapters] == ["Chapter 1", "Chapter 2", "Chapter 3", "Chapter 4"]


def test_package_at_archive_root(make_epub: Callable[..., bytes]) -> None:
    container = '<container><rootfiles><rootfile full-path="book.opf"/></rootfiles></container>'
    files = {
        "book.opf": package_xml([("c1", "c1.html", "text/html")], ["c1"]),
        "c1.html": "<html><body><p>Root level</p></body></html>",
    }
    document = parse_document(make_epub(files, container=container))
    assert document.chapters[0].content == "Root level"


def test_no_readable_chapters_gives_placeholder(make_epub: Callable[..., bytes]) -> None:
    files = {
        "OEBPS/content.opf": package_xml(
            [("img", "a.png", "image/png"), ("empty", "e.xhtml", "application/xhtml+xml")],
            ["img", "empty", "missing"],
        ),
        "OEBPS/a.png": PNG_BYTES,
        "OEBPS/e.xhtml": xhtml(""),
    }
    document = parse_document(make_epub(files))
    assert len(document.chapters) == 1
    assert document.chapters[0].content == "No content available"
    assert document.full_text == "Chapter 1\n\nNo content available"


def test_missing_container_raises(make_epub: Callable[..., bytes]) -> None:
    with pytest.raises(MissingRootfileError):
        parse_document(make_epub({}, container=None))


def test_missing_package_document_raises(make_epub: Callable[..., bytes]) -> None:
    with pytest.raises(InvalidContainerError):
        parse_document(make_epub({"OEBPS/other.opf": "<package/>"}))


def test_unparseable_package_document_raises(make_epub: Callable[..., bytes]) -> None:
    with pytest.raises(InvalidContainerError):
        parse_document(make_epub({"OEBPS/content.opf": "garbage"}))


def test_not_a_zip_raises_parse_error() -> None:
    with pytest.raises(ArchiveError):
        parse_document(b"plain text, not an archive")
    with pytest.raises(ParseError):
        parse_document(b"")


def test_parse_from_path_and_stream(epub_file: Path) -> None:
    assert parse_document(epub_file).metadata.title == "Sample Book"
    with epub_file.open("rb") as fh:
        assert parse_document(fh).metadata.title == "Sample Book"
    assert parse_document(io.BytesIO(epub_file.read_bytes())).chapters


def test_parse_document_async(sample_epub: bytes) -> None:
    document = asyncio.run(parse_document_async(sample_epub))
    assert len(document.chapters) == 3


def test_get_metadata_reads_package_only(sample_epub: bytes) -> None:
    metadata = EpubParser().get_metadata(sample_epub)
    assert metadata.title == "Sample Book"
    assert metadata.publisher == "Example Press"
    assert metadata.cover_image is None


def test_extract_quick_metadata(sample_epub: bytes, make_epub: Callable[..., bytes]) -> None:
    assert extract_quick_metadata(sample_epub) == ("Sample Book", "Sample Author")
    assert extract_quick_metadata(b"not a zip") is None
    assert extract_quick_metadata(make_epub({}, container=None)) is None
