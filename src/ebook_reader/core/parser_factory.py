"""Factory for creating book readers based on file format."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from ebook_reader.core.archive import decode_text
from ebook_reader.core.content_processor import ContentProcessor
from ebook_reader.core.epub_parser import EpubParser, extract_quick_metadata
from ebook_reader.core.errors import UnsupportedFormatError
from ebook_reader.models.book import BookFormat, BookInfo
from ebook_reader.models.epub import EpubDocument

log = logging.getLogger(__name__)

# Header lines inspected for "Title:" / "Author:" in plain-text books
TXT_HEADER_LINES = 10


def metadata_from_filename(file_name: str) -> tuple[str, str]:
    """Split a "Title - Author" or "Title by Author" filename into (title, author)."""
    name = file_name.rsplit(".", 1)[0] if "." in file_name else file_name

    if " - " in name:
        title, author = name.split(" - ", 1)
        return title.strip(), author.strip()

    if " by " in name:
        title, author = name.split(" by ", 1)
        return title.strip(), author.strip()

    return name, "Unknown Author"


def metadata_from_text_header(text: str, file_name: str) -> tuple[str, str]:
    """Look for title and author in the first lines of a plain-text book."""
    title: str | None = None
    author: str | None = None

    for raw_line in text.splitlines()[:TXT_HEADER_LINES]:
        line = raw_line.strip()
        lowered = line.lower()
        if lowered.startswith("title:"):
            title = line[6:].strip()
        elif lowered.startswith("author:"):
            author = line[7:].strip()
        elif lowered.startswith("by ") and author is None:
            author = line[3:].strip()
        elif title is None and line and "author" not in lowered:
            title = line

    fallback_title = file_name.rsplit(".", 1)[0] if "." in file_name else file_name
    return (
        title[:100] if title else fallback_title,
        author[:50] if author else "Unknown Author",
    )


class BookParser(ABC):
    """Abstract base class for book readers."""

    def __init__(self, path: Path):
        self.path = path

    @abstractmethod
    def read_text(self) -> str:
        """Return the book as plain text ready for pagination."""
        pass

    @abstractmethod
    def get_metadata(self) -> BookInfo:
        """Extract title and author for a library listing."""
        pass


class EpubBookParser(BookParser):
    """EPUB books, read through the container parser."""

    def __init__(self, path: Path):
        super().__init__(path)
        self._document: EpubDocument | None = None

    def parse(self) -> EpubDocument:
        """Parse the full document once and keep it."""
        if self._document is None:
            self._document = EpubParser().parse(self.path)
        return self._document

    def read_text(self) -> str:
        return self.parse().full_text

    def get_metadata(self) -> BookInfo:
        quick = extract_quick_metadata(self.path)
        if quick is None:
            title, author = metadata_from_filename(self.path.name)
        else:
            title, author = quick
        return BookInfo(title=title, author=author, format=BookFormat.EPUB)


class TextBookParser(BookParser):
    """Plain-text books."""

    def _read_raw(self) -> str:
        return decode_text(self.path.read_bytes())

    def read_text(self) -> str:
        return self._read_raw()

    def get_metadata(self) -> BookInfo:
        title, author = metadata_from_text_header(self._read_raw(), self.path.name)
        return BookInfo(title=title, author=author, format=BookFormat.TXT)


class HtmlBookParser(TextBookParser):
    """Single-file HTML books."""

    def read_text(self) -> str:
        return ContentProcessor().html_to_text(self.path.read_bytes())

    def get_metadata(self) -> BookInfo:
        title, author = metadata_from_filename(self.path.name)
        return BookInfo(title=title, author=author, format=BookFormat.HTML)


class MarkdownBookParser(TextBookParser):
    """Markdown books."""

    def read_text(self) -> str:
        return ContentProcessor().markdown_to_text(self._read_raw())

    def get_metadata(self) -> BookInfo:
        title, author = metadata_from_filename(self.path.name)
        return BookInfo(title=title, author=author, format=BookFormat.MD)


class ParserFactory:
    """Factory for creating appropriate reader based on file format."""

    SUPPORTED_FORMATS = {
        ".epub": BookFormat.EPUB,
        ".txt": BookFormat.TXT,
        ".html": BookFormat.HTML,
        ".htm": BookFormat.HTML,
        ".md": BookFormat.MD,
    }

    # Recognised but without a reader
    KNOWN_FORMATS = {
        ".pdf": BookFormat.PDF,
        ".mobi": BookFormat.MOBI,
        ".fb2": BookFormat.FB2,
    }

    _PARSERS: dict[BookFormat, type[BookParser]] = {
        BookFormat.EPUB: EpubBookParser,
        BookFormat.TXT: TextBookParser,
        BookFormat.HTML: HtmlBookParser,
        BookFormat.MD: MarkdownBookParser,
    }

    @classmethod
    def create(cls, path: Path) -> BookParser:
        """Create appropriate reader for the given file.

        Args:
            path: Path to the book file

        Returns:
            BookParser instance for the file type

        Raises:
            UnsupportedFormatError: If file format is not supported
            FileNotFoundError: If file does not exist
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        suffix = path.suffix.lower()
        book_format = cls.SUPPORTED_FORMATS.get(suffix)
        if book_format is None:
            if suffix in cls.KNOWN_FORMATS:
                raise UnsupportedFormatError(
                    f"{suffix.lstrip('.').upper()} reading support is not available"
                )
            supported = ", ".join(cls.SUPPORTED_FORMATS.keys())
            raise UnsupportedFormatError(
                f"Unsupported format: {suffix}. Supported formats: {supported}"
            )

        return cls._PARSERS[book_format](path)

    @classmethod
    def detect_format(cls, path: Path) -> BookFormat:
        """Detect file format from extension; unknown extensions count as TXT."""
        suffix = path.suffix.lower()
        return cls.SUPPORTED_FORMATS.get(suffix) or cls.KNOWN_FORMATS.get(
            suffix, BookFormat.TXT
        )

    @classmethod
    def is_supported(cls, path: Path) -> bool:
        """Check if file format can be read."""
        return path.suffix.lower() in cls.SUPPORTED_FORMATS

    @classmethod
    def get_book_info(cls, path: Path) -> BookInfo:
        """Library metadata for any file, falling back to the filename."""
        if cls.is_supported(path):
            return cls.create(path).get_metadata()
        title, author = metadata_from_filename(path.name)
        return BookInfo(title=title, author=author, format=cls.detect_format(path))
