"""Data models for library-level book information."""

from enum import Enum

from pydantic import BaseModel


class BookFormat(str, Enum):
    """Book file formats known to the reader."""

    EPUB = "epub"
    MOBI = "mobi"
    PDF = "pdf"
    TXT = "txt"
    FB2 = "fb2"
    HTML = "html"
    MD = "md"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]


_MIME_TYPES = {
    BookFormat.EPUB: "application/epub+zip",
    BookFormat.MOBI: "application/x-mobipocket-ebook",
    BookFormat.PDF: "application/pdf",
    BookFormat.TXT: "text/plain",
    BookFormat.FB2: "application/x-fictionbook+xml",
    BookFormat.HTML: "text/html",
    BookFormat.MD: "text/markdown",
}


class BookInfo(BaseModel):
    """Title and author shown in a library listing."""

    title: str
    author: str = "Unknown Author"
    format: BookFormat = BookFormat.TXT
