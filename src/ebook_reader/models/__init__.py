"""Data models."""

from ebook_reader.models.book import BookFormat, BookInfo
from ebook_reader.models.epub import (
    EpubChapter,
    EpubDocument,
    EpubImage,
    EpubMetadata,
    ManifestItem,
    SpineItem,
    TOCEntry,
)
from ebook_reader.models.pagination import (
    LayoutConfiguration,
    Page,
    PageStatistics,
    PaginationResult,
    SearchResult,
)

__all__ = [
    # Book models
    "BookFormat",
    "BookInfo",
    # EPUB models
    "ManifestItem",
    "SpineItem",
    "TOCEntry",
    "EpubImage",
    "EpubChapter",
    "EpubMetadata",
    "EpubDocument",
    # Pagination models
    "LayoutConfiguration",
    "Page",
    "PaginationResult",
    "SearchResult",
    "PageStatistics",
]
