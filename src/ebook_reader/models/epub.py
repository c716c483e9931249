"""Data models for EPUB structure."""

from pydantic import BaseModel, Field


class ManifestItem(BaseModel):
    """Resource declared in the package manifest."""

    id: str
    href: str
    media_type: str = ""
    title: str | None = None


class SpineItem(BaseModel):
    """Entry of the reading order."""

    idref: str
    linear: bool = True


class TOCEntry(BaseModel):
    """Single entry in table of contents."""

    title: str
    href: str
    index: int
    level: int = 0


class EpubImage(BaseModel):
    """Image resource, keyed by the href used in markup."""

    id: str
    href: str
    media_type: str
    data: bytes


class EpubChapter(BaseModel):
    """Chapter content and metadata."""

    id: str
    title: str
    href: str = ""
    content: str
    html_content: str = ""
    order: int
    word_count: int = 0
    images: list[str] = Field(default_factory=list)


class EpubMetadata(BaseModel):
    """Book-level metadata."""

    title: str = "Unknown Title"
    author: str = "Unknown Author"
    description: str | None = None
    language: str | None = None
    publisher: str | None = None
    cover_image: bytes | None = None
    cover_media_type: str | None = None


class EpubDocument(BaseModel):
    """Complete parsed EPUB structure."""

    metadata: EpubMetadata
    chapters: list[EpubChapter]
    images: dict[str, EpubImage] = Field(default_factory=dict)
    full_text: str
    html_content: str = ""
    table_of_contents: list[TOCEntry] = Field(default_factory=list)
