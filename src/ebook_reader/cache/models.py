"""Cache data models."""

from datetime import datetime

from pydantic import BaseModel, Field

from ebook_reader.models.pagination import PaginationResult


class CacheMetadata(BaseModel):
    """Where a cached pagination came from."""

    fingerprint: str
    source_path: str | None = None  # Book file the text was read from
    content_length: int
    cached_at: datetime = Field(default_factory=datetime.now)
    cache_version: str = "1.0"


class CachedPagination(BaseModel):
    """Pagination result stored on disk."""

    cache_metadata: CacheMetadata
    result: PaginationResult


class CacheIndex(BaseModel):
    """Index mapping fingerprints to source paths."""

    entries: dict[str, str] = Field(default_factory=dict)  # fingerprint -> path
