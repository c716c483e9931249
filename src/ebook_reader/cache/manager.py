"""On-disk cache of pagination results."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from pydantic import ValidationError

from ebook_reader.cache.models import CachedPagination, CacheIndex, CacheMetadata
from ebook_reader.models.pagination import PaginationResult

log = logging.getLogger(__name__)


class CacheManager:
    """Persists pagination results under a project directory.

    Entries are keyed by the fingerprint of content and layout, so a stored
    result is valid for as long as both are unchanged.
    """

    CACHE_DIR = ".ebook_reader_cache"
    INDEX_FILE = "index.json"
    CACHE_VERSION = "1.0"

    def __init__(self, project_dir: Path):
        self.cache_root = project_dir / self.CACHE_DIR
        self.index_path = self.cache_root / self.INDEX_FILE
        self._index: CacheIndex | None = None

    def _ensure_cache_dir(self) -> None:
        """Create cache directory if it doesn't exist."""
        self.cache_root.mkdir(parents=True, exist_ok=True)

    def _load_index(self) -> CacheIndex:
        """Load or create cache index."""
        if self._index is not None:
            return self._index

        if self.index_path.exists():
            try:
                self._index = CacheIndex.model_validate_json(self.index_path.read_text())
            except ValidationError:
                log.warning("Cache index %s is corrupt, starting fresh", self.index_path)
                self._index = CacheIndex()
        else:
            self._index = CacheIndex()

        return self._index

    def _save_index(self) -> None:
        """Save cache index to disk."""
        self._ensure_cache_dir()
        index = self._load_index()
        self.index_path.write_text(index.model_dump_json(indent=2))

    def _entry_path(self, fingerprint: str) -> Path:
        return self.cache_root / "pages" / f"{fingerprint}.json"

    def get(self, fingerprint: str) -> PaginationResult | None:
        """Return a stored result, or None if missing or unreadable."""
        cache_file = self._entry_path(fingerprint)
        if not cache_file.exists():
            return None

        try:
            cached = CachedPagination.model_validate_json(cache_file.read_text())
        except ValidationError:
            log.warning("Discarding unreadable cache entry %s", cache_file.name)
            return None

        if cached.cache_metadata.cache_version != self.CACHE_VERSION:
            return None
        return cached.result

    def save(
        self,
        fingerprint: str,
        result: PaginationResult,
        content_length: int,
        source_path: Path | None = None,
    ) -> Path:
        """Store a pagination result and record it in the index."""
        cached = CachedPagination(
            cache_metadata=CacheMetadata(
                fingerprint=fingerprint,
                source_path=str(source_path.resolve()) if source_path else None,
                content_length=content_length,
                cache_version=self.CACHE_VERSION,
            ),
            result=result,
        )

        cache_file = self._entry_path(fingerprint)
        cache_file.parent.mkdir(parents=True, exist_ok=True)
        cache_file.write_text(cached.model_dump_json(indent=2))

        index = self._load_index()
        index.entries[fingerprint] = cached.cache_metadata.source_path or ""
        self._save_index()
        return cache_file

    def clear_cache(self) -> int:
        """Clear all cached data. Returns number of entries cleared."""
        if not self.cache_root.exists():
            return 0

        pages_dir = self.cache_root / "pages"
        count = len(list(pages_dir.glob("*.json"))) if pages_dir.exists() else 0

        shutil.rmtree(self.cache_root)
        self._index = None
        return count

    def list_cached(self) -> list[tuple[str, str]]:
        """List all cached results. Returns list of (source path, fingerprint)."""
        index = self._load_index()
        return [(path, fingerprint) for fingerprint, path in index.entries.items()]
