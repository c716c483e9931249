"""Reading position, reflow and search over a paginated book."""

from __future__ import annotations

import dataclasses
import logging

from ebook_reader.cache.memory import PageCache
from ebook_reader.config import ReaderConfig
from ebook_reader.core.paginator import PageCalculator, estimate_reading_time, remap_page
from ebook_reader.models.epub import EpubDocument
from ebook_reader.models.pagination import (
    PageStatistics,
    PaginationResult,
    SearchResult,
)

log = logging.getLogger(__name__)

SEARCH_CONTEXT_CHARS = 50
MAX_SEARCH_RESULTS = 50
# Used for the time-left estimate only
AVERAGE_WORDS_PER_PAGE = 250


def _find_occurrences(text: str, query: str) -> list[tuple[int, str, int]]:
    """Return (match offset, context, offset of match within context)."""
    haystack = text.lower()
    needle = query.lower()
    found = []
    start = 0
    while needle:
        index = haystack.find(needle, start)
        if index == -1:
            break
        context_start = max(index - SEARCH_CONTEXT_CHARS, 0)
        context_end = min(index + len(needle) + SEARCH_CONTEXT_CHARS, len(haystack))
        found.append((index, text[context_start:context_end], index - context_start))
        start = index + 1
    return found


def search_pages(
    result: PaginationResult, query: str, limit: int = MAX_SEARCH_RESULTS
) -> list[SearchResult]:
    """Case-insensitive search across pages."""
    results: list[SearchResult] = []
    for page_index, page in enumerate(result.pages):
        for _, context, match_index in _find_occurrences(page.content, query):
            results.append(
                SearchResult(
                    chapter_title=f"Page {page_index + 1}",
                    chapter_index=page_index,
                    page_number=page_index + 1,
                    context=context,
                    match_index=match_index,
                )
            )
            if len(results) >= limit:
                return results
    return results


def search_document(
    document: EpubDocument, query: str, limit: int = MAX_SEARCH_RESULTS
) -> list[SearchResult]:
    """Case-insensitive search across chapters.

    Page numbers count the cover as page 1, so chapter ``i`` is page ``i + 2``.
    """
    results: list[SearchResult] = []
    for chapter_index, chapter in enumerate(document.chapters):
        for _, context, match_index in _find_occurrences(chapter.content, query):
            results.append(
                SearchResult(
                    chapter_title=chapter.title,
                    chapter_index=chapter_index,
                    page_number=chapter_index + 2,
                    context=context,
                    match_index=match_index,
                )
            )
            if len(results) >= limit:
                return results
    return results


class ReadingSession:
    """Tracks the current page of one book and re-paginates on layout changes."""

    def __init__(
        self,
        content: str,
        config: ReaderConfig | None = None,
        calculator: PageCalculator | None = None,
        start_page: int = 1,
    ):
        self.content = content
        # Own copy; reflow changes it
        self.config = dataclasses.replace(config) if config is not None else ReaderConfig()
        self.calculator = calculator or PageCalculator(
            cache=PageCache(self.config.cache_entries)
        )
        self.result = self.calculator.calculate_pages(content, self.config.layout())
        self.current_page = self._clamp(start_page)

    @property
    def total_pages(self) -> int:
        return self.result.total_pages

    def _clamp(self, page: int) -> int:
        return min(max(page, 1), self.total_pages)

    @property
    def current_page_content(self) -> str:
        return self.result.pages[self.current_page - 1].content

    def next_page(self) -> bool:
        """Advance one page. Returns False at the last page."""
        if self.current_page >= self.total_pages:
            return False
        self.current_page += 1
        return True

    def previous_page(self) -> bool:
        """Go back one page. Returns False at the first page."""
        if self.current_page <= 1:
            return False
        self.current_page -= 1
        return True

    def go_to_page(self, page_number: int) -> int:
        """Jump to a page, clamped to the book. Returns the page reached."""
        self.current_page = self._clamp(page_number)
        return self.current_page

    def go_to_percentage(self, percentage: float) -> int:
        """Jump to a position given as a percentage of the book."""
        return self.go_to_page(int(percentage / 100 * self.total_pages))

    def progress_percentage(self) -> int:
        return int(self.current_page / self.total_pages * 100)

    def _reflow(self) -> None:
        old_page, old_total = self.current_page, self.total_pages
        self.result = self.calculator.calculate_pages(self.content, self.config.layout())
        self.current_page = remap_page(old_page, old_total, self.total_pages)
        log.debug(
            "Reflowed page %d/%d to %d/%d",
            old_page,
            old_total,
            self.current_page,
            self.total_pages,
        )

    def change_font_size(self, font_size: float) -> int:
        """Re-paginate the full content at a new font size, keeping relative position."""
        self.config.font_size = font_size
        self._reflow()
        return self.current_page

    def update_screen_metrics(self, width: int, height: int, density: float) -> int:
        """Re-paginate for new screen dimensions, keeping relative position."""
        self.config.screen_width = width
        self.config.screen_height = height
        self.config.density = density
        self._reflow()
        return self.current_page

    def page_statistics(self) -> PageStatistics:
        page = self.result.pages[self.current_page - 1]
        return PageStatistics(
            words=page.word_count,
            characters=page.character_count,
            reading_minutes=estimate_reading_time(
                page.word_count, self.config.words_per_minute
            ),
        )

    def estimate_time_left(self) -> int:
        """Minutes left at an average page length."""
        pages_left = self.total_pages - self.current_page
        return pages_left * AVERAGE_WORDS_PER_PAGE // self.config.words_per_minute

    def search(self, query: str, limit: int = MAX_SEARCH_RESULTS) -> list[SearchResult]:
        return search_pages(self.result, query, limit)
