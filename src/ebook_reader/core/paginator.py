"""Split text into measured pages for a layout configuration."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import math
import re
from dataclasses import dataclass

from ebook_reader.cache.memory import DEFAULT_MAX_ENTRIES, PageCache
from ebook_reader.core.measurement import (
    AVERAGE_CHAR_WIDTH,
    AverageWidthMeasurer,
    MeasureFn,
    TextMeasurer,
    font_pixel_size,
)
from ebook_reader.models.pagination import LayoutConfiguration, Page, PaginationResult

log = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "No content available"
DEFAULT_WORDS_PER_MINUTE = 200

_PARAGRAPH_SPLIT_RE = re.compile(r"\n\n|\n")


@dataclass
class LayoutMetrics:
    """Page geometry derived from a configuration."""

    available_width: float
    available_height: float
    line_height: float
    lines_per_page: int
    chars_per_line: int


def calculate_layout(config: LayoutConfiguration) -> LayoutMetrics:
    """Derive the text area and line budget from a configuration."""
    available_width = config.screen_width - config.margin_horizontal * 2
    available_height = config.screen_height - config.margin_vertical * 2

    if config.line_height > 0:
        lines_per_page = int(available_height / config.line_height)
    else:
        lines_per_page = 0

    # Rough estimate only; wrapping uses measured widths
    char_width = font_pixel_size(config) * AVERAGE_CHAR_WIDTH
    chars_per_line = int(available_width / char_width) if char_width > 0 else 0

    return LayoutMetrics(
        available_width=available_width,
        available_height=available_height,
        line_height=config.line_height,
        lines_per_page=max(lines_per_page, 0),
        chars_per_line=max(chars_per_line, 0),
    )


def wrap_paragraph(paragraph: str, measure: MeasureFn, max_width: float) -> list[str]:
    """Greedily wrap a paragraph into lines no wider than ``max_width``.

    A word wider than the line on its own still gets a line to itself.
    Blank paragraphs yield a single empty line.
    """
    if not paragraph.strip():
        return [""]

    lines = []
    current = ""
    for word in paragraph.split():
        candidate = f"{current} {word}" if current else word
        if not current or measure(candidate) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word

    if current:
        lines.append(current)
    return lines or [""]


def create_page(page_number: int, content: str) -> Page:
    """Build a page with its word and character counts."""
    words = [w for w in content.split() if w.strip()]
    return Page(
        page_number=page_number,
        content=content,
        word_count=len(words),
        character_count=len(content),
    )


def estimate_reading_time(
    word_count: int, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE
) -> int:
    """Minutes needed to read ``word_count`` words, rounded up."""
    return math.ceil(word_count / words_per_minute)


def remap_page(old_page: int, old_total: int, new_total: int) -> int:
    """Map a page number to the same relative position in a new page count."""
    if new_total < 1:
        return 1
    if old_total < 1:
        return 1
    progress = (old_page - 1) / old_total
    return min(max(int(progress * new_total + 1), 1), new_total)


class PageCalculator:
    """Paginate text against a layout, caching results per content and layout."""

    def __init__(
        self,
        measurer: TextMeasurer | None = None,
        cache: PageCache | None = None,
    ):
        self.measurer = measurer or AverageWidthMeasurer()
        self.cache = cache if cache is not None else PageCache(DEFAULT_MAX_ENTRIES)

    @staticmethod
    def create_cache_key(content: str, config: LayoutConfiguration) -> str:
        """Fingerprint of content and configuration."""
        digest = hashlib.sha256()
        digest.update(content.encode("utf-8", errors="surrogatepass"))
        digest.update(b"\0")
        digest.update(config.model_dump_json().encode("utf-8"))
        return digest.hexdigest()

    def calculate_pages(
        self, content: str, config: LayoutConfiguration
    ) -> PaginationResult:
        """Split content into pages; never returns an empty page list."""
        cache_key = self.create_cache_key(content, config)

        cached = self.cache.get(cache_key)
        if cached is not None:
            log.debug("Pagination cache hit %s", cache_key[:12])
            return cached

        layout = calculate_layout(config)
        measure = self.measurer.acquire(config)
        pages = self._split_into_pages(content, measure, layout)

        result = PaginationResult(
            pages=pages,
            total_pages=len(pages),
            total_words=sum(page.word_count for page in pages),
            configuration=config,
        )
        self.cache.put(cache_key, result)

        log.debug(
            "Paginated %d characters into %d pages (%d lines per page)",
            len(content),
            len(pages),
            layout.lines_per_page,
        )
        return result

    async def calculate_pages_async(
        self, content: str, config: LayoutConfiguration
    ) -> PaginationResult:
        """Run calculate_pages in a worker thread."""
        return await asyncio.to_thread(self.calculate_pages, content, config)

    def _split_into_pages(
        self,
        content: str,
        measure: MeasureFn,
        layout: LayoutMetrics,
    ) -> list[Page]:
        budget = layout.lines_per_page
        if budget < 1 or layout.available_width <= 0:
            return [create_page(1, PLACEHOLDER_TEXT)]

        pages: list[Page] = []
        buffer: list[str] = []
        line_count = 0

        def flush() -> None:
            nonlocal buffer, line_count
            page_text = "".join(buffer).strip()
            if page_text:
                pages.append(create_page(len(pages) + 1, page_text))
            buffer = []
            line_count = 0

        paragraphs = _PARAGRAPH_SPLIT_RE.split(content.replace("\r\n", "\n"))
        for paragraph in paragraphs:
            lines = wrap_paragraph(paragraph, measure, layout.available_width)

            if line_count + len(lines) > budget and buffer:
                flush()

            last = len(lines) - 1
            for i, line in enumerate(lines):
                if line_count >= budget:
                    flush()

                buffer.append(line + " ")
                line_count += 1

                # Blank separator line after a multi-line paragraph
                if i == last and last > 0:
                    buffer.append("\n")
                    line_count += 1

        if buffer:
            flush()

        return pages or [create_page(1, PLACEHOLDER_TEXT)]

    def clear_cache(self) -> int:
        """Drop all cached results. Returns number of entries cleared."""
        return self.cache.clear()

    def cache_size(self) -> int:
        return len(self.cache)

    def estimate_reading_time(
        self, word_count: int, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE
    ) -> int:
        return estimate_reading_time(word_count, words_per_minute)
