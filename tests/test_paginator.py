from __future__ import annotations

import asyncio

import pytest

from ebook_reader.cache.memory import PageCache
from ebook_reader.core.measurement import AverageWidthMeasurer
from ebook_reader.core.paginator import (
    PLACEHOLDER_TEXT,
    PageCalculator,
    calculate_layout,
    create_page,
    estimate_reading_time,
    remap_page,
    wrap_paragraph,
)
from ebook_reader.models.pagination import LayoutConfiguration


def test_calculate_layout(small_layout: LayoutConfiguration) -> None:
    layout = calculate_layout(small_layout)
    assert layout.available_width == 100
    assert layout.available_height == 100
    assert layout.lines_per_page == 10
    assert layout.chars_per_line == 16


def test_default_layout_metrics() -> None:
    layout = calculate_layout(LayoutConfiguration.default())
    assert layout.available_width == 1080 - 2 * 48
    assert layout.line_height == pytest.approx(16 * 1.4 * 3)
    assert layout.lines_per_page == 27


def test_wrap_paragraph() -> None:
    measure = lambda text: len(text) * 6.0  # noqa: E731
    assert wrap_paragraph("aaaa bbbb cccc dddd eeee ffff", measure, 100) == [
        "aaaa bbbb cccc",
        "dddd eeee ffff",
    ]
    assert wrap_paragraph("   ", measure, 100) == [""]
    # A word wider than the line still gets its own line
    assert wrap_paragraph("x " + "w" * 40 + " y", measure, 100) == ["x", "w" * 40, "y"]


def test_single_line_paragraphs_fill_line_budget(small_layout: LayoutConfiguration) -> None:
    content = "\n".join(f"w{i}" for i in range(50))
    result = PageCalculator().calculate_pages(content, small_layout)

    assert result.total_pages == 5
    assert [page.page_number for page in result.pages] == [1, 2, 3, 4, 5]
    assert result.pages[0].content == " ".join(f"w{i}" for i in range(10))
    assert all(page.word_count == 10 for page in result.pages)
    assert result.total_words == 50
    assert result.configuration == small_layout


def test_multi_line_paragraph_counts_separator_line(small_layout: LayoutConfiguration) -> None:
    # Each paragraph wraps to two lines plus a separator line
    paragraph = "aaaa bbbb cccc dddd eeee ffff"
    content = "\n\n".join([paragraph] * 4)
    result = PageCalculator().calculate_pages(content, small_layout)

    assert result.total_pages == 2
    assert result.pages[0].word_count == 18
    assert result.pages[1].word_count == 6


def test_long_paragraph_breaks_mid_paragraph(small_layout: LayoutConfiguration) -> None:
    # 25 lines of one word each
    content = " ".join("x" * 15 for _ in range(25))
    result = PageCalculator().calculate_pages(content, small_layout)

    assert [page.word_count for page in result.pages] == [10, 10, 5]


def test_empty_content_yields_placeholder_page(small_layout: LayoutConfiguration) -> None:
    for content in ("", "   \n\n  \n"):
        result = PageCalculator().calculate_pages(content, small_layout)
        assert result.total_pages == 1
        assert result.pages[0].content == PLACEHOLDER_TEXT


def test_degenerate_layout_yields_placeholder_page(small_layout: LayoutConfiguration) -> None:
    too_short = small_layout.model_copy(update={"screen_height": 5})
    too_narrow = small_layout.model_copy(update={"margin_horizontal": 60})
    for config in (too_short, too_narrow):
        result = PageCalculator().calculate_pages("some words here", config)
        assert [page.content for page in result.pages] == [PLACEHOLDER_TEXT]


def test_results_are_cached_per_content_and_configuration(
    small_layout: LayoutConfiguration,
) -> None:
    calculator = PageCalculator(cache=PageCache(max_entries=1))
    first = calculator.calculate_pages("hello world", small_layout)
    assert calculator.calculate_pages("hello world", small_layout) is first
    assert calculator.cache_size() == 1

    bigger = small_layout.with_font_size(20)
    calculator.calculate_pages("hello world", bigger)
    assert calculator.cache_size() == 1
    assert calculator.calculate_pages("hello world", small_layout) is not first
    assert calculator.clear_cache() == 1
    assert calculator.cache_size() == 0


def test_create_cache_key() -> None:
    config = LayoutConfiguration.default()
    key = PageCalculator.create_cache_key("text", config)
    assert key == PageCalculator.create_cache_key("text", LayoutConfiguration.default())
    assert key != PageCalculator.create_cache_key("text!", config)
    assert key != PageCalculator.create_cache_key("text", config.with_font_size(18))


def test_larger_font_gives_more_pages() -> None:
    content = "\n\n".join("Lorem ipsum dolor sit amet consectetur " * 5 for _ in range(40))
    calculator = PageCalculator(AverageWidthMeasurer())
    config = LayoutConfiguration.default()
    small = calculator.calculate_pages(content, config)
    large = calculator.calculate_pages(content, config.with_font_size(24))
    assert large.total_pages > small.total_pages
    assert large.total_words == small.total_words


def test_calculate_pages_async(small_layout: LayoutConfiguration) -> None:
    result = asyncio.run(PageCalculator().calculate_pages_async("a b c", small_layout))
    assert result.pages[0].content == "a b c"


def test_create_page_counts() -> None:
    page = create_page(3, "two words")
    assert (page.page_number, page.word_count, page.character_count) == (3, 2, 9)


@pytest.mark.parametrize(
    ("words", "wpm", "minutes"),
    [(1000, 200, 5), (1001, 200, 6), (0, 200, 0), (250, 250, 1)],
)
def test_estimate_reading_time(words: int, wpm: int, minutes: int) -> None:
    assert estimate_reading_time(words, wpm) == minutes
    assert PageCalculator().estimate_reading_time(words, wpm) == minutes


@pytest.mark.parametrize(
    ("old_page", "old_total", "new_total", "expected"),
    [
        (10, 100, 50, 5),
        (1, 100, 50, 1),
        (100, 100, 50, 50),
        (5, 10, 20, 9),
        (3, 3, 1, 1),
        (1, 0, 10, 1),
    ],
)
def test_remap_page(old_page: int, old_total: int, new_total: int, expected: int) -> None:
    assert remap_page(old_page, old_total, new_total) == expected
