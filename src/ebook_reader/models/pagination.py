"""Data models for pagination and reading state."""

from pydantic import BaseModel, ConfigDict


class LayoutConfiguration(BaseModel):
    """Viewport and font settings that determine page layout."""

    model_config = ConfigDict(frozen=True)

    screen_width: int
    screen_height: int
    font_size: float
    line_height: float
    margin_horizontal: int
    margin_vertical: int
    density: float

    @classmethod
    def from_screen_metrics(
        cls,
        screen_width: int,
        screen_height: int,
        font_size: float,
        density: float,
        margin_dp: int = 16,
    ) -> "LayoutConfiguration":
        """Build a configuration from raw screen metrics.

        Margins are given in density-independent units and converted to
        pixels; the line height is 1.4 times the scaled font size.
        """
        margin_px = int(margin_dp * density)
        return cls(
            screen_width=screen_width,
            screen_height=screen_height,
            font_size=font_size,
            line_height=font_size * 1.4 * density,
            margin_horizontal=margin_px,
            margin_vertical=margin_px,
            density=density,
        )

    @classmethod
    def default(cls, density: float = 3.0) -> "LayoutConfiguration":
        """Configuration for a 1080x1920 screen at 16pt."""
        return cls.from_screen_metrics(
            screen_width=1080,
            screen_height=1920,
            font_size=16.0,
            density=density,
        )

    def with_font_size(self, font_size: float) -> "LayoutConfiguration":
        """Copy of this configuration with a new font size and line height."""
        return self.model_copy(
            update={
                "font_size": font_size,
                "line_height": font_size * 1.4 * self.density,
            }
        )


class Page(BaseModel):
    """Single page of laid-out text."""

    page_number: int
    content: str
    word_count: int
    character_count: int


class PaginationResult(BaseModel):
    """Pages produced for one content/configuration pair."""

    pages: list[Page]
    total_pages: int
    total_words: int
    configuration: LayoutConfiguration


class SearchResult(BaseModel):
    """Occurrence of a search query inside a book."""

    chapter_title: str
    chapter_index: int
    page_number: int
    context: str
    match_index: int


class PageStatistics(BaseModel):
    """Word and timing figures for the page being read."""

    words: int
    characters: int
    reading_minutes: int
