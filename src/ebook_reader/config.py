"""Reader configuration and themes."""

from dataclasses import dataclass
from enum import Enum

from ebook_reader.models.pagination import LayoutConfiguration


class ReadingTheme(str, Enum):
    """Colour schemes for the styled document view."""

    LIGHT = "light"
    DARK = "dark"
    SEPIA = "sepia"
    BLACK = "black"

    @property
    def display_name(self) -> str:
        return self.name.title()

    @property
    def colors(self) -> tuple[str, str, str]:
        """(background, text, surface) colours as CSS hex strings."""
        return _THEME_COLORS[self]


_THEME_COLORS = {
    ReadingTheme.LIGHT: ("#FFFFFF", "#000000", "#F5F5F5"),
    ReadingTheme.DARK: ("#121212", "#E0E0E0", "#1E1E1E"),
    ReadingTheme.SEPIA: ("#F4F1EA", "#5D4E37", "#EAE4D3"),
    ReadingTheme.BLACK: ("#000000", "#E0E0E0", "#0D0D0D"),
}


@dataclass
class ReaderConfig:
    """Reading preferences and screen metrics."""

    font_size: float = 16.0
    theme: ReadingTheme = ReadingTheme.LIGHT
    screen_width: int = 1080
    screen_height: int = 1920
    density: float = 3.0
    margin_dp: int = 16
    words_per_minute: int = 200
    cache_entries: int | None = 32  # None = unbounded

    def layout(self) -> LayoutConfiguration:
        """Layout configuration for the current preferences."""
        return LayoutConfiguration.from_screen_metrics(
            screen_width=self.screen_width,
            screen_height=self.screen_height,
            font_size=self.font_size,
            density=self.density,
            margin_dp=self.margin_dp,
        )
