"""Text width measurement for line wrapping."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

from PIL import ImageFont

from ebook_reader.models.pagination import LayoutConfiguration

# Returns the rendered width of a line, in the same units as the viewport
MeasureFn = Callable[[str], float]

# Average glyph width as a fraction of the font size
AVERAGE_CHAR_WIDTH = 0.6


def font_pixel_size(config: LayoutConfiguration) -> float:
    """Font size scaled by display density."""
    return config.font_size * config.density


class TextMeasurer(ABC):
    """Source of measurement handles bound to a font configuration."""

    @abstractmethod
    def acquire(self, config: LayoutConfiguration) -> MeasureFn:
        """Return a width function with the configuration's font applied.

        The handle belongs to the caller for one batch of measurements;
        acquire a new one whenever the configuration changes.
        """
        pass


class AverageWidthMeasurer(TextMeasurer):
    """Estimate width from character count and an average glyph width."""

    def acquire(self, config: LayoutConfiguration) -> MeasureFn:
        char_width = font_pixel_size(config) * AVERAGE_CHAR_WIDTH
        return lambda text: len(text) * char_width


class PillowTextMeasurer(TextMeasurer):
    """Measure advance width with a Pillow font.

    Fonts are loaded once per pixel size and reused across handles.
    """

    def __init__(self, font_path: Path | None = None):
        self.font_path = font_path
        self._fonts: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}
        self._lock = threading.Lock()

    def _font(self, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        with self._lock:
            font = self._fonts.get(size)
            if font is None:
                if self.font_path is not None:
                    font = ImageFont.truetype(str(self.font_path), size=size)
                else:
                    font = ImageFont.load_default(size=size)
                self._fonts[size] = font
            return font

    def acquire(self, config: LayoutConfiguration) -> MeasureFn:
        font = self._font(max(1, round(font_pixel_size(config))))
        return font.getlength
