# facelabel/core/text_metrics.py
"""
Text measurement port and its Pillow adapter.
Sizes are rendered pixels; multi-line text uses '\\n' separators.
"""

from __future__ import annotations

import math
import warnings
from typing import Protocol


class TextMeasurementError(RuntimeError):
    """One measurement call failed."""


class TextMetricsUnavailable(RuntimeError):
    """No measurement could be made at all; fatal for the current photo."""


class TextMetricsPort(Protocol):
    """Anything that can report the rendered size of a piece of text."""

    def measure_text(
        self, text: str, font: str, point_size: int, stroke_width: int
    ) -> tuple[int, int]:
        """Return (width, height) in px. Raises TextMeasurementError on failure."""
        ...


_font_warning_emitted: set[str] = set()


def _load_font(font_family: str, point_size: int):
    """Load PIL ImageFont; fallback with warning if font not found."""
    from PIL import ImageFont

    size = max(1, int(point_size))
    candidates = [
        font_family,
        font_family + ".ttf",
        font_family.replace(" ", "") + ".ttf",
        "DejaVuSans.ttf",
        "arial.ttf",
        "Arial.ttf",
    ]
    for name in candidates:
        try:
            return ImageFont.truetype(name, size=size)
        except (OSError, IOError):
            continue
    if font_family not in _font_warning_emitted:
        _font_warning_emitted.add(font_family)
        warnings.warn(f"Font not found: {font_family!r}; using default.", UserWarning)
    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        # Pillow < 10.1 has no sized default font
        return ImageFont.load_default()


class PillowTextMetrics:
    """TextMetricsPort backed by Pillow's text bounding boxes."""

    def __init__(self) -> None:
        self._fonts: dict[tuple[str, int], object] = {}

    def _font(self, font: str, point_size: int):
        key = (font, int(point_size))
        if key not in self._fonts:
            self._fonts[key] = _load_font(font, point_size)
        return self._fonts[key]

    def measure_text(
        self, text: str, font: str, point_size: int, stroke_width: int
    ) -> tuple[int, int]:
        from PIL import Image, ImageDraw

        if point_size < 1:
            raise TextMeasurementError(f"Invalid point size {point_size}")
        try:
            pil_font = self._font(font, point_size)
            img = Image.new("RGB", (1, 1))
            draw = ImageDraw.Draw(img)
            bbox = draw.multiline_textbbox(
                (0, 0), text, font=pil_font, stroke_width=max(0, int(stroke_width)), align="center"
            )
        except (OSError, ValueError) as e:
            raise TextMeasurementError(f"Failed to measure {text!r}: {e}") from e
        w = int(math.ceil(bbox[2] - bbox[0]))
        h = int(math.ceil(bbox[3] - bbox[1]))
        return (w, h)
