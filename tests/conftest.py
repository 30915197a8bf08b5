# tests/conftest.py
"""
Shared fixtures: a monospace text-metrics fake so layout tests need no real fonts.
Width = longest line length * size * 0.6, height = number of lines * size.
"""

from __future__ import annotations

from typing import Callable

import pytest

from facelabel.core.config import LabelingConfig
from facelabel.core.text_metrics import TextMeasurementError


class FakeTextMetrics:
    def __init__(self) -> None:
        self.calls = 0

    def measure_text(self, text: str, font: str, point_size: int, stroke_width: int) -> tuple[int, int]:
        self.calls += 1
        if point_size < 1:
            raise TextMeasurementError(f"Invalid point size {point_size}")
        lines = text.split("\n")
        longest = max(len(line) for line in lines)
        return longest * point_size * 3 // 5, len(lines) * point_size


class FailingTextMetrics(FakeTextMetrics):
    """Succeeds for the first ok_calls measurements, then always fails."""

    def __init__(self, ok_calls: int) -> None:
        super().__init__()
        self.ok_calls = ok_calls

    def measure_text(self, text: str, font: str, point_size: int, stroke_width: int) -> tuple[int, int]:
        if self.calls >= self.ok_calls:
            self.calls += 1
            raise TextMeasurementError("font backend gone")
        return super().measure_text(text, font, point_size, stroke_width)


@pytest.fixture
def metrics() -> FakeTextMetrics:
    return FakeTextMetrics()


@pytest.fixture
def failing_metrics() -> Callable[[int], FailingTextMetrics]:
    return FailingTextMetrics


@pytest.fixture
def fixed_config() -> LabelingConfig:
    """Fixed 20px font, no global font axis: keeps expected rects easy to compute."""
    return LabelingConfig(
        font_size_mode="fixed",
        fixed_font_size=20,
        search_axes=("position", "num_rows"),
    )
