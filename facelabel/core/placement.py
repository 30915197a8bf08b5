# facelabel/core/placement.py
"""
Label placement: rendered size of the wrapped text, anchor relative to the face,
clamp into the usable image area. One LabelPlacer per photo; it caches
measurements so repeated experiments do not re-query the oracle.
"""

from __future__ import annotations

import logging
from typing import Sequence

from facelabel.core.config import LabelingConfig
from facelabel.core.geometry import Rect, clamp_rect
from facelabel.core.text_metrics import (
    TextMeasurementError,
    TextMetricsPort,
    TextMetricsUnavailable,
)
from facelabel.core.types import Alignment, Label, LabelPlacement, Person, PhotoContext
from facelabel.core.wrap import wrapped_text

logger = logging.getLogger(__name__)


def anchor_label(person_rect: Rect, position: str, w: int, h: int) -> tuple[int, int, Alignment]:
    """Unclamped top-left corner and text alignment for a w x h label at position."""
    p = person_rect
    if position == "below":
        return p.x + p.w // 2 - w // 2, p.y + p.h, "center"
    if position == "above":
        return p.x + p.w // 2 - w // 2, p.y - h, "center"
    if position == "left":
        return p.x - w, p.y + p.h // 2 - h // 2, "right"
    if position == "right":
        return p.x + p.w, p.y + p.h // 2 - h // 2, "left"
    logger.error("Unknown label position: %r", position)
    return p.x, p.y, "center"


class LabelPlacer:
    """Computes and caches label placements for one photo."""

    def __init__(
        self,
        context: PhotoContext,
        config: LabelingConfig,
        metrics: TextMetricsPort,
    ) -> None:
        self.context = context
        self.config = config
        self.metrics = metrics
        self._sizes: dict[tuple[str, int], tuple[int, int]] = {}
        self.measure_calls = 0
        self.warnings: list[str] = []

    def measure(self, text: str, font_size: int) -> tuple[int, int]:
        key = (text, font_size)
        if key not in self._sizes:
            self.measure_calls += 1
            self._sizes[key] = self.metrics.measure_text(
                text, self.config.font_family, font_size, self.config.font_stroke_width
            )
        return self._sizes[key]

    def place(self, label: Label) -> LabelPlacement:
        """
        Recompute label.placement. If the size cannot be measured the previous
        placement is kept; a label that was never placed raises TextMetricsUnavailable.
        """
        if label.size is None:
            text = wrapped_text(label.text, label.num_rows)
            try:
                label.size = self.measure(text, label.font_size)
            except TextMeasurementError as e:
                label.stale = False
                if label.placement is None:
                    raise TextMetricsUnavailable(f"Cannot size label {label.text!r}: {e}") from e
                msg = f"Label {label.text!r} kept previous placement: {e}"
                logger.warning(msg)
                self.warnings.append(msg)
                return label.placement
        w, h = label.size
        x, y, align = anchor_label(label.person.rect, label.position, w, h)
        rect = clamp_rect(Rect(x, y, w, h), self.context.bounds, self.context.margin)
        label.placement = LabelPlacement(rect=rect, align=align)
        label.stale = False
        return label.placement

    def ensure_placed(self, label: Label) -> LabelPlacement:
        if label.stale or label.placement is None:
            return self.place(label)
        return label.placement


def create_labels(
    persons: Sequence[Person],
    placer: LabelPlacer,
    font_size: int,
) -> list[Label]:
    """One label per named person, at the configured default format; ids follow input order."""
    config = placer.config
    labels: list[Label] = []
    for person in persons:
        if not person.name or not person.name.strip():
            continue
        label = Label(
            label_id=len(labels),
            person=person,
            text=person.name,
            position=config.default_position,
            num_rows=config.default_num_rows,
            font_size=font_size,
        )
        placer.place(label)
        logger.debug("label %r at %s", label.text, label.rect)
        labels.append(label)
    if not labels:
        logger.info("No named people; no labels created.")
    return labels
