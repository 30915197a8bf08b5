# facelabel/core/clash.py
"""
Clash detection between placed labels, other labels and face regions.
The summed overlap area ranks partial solutions in the optimiser.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from facelabel.core.geometry import Rect, exceeds, overlap_area, rects_overlap
from facelabel.core.types import Label, Person

logger = logging.getLogger(__name__)


@dataclass
class ClashReport:
    """Result of evaluating every label once."""
    total_area: float
    clashing_ids: list[int]

    @property
    def clash_free(self) -> bool:
        return not self.clashing_ids


def overlap_check(a: Rect, b: Rect) -> tuple[bool, int]:
    """(overlap?, overlap area). Symmetric in a and b."""
    if not rects_overlap(a, b):
        return False, 0
    return True, overlap_area(a, b)


def check_label_clash(
    label: Label,
    labels: Sequence[Label],
    persons: Sequence[Person],
    usable: Rect,
) -> tuple[bool, float]:
    """
    Clash of one placed label against every other label and every person.
    A label larger than the usable area always clashes; the part of it outside
    the usable area is added to its area.
    """
    rect = label.rect
    if rect is None:
        return True, 0.0
    clash = False
    area = 0.0
    for other in labels:
        if other is label or other.rect is None:
            continue
        hit, a = overlap_check(rect, other.rect)
        if hit:
            clash = True
            area += a
            logger.debug("label %r clashes with label %r (%d px)", label.text, other.text, a)
    for person in persons:
        hit, a = overlap_check(rect, person.rect)
        if hit:
            clash = True
            area += a
            logger.debug("label %r clashes with person %r (%d px)", label.text, person.name, a)
    if exceeds(rect, usable):
        clash = True
        area += rect.area - overlap_area(rect, usable)
        logger.debug("label %r is larger than the usable area", label.text)
    return clash, area


def evaluate_labels(
    labels: Sequence[Label],
    persons: Sequence[Person],
    usable: Rect,
) -> ClashReport:
    """Set clash flags on every label; return total area and clashing ids in label order."""
    total = 0.0
    clashing: list[int] = []
    for label in labels:
        clash, area = check_label_clash(label, labels, persons, usable)
        label.clash = clash
        label.clash_area = area
        total += area
        if clash:
            clashing.append(label.label_id)
    return ClashReport(total_area=total, clashing_ids=clashing)
