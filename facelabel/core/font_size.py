# facelabel/core/font_size.py
"""
Font size selection. The size-to-width relation depends on the font and is only
known by asking the text measurement oracle, so the size is found by search:
a coarse doubling/halving phase followed by bisection-style refinement.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Sequence

from facelabel.core.config import (
    FONT_SIZE_COARSE_LIMIT,
    FONT_SIZE_DELTA_LIMIT,
    FONT_SIZE_REFINE_LIMIT,
    MIN_FONT_SIZE,
    LabelingConfig,
)
from facelabel.core.text_metrics import (
    TextMeasurementError,
    TextMetricsPort,
    TextMetricsUnavailable,
)
from facelabel.core.types import Person, PhotoContext

logger = logging.getLogger(__name__)


def average_region_size(persons: Sequence[Person]) -> float | None:
    """Mean of (w + h) / 2 over all regions; None if there are none."""
    if not persons:
        return None
    total = sum(p.rect.w + p.rect.h for p in persons)
    return total / (2 * len(persons))


def target_label_width(
    image_width: float,
    region_size: float,
    config: LabelingConfig,
) -> float:
    """
    Interpolate the label-width ratio between the small-region and large-region anchors.
    image_width / region_size is normalised between the two image-ratio anchors and
    clamped to [0, 1]; 1 means small regions. Result is capped at the image width.
    """
    ratio = image_width / region_size
    span = config.image_width_to_region_ratio_small - config.image_width_to_region_ratio_large
    if span <= 0:
        norm = 1.0 if ratio >= config.image_width_to_region_ratio_small else 0.0
    else:
        norm = (ratio - config.image_width_to_region_ratio_large) / span
    norm = min(1.0, max(0.0, norm))
    label_ratio = (
        norm * (config.label_width_to_region_ratio_small - config.label_width_to_region_ratio_large)
        + config.label_width_to_region_ratio_large
    )
    return min(region_size * label_ratio, float(image_width))


def solve_font_size(
    measure_width: Callable[[int], float],
    target_width: float,
    start_size: int,
    delta_limit: int = FONT_SIZE_DELTA_LIMIT,
    refine_limit: int = FONT_SIZE_REFINE_LIMIT,
    coarse_limit: int = FONT_SIZE_COARSE_LIMIT,
    min_size: int = MIN_FONT_SIZE,
) -> int:
    """
    Search for the integer size whose measured width approximates target_width.
    measure_width(size) may raise TextMeasurementError: on the first call that is
    re-raised as TextMetricsUnavailable, later failures end the search at the last
    size that measured successfully.
    """
    size = max(min_size, int(start_size))
    try:
        width = measure_width(size)
    except TextMeasurementError as e:
        raise TextMetricsUnavailable(f"Cannot measure text at size {size}: {e}") from e
    last_good = size
    increasing = width < target_width
    logger.debug("font size start %d: width %.1f target %.1f", size, width, target_width)

    # coarse: double on the way up, halve on the way down
    delta = 0
    flipped = False
    for _ in range(coarse_limit):
        delta = size if increasing else -(size // 2)
        if size + delta < min_size:
            delta = min_size - size
        if delta == 0:
            break
        size += delta
        try:
            width = measure_width(size)
        except TextMeasurementError as e:
            logger.warning("Font size search aborted at %d: %s", size, e)
            return last_good
        last_good = size
        now_increasing = width < target_width
        logger.debug("font size coarse %d: width %.1f", size, width)
        if now_increasing != increasing:
            increasing = now_increasing
            flipped = True
            break
    if not flipped:
        return last_good

    # refine: half the previous step, signed by the current trend
    steps = 0
    while abs(delta) >= delta_limit and steps < refine_limit:
        step = int(math.ceil(abs(delta) / 2))
        delta = step if increasing else -step
        if size + delta < min_size:
            delta = min_size - size
        size += delta
        try:
            width = measure_width(size)
        except TextMeasurementError as e:
            logger.warning("Font size refinement aborted at %d: %s", size, e)
            return last_good
        last_good = size
        increasing = width < target_width
        steps += 1
        logger.debug("font size refine %d: width %.1f", size, width)
    return last_good


def determine_font_size(
    context: PhotoContext,
    persons: Sequence[Person],
    config: LabelingConfig,
    metrics: TextMetricsPort,
) -> int:
    """Base font size for one photo: fixed, or solved against the target label width."""
    if config.font_size_mode == "fixed":
        logger.debug("fixed font size %d", config.fixed_font_size)
        return max(MIN_FONT_SIZE, config.fixed_font_size)

    region_size = average_region_size(persons)
    if not region_size or region_size <= 0:
        return max(MIN_FONT_SIZE, config.initial_font_size)

    target = target_label_width(context.image_width, region_size, config)
    logger.debug("target label width %.1f (region size %.1f)", target, region_size)

    def measure_width(size: int) -> float:
        w, _ = metrics.measure_text(config.sample_text, config.font_family, size, config.font_stroke_width)
        return float(w)

    size = solve_font_size(
        measure_width,
        target,
        config.initial_font_size,
        delta_limit=config.font_size_delta_limit,
        refine_limit=config.font_size_refine_limit,
        coarse_limit=config.font_size_coarse_limit,
    )
    logger.info("Chosen font size: %d", size)
    return size
