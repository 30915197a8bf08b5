# facelabel/core/layout.py
"""
Per-photo label layout: choose the font size, create one label per named person,
check for clashes and optimise when enabled.
All state is created here per call; nothing carries over between photos.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from facelabel.core.clash import evaluate_labels
from facelabel.core.config import LabelingConfig
from facelabel.core.error_codes import LOOP_LIMIT_REACHED, NO_NAMED_PEOPLE, SEARCH_SPACE_EXHAUSTED, user_message
from facelabel.core.font_size import determine_font_size
from facelabel.core.optimizer import optimise_labels
from facelabel.core.placement import LabelPlacer, create_labels
from facelabel.core.text_metrics import TextMetricsPort
from facelabel.core.types import Person, PhotoContext, PhotoLayout

logger = logging.getLogger(__name__)


def run_photo_layout(
    context: PhotoContext,
    persons: Sequence[Person],
    config: LabelingConfig,
    metrics: TextMetricsPort,
    photo_id: str = "photo",
    should_stop: Callable[[], bool] | None = None,
) -> PhotoLayout:
    """
    Lay out labels for one photo. Raises TextMetricsUnavailable when no text can be
    measured at all; every other degradation is reported in the result's warnings.
    """
    persons = list(persons)
    named = [p for p in persons if p.name and p.name.strip()]
    if not named:
        logger.info("%s: no named people", photo_id)
        return PhotoLayout(
            photo_id=photo_id,
            context=context,
            persons=persons,
            labels=[],
            font_size=config.initial_font_size,
            status="no_labels",
            warnings=[user_message(NO_NAMED_PEOPLE)],
        )

    font_size = determine_font_size(context, persons, config, metrics)
    placer = LabelPlacer(context, config, metrics)
    labels = create_labels(persons, placer, font_size)

    if not config.auto_optimise:
        logger.info("%s: label positions fixed", photo_id)
        report = evaluate_labels(labels, persons, context.usable)
        return PhotoLayout(
            photo_id=photo_id,
            context=context,
            persons=persons,
            labels=labels,
            font_size=font_size,
            status="not_optimised",
            total_overlap_area=report.total_area,
            warnings=list(placer.warnings),
        )

    result = optimise_labels(labels, persons, placer, font_size, should_stop=should_stop)
    warnings = list(placer.warnings)
    if result.status == "loop_limit_reached":
        warnings.append(user_message(LOOP_LIMIT_REACHED))
    elif result.status == "space_exhausted":
        warnings.append(user_message(SEARCH_SPACE_EXHAUSTED))

    logger.info(
        "%s: %d labels, status %s, %d passes, overlap area %.0f",
        photo_id,
        len(labels),
        result.status,
        result.iterations,
        result.total_overlap_area,
    )
    return PhotoLayout(
        photo_id=photo_id,
        context=context,
        persons=persons,
        labels=labels,
        font_size=result.font_size,
        status=result.status,
        iterations=result.iterations,
        total_overlap_area=result.total_overlap_area,
        used_best_config=result.used_best_config,
        warnings=warnings,
    )
