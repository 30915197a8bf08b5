# facelabel/core/optimizer.py
"""
Label layout optimisation: bounded depth-first search over experiment spaces.

Each search level owns the labels that were clashing when it started and walks
their option combinations with an odometer. Labels that start clashing as a side
effect of those changes are handed to a fresh nested level, so a level never
revisits decisions owned by an enclosing one. A global pass counter bounds the
whole search; when it runs out, or every space is exhausted, the best
configuration seen is restored.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Literal, Sequence

from facelabel.core.clash import ClashReport, evaluate_labels
from facelabel.core.config import MIN_FONT_SIZE
from facelabel.core.experiments import (
    ExperimentDimension,
    FontSizeDimension,
    NumRowsDimension,
    PositionDimension,
    build_experiment_space,
)
from facelabel.core.placement import LabelPlacer
from facelabel.core.types import Label, Person

logger = logging.getLogger(__name__)

SearchStatus = Literal["found", "loop_limit_reached", "space_exhausted", "stopped"]


@dataclass
class BestConfig:
    """Snapshot of the least-overlapping configuration seen so far."""
    score: float
    font_size: int
    multiplier: float
    formats: dict[int, tuple[str, int]] = field(default_factory=dict)


@dataclass
class OptimizationResult:
    status: SearchStatus
    iterations: int
    increments: int
    total_overlap_area: float
    font_size: int
    used_best_config: bool
    best: BestConfig | None = None


class OptimizationContext:
    """All mutable search state for one photo: label arena, counters, best config."""

    def __init__(
        self,
        labels: Sequence[Label],
        persons: Sequence[Person],
        placer: LabelPlacer,
        base_font_size: int,
        loop_limit: int | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> None:
        self.labels = list(labels)
        self.by_id = {label.label_id: label for label in self.labels}
        self.persons = list(persons)
        self.placer = placer
        self.config = placer.config
        self.usable = placer.context.usable
        self.base_font_size = base_font_size
        self.multiplier = 1.0
        self.font_size = base_font_size
        self.loop_limit = self.config.experiment_loop_limit if loop_limit is None else loop_limit
        self.should_stop = should_stop
        self.iteration = 0
        self.increments = 0
        self.best: BestConfig | None = None

    def evaluate(self) -> ClashReport:
        for label in self.labels:
            self.placer.ensure_placed(label)
        return evaluate_labels(self.labels, self.persons, self.usable)

    def step(self) -> ClashReport:
        """One pass: bump the counter and evaluate the current configuration."""
        self.iteration += 1
        report = self.evaluate()
        logger.debug(
            "pass %d: %d clashing, area %.0f",
            self.iteration,
            len(report.clashing_ids),
            report.total_area,
        )
        return report

    def budget_spent(self) -> bool:
        return self.iteration >= self.loop_limit

    def stop_requested(self) -> bool:
        return self.should_stop is not None and self.should_stop()

    def snapshot(self, score: float) -> BestConfig:
        return BestConfig(
            score=score,
            font_size=self.font_size,
            multiplier=self.multiplier,
            formats={l.label_id: (l.position, l.num_rows) for l in self.labels},
        )

    def record_best(self, report: ClashReport) -> None:
        if self.best is None or report.total_area < self.best.score:
            self.best = self.snapshot(report.total_area)

    def set_multiplier(self, multiplier: float) -> None:
        self.multiplier = multiplier
        self.font_size = max(MIN_FONT_SIZE, int(math.floor(self.base_font_size * multiplier)))
        for label in self.labels:
            label.set_format(font_size=self.font_size)
            label.clash = None

    def apply(self, changed: Sequence[ExperimentDimension]) -> None:
        for dim in changed:
            if isinstance(dim, PositionDimension):
                self.by_id[dim.label_id].set_format(position=dim.value)
            elif isinstance(dim, NumRowsDimension):
                self.by_id[dim.label_id].set_format(num_rows=dim.value)
            elif isinstance(dim, FontSizeDimension):
                self.set_multiplier(dim.value)
            else:
                raise TypeError(f"Unknown experiment dimension: {dim!r}")
            logger.debug("experiment %s -> %r", dim.axis, dim.value)

    def restore(self, best: BestConfig) -> None:
        self.multiplier = best.multiplier
        self.font_size = best.font_size
        for label in self.labels:
            position, num_rows = best.formats[label.label_id]
            label.set_format(position=position, num_rows=num_rows, font_size=best.font_size)


def _search(
    ctx: OptimizationContext,
    enclosing: frozenset[int],
    depth: int,
    report: ClashReport | None = None,
) -> SearchStatus:
    """
    One search level. report is the already evaluated current configuration when
    the level is entered from an enclosing one; None means evaluate first.
    """
    space = None
    owned: frozenset[int] = frozenset()
    while True:
        if report is None:
            if ctx.stop_requested():
                return "stopped"
            report = ctx.step()
            if report.clash_free:
                return "found"
            ctx.record_best(report)
            if ctx.budget_spent():
                return "loop_limit_reached"

        candidates = [lid for lid in report.clashing_ids if lid not in enclosing]
        if not candidates:
            logger.debug("depth %d: only enclosing labels clash; dead end", depth)
            return "space_exhausted"

        if space is None:
            owned = frozenset(candidates)
            space = build_experiment_space(
                ctx.labels,
                owned,
                ctx.config,
                current_multiplier=ctx.multiplier,
                include_font_size=(depth == 0),
            )
            if space.is_empty:
                logger.debug("depth %d: nothing to try", depth)
                return "space_exhausted"
            logger.debug(
                "depth %d: searching %d labels, %d combinations",
                depth,
                len(owned),
                space.combinations,
            )
        else:
            new_ids = [lid for lid in candidates if lid not in owned]
            if new_ids:
                logger.debug("depth %d: labels %s newly clashing; nested search", depth, new_ids)
                status = _search(ctx, enclosing | owned, depth + 1, report)
                if status != "space_exhausted":
                    return status

        changed = space.advance()
        ctx.increments += 1
        ctx.apply(changed)
        report = None
        if space.exhausted:
            logger.debug("depth %d: space exhausted", depth)
            return "space_exhausted"


def optimise_labels(
    labels: Sequence[Label],
    persons: Sequence[Person],
    placer: LabelPlacer,
    base_font_size: int,
    loop_limit: int | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> OptimizationResult:
    """
    Search label formats until nothing clashes, the pass budget is spent, or every
    combination has been tried. Labels are left in the returned configuration.
    """
    ctx = OptimizationContext(
        labels, persons, placer, base_font_size,
        loop_limit=loop_limit, should_stop=should_stop,
    )
    status = _search(ctx, frozenset(), 0)

    used_best = False
    if status == "found":
        logger.info("Clash-free layout found after %d passes", ctx.iteration)
    else:
        if status == "loop_limit_reached":
            logger.info("Experiment loop limit (%d) reached", ctx.loop_limit)
        elif status == "stopped":
            logger.info("Optimisation stopped after %d passes", ctx.iteration)
        else:
            logger.info("Experiment space exhausted after %d passes", ctx.iteration)
        if ctx.best is not None:
            logger.info("Falling back to best configuration (overlap area %.0f)", ctx.best.score)
            ctx.restore(ctx.best)
            used_best = True

    final = ctx.evaluate()
    return OptimizationResult(
        status=status,
        iterations=ctx.iteration,
        increments=ctx.increments,
        total_overlap_area=final.total_area,
        font_size=ctx.font_size,
        used_best_config=used_best,
        best=ctx.best,
    )
