# facelabel/core/experiments.py
"""
Experiment dimensions, the mixed-radix counter that enumerates their combinations,
and the builder that turns the current clash set into an ExperimentSpace.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import prod
from typing import ClassVar, Iterable, Sequence, Union

from facelabel.core.config import LabelingConfig
from facelabel.core.types import Label

logger = logging.getLogger(__name__)


@dataclass
class PositionDimension:
    label_id: int
    options: tuple[str, ...]
    index: int = 0
    axis: ClassVar[str] = "position"

    @property
    def value(self) -> str:
        return self.options[self.index]

    def __len__(self) -> int:
        return len(self.options)


@dataclass
class NumRowsDimension:
    label_id: int
    options: tuple[int, ...]
    index: int = 0
    axis: ClassVar[str] = "num_rows"

    @property
    def value(self) -> int:
        return self.options[self.index]

    def __len__(self) -> int:
        return len(self.options)


@dataclass
class FontSizeDimension:
    """Global axis: multiplier applied to the solved base font size of every label."""
    options: tuple[float, ...]
    index: int = 0
    axis: ClassVar[str] = "font_size"

    @property
    def value(self) -> float:
        return self.options[self.index]

    def __len__(self) -> int:
        return len(self.options)


ExperimentDimension = Union[PositionDimension, NumRowsDimension, FontSizeDimension]


class MixedRadixCounter:
    """
    Odometer over digits with the given radices; digit 0 is the lowest order.
    Starts at all zeros. increment() returns False once every combination has been
    visited, leaving all digits back at zero.
    """

    def __init__(self, sizes: Sequence[int]) -> None:
        if any(s < 1 for s in sizes):
            raise ValueError(f"Radices must be >= 1, got {list(sizes)}")
        self.sizes = list(sizes)
        self.digits = [0] * len(self.sizes)
        self.changed: list[int] = []
        self.exhausted = False

    @property
    def combinations(self) -> int:
        return prod(self.sizes) if self.sizes else 0

    def increment(self) -> bool:
        self.changed = []
        for i, size in enumerate(self.sizes):
            if self.digits[i] + 1 < size:
                self.digits[i] += 1
                self.changed.append(i)
                return True
            if self.digits[i] != 0:
                self.digits[i] = 0
                self.changed.append(i)
        self.exhausted = True
        return False


class ExperimentSpace:
    """
    Per-label dimensions for the labels owned by one search level, in label order,
    then the optional global font size dimension. Odometer order is exactly that:
    first label's position, first label's num_rows, next label, ..., font size.
    """

    def __init__(
        self,
        label_dimensions: dict[int, list[ExperimentDimension]],
        font_size: FontSizeDimension | None = None,
    ) -> None:
        self.label_dimensions = label_dimensions
        self.font_size = font_size
        self.dimensions: list[ExperimentDimension] = [
            d for dims in label_dimensions.values() for d in dims
        ]
        if font_size is not None:
            self.dimensions.append(font_size)
        self.counter = MixedRadixCounter([len(d) for d in self.dimensions])

    @property
    def owned_ids(self) -> frozenset[int]:
        return frozenset(self.label_dimensions)

    @property
    def is_empty(self) -> bool:
        return not self.dimensions

    @property
    def exhausted(self) -> bool:
        return self.counter.exhausted

    @property
    def combinations(self) -> int:
        return self.counter.combinations

    def advance(self) -> list[ExperimentDimension]:
        """
        One odometer step. Returns the dimensions whose value changed (carries
        included). On exhaustion every dimension is back at option 0 and
        self.exhausted is set.
        """
        self.counter.increment()
        changed = []
        for i in self.counter.changed:
            dim = self.dimensions[i]
            dim.index = self.counter.digits[i]
            changed.append(dim)
        return changed


def _seeded(current, configured: Iterable) -> tuple:
    """Current value first, then the configured options in order without repeats."""
    out = [current]
    for opt in configured:
        if opt not in out:
            out.append(opt)
    return tuple(out)


def build_experiment_space(
    labels: Sequence[Label],
    owned_ids: Iterable[int],
    config: LabelingConfig,
    current_multiplier: float = 1.0,
    include_font_size: bool = True,
) -> ExperimentSpace:
    """
    Dimensions for every enabled axis of every owned label (label order), plus the
    global font size multiplier when enabled and include_font_size. Axes with a
    single option contribute nothing; no owned labels gives an empty space.
    """
    owned = set(owned_ids)
    label_dimensions: dict[int, list[ExperimentDimension]] = {}
    if not owned:
        return ExperimentSpace(label_dimensions)

    for label in labels:
        if label.label_id not in owned:
            continue
        dims: list[ExperimentDimension] = []
        if config.axis_enabled("position"):
            options = _seeded(label.position, config.position_options)
            if len(options) > 1:
                dims.append(PositionDimension(label.label_id, options))
        if config.axis_enabled("num_rows"):
            options = _seeded(label.num_rows, config.num_rows_options)
            if len(options) > 1:
                dims.append(NumRowsDimension(label.label_id, options))
        if dims:
            label_dimensions[label.label_id] = dims

    font_dim = None
    if include_font_size and config.axis_enabled("font_size"):
        options = _seeded(current_multiplier, config.font_size_multipliers)
        if len(options) > 1:
            font_dim = FontSizeDimension(options)

    space = ExperimentSpace(label_dimensions, font_dim)
    logger.debug(
        "experiment space: %d dimensions, %d combinations",
        len(space.dimensions),
        space.combinations,
    )
    return space
