# facelabel/core/config.py
"""
Central configuration for face label layout.
All tunable values live here; no magic numbers in other modules.
LabelingConfig is the per-photo snapshot handed to the core; its defaults are the
module constants below.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Enumerations -----
POSITIONS: tuple[str, ...] = ("below", "above", "left", "right")
"""Label position relative to its face region."""

SEARCH_AXES: tuple[str, ...] = ("position", "num_rows", "font_size")
"""Axis names accepted in search_axes."""

FONT_SIZE_MODES: tuple[str, ...] = ("dynamic", "fixed")

# ----- Font -----
DEFAULT_FONT_FAMILY: str = "DejaVu Sans"
FONT_COLOUR: str = "white"
FONT_STROKE_WIDTH: int = 1
"""Stroke width (px) passed to the text measurement oracle."""

# ----- Label defaults -----
DEFAULT_POSITION: str = "below"
DEFAULT_NUM_ROWS: int = 1
INITIAL_FONT_SIZE: int = 40
"""Starting point for the font size search, and the size used when no search runs."""

FIXED_FONT_SIZE: int = 40
"""Font size used when font_size_mode is 'fixed'."""

FONT_SIZE_MODE: str = "dynamic"

SAMPLE_TEXT: str = "Test Label"
"""Text measured by the font size solver."""

# ----- Image -----
IMAGE_MARGIN_PX: int = 5
"""Labels are kept this far inside the image (or crop) edges."""

# ----- Target label width anchors -----
IMAGE_WIDTH_TO_REGION_RATIO_SMALL: float = 20.0
"""Image width / average region size at which regions count as small."""

IMAGE_WIDTH_TO_REGION_RATIO_LARGE: float = 5.0
"""Image width / average region size at which regions count as large."""

LABEL_WIDTH_TO_REGION_RATIO_SMALL: float = 2.0
"""Target label width / region size for small regions."""

LABEL_WIDTH_TO_REGION_RATIO_LARGE: float = 0.5
"""Target label width / region size for large regions."""

# ----- Font size solver -----
FONT_SIZE_DELTA_LIMIT: int = 2
"""Refinement stops once the applied delta (px) falls below this."""

FONT_SIZE_REFINE_LIMIT: int = 10
"""Maximum refinement steps; guards against rounding oscillation."""

FONT_SIZE_COARSE_LIMIT: int = 16
"""Maximum doubling/halving steps before refinement starts."""

MIN_FONT_SIZE: int = 1

# ----- Experiments -----
POSITION_OPTIONS: tuple[str, ...] = ("below", "above", "left", "right")
NUM_ROWS_OPTIONS: tuple[int, ...] = (1, 2, 3, 4)
FONT_SIZE_MULTIPLIERS: tuple[float, ...] = (1.0, 0.75, 0.5, 0.25)
"""Global font size experiment, as multiples of the solved base size."""

DEFAULT_SEARCH_AXES: tuple[str, ...] = ("position", "num_rows", "font_size")

EXPERIMENT_LOOP_LIMIT: int = 100
"""Ceiling on optimisation passes per photo. See EXPERIMENT_LOOP_LIMIT_PRESETS."""

EXPERIMENT_LOOP_LIMIT_PRESETS: dict[str, int] = {
    "low": 50,
    "medium": 100,
    "high": 500,
    "very_high": 1000,
}

AUTO_OPTIMISE: bool = True
"""When False, labels stay at their default placement."""

# ----- Obfuscation -----
OBFUSCATE_LABELS: bool = False
SEED: int | None = 42
"""Random seed for label obfuscation; None for non-deterministic."""

# ----- Rendering (debug diagram) -----
RENDER_WIDTH_PX: int = 800
RENDER_HEIGHT_PX: int = 600


@dataclass(frozen=True)
class LabelingConfig:
    """Configuration snapshot for one photo. Defaults mirror the module constants."""
    font_family: str = DEFAULT_FONT_FAMILY
    font_colour: str = FONT_COLOUR
    font_stroke_width: int = FONT_STROKE_WIDTH
    default_position: str = DEFAULT_POSITION
    default_num_rows: int = DEFAULT_NUM_ROWS
    initial_font_size: int = INITIAL_FONT_SIZE
    fixed_font_size: int = FIXED_FONT_SIZE
    font_size_mode: str = FONT_SIZE_MODE
    sample_text: str = SAMPLE_TEXT
    margin: int = IMAGE_MARGIN_PX
    image_width_to_region_ratio_small: float = IMAGE_WIDTH_TO_REGION_RATIO_SMALL
    image_width_to_region_ratio_large: float = IMAGE_WIDTH_TO_REGION_RATIO_LARGE
    label_width_to_region_ratio_small: float = LABEL_WIDTH_TO_REGION_RATIO_SMALL
    label_width_to_region_ratio_large: float = LABEL_WIDTH_TO_REGION_RATIO_LARGE
    font_size_delta_limit: int = FONT_SIZE_DELTA_LIMIT
    font_size_refine_limit: int = FONT_SIZE_REFINE_LIMIT
    font_size_coarse_limit: int = FONT_SIZE_COARSE_LIMIT
    search_axes: tuple[str, ...] = DEFAULT_SEARCH_AXES
    position_options: tuple[str, ...] = POSITION_OPTIONS
    num_rows_options: tuple[int, ...] = NUM_ROWS_OPTIONS
    font_size_multipliers: tuple[float, ...] = FONT_SIZE_MULTIPLIERS
    experiment_loop_limit: int = EXPERIMENT_LOOP_LIMIT
    auto_optimise: bool = AUTO_OPTIMISE
    obfuscate_labels: bool = OBFUSCATE_LABELS
    seed: int | None = SEED

    def axis_enabled(self, axis: str) -> bool:
        return axis in self.search_axes


def _valid_position(value: Any) -> bool:
    return isinstance(value, str) and value in POSITIONS


def _valid_num_rows(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def _valid_multiplier(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def _filter_options(key: str, values: Any, is_valid) -> tuple | None:
    """Keep valid entries of an option list; unknown entries are logged and dropped."""
    if not isinstance(values, (list, tuple)):
        logger.error("Config %s must be a list, got %r; keeping default.", key, values)
        return None
    kept = []
    for v in values:
        if is_valid(v):
            if v not in kept:
                kept.append(v)
        else:
            logger.error("Config %s: unknown option %r ignored.", key, v)
    return tuple(kept)


def _couple_ratios(cfg: LabelingConfig) -> LabelingConfig:
    """Small-region anchors must not fall below large-region anchors."""
    if cfg.label_width_to_region_ratio_small < cfg.label_width_to_region_ratio_large:
        logger.warning(
            "label_width_to_region_ratio_small %.2f < large %.2f; using %.2f for both.",
            cfg.label_width_to_region_ratio_small,
            cfg.label_width_to_region_ratio_large,
            cfg.label_width_to_region_ratio_small,
        )
        cfg = replace(cfg, label_width_to_region_ratio_large=cfg.label_width_to_region_ratio_small)
    if cfg.image_width_to_region_ratio_small < cfg.image_width_to_region_ratio_large:
        logger.warning(
            "image_width_to_region_ratio_small %.2f < large %.2f; using %.2f for both.",
            cfg.image_width_to_region_ratio_small,
            cfg.image_width_to_region_ratio_large,
            cfg.image_width_to_region_ratio_small,
        )
        cfg = replace(cfg, image_width_to_region_ratio_large=cfg.image_width_to_region_ratio_small)
    return cfg


def config_from_dict(data: dict[str, Any] | None) -> LabelingConfig:
    """
    Build a LabelingConfig from a plain dict (e.g. parsed JSON).
    Unknown keys and bad enum/axis values are logged at ERROR and ignored;
    the default stays in effect for that key.
    """
    base = LabelingConfig()
    if not data:
        return base
    known = {f.name for f in fields(LabelingConfig)}
    updates: dict[str, Any] = {}

    for key, value in data.items():
        if key == "experiment_loop_limit" and isinstance(value, str):
            preset = EXPERIMENT_LOOP_LIMIT_PRESETS.get(value.lower())
            if preset is None:
                logger.error("Config experiment_loop_limit: unknown preset %r ignored.", value)
                continue
            value = preset
        if key not in known:
            logger.error("Unknown config key %r ignored.", key)
            continue
        if key == "default_position":
            if not _valid_position(value):
                logger.error("Config default_position: unknown position %r ignored.", value)
                continue
        elif key == "default_num_rows":
            if not _valid_num_rows(value):
                logger.error("Config default_num_rows: invalid value %r ignored.", value)
                continue
        elif key == "font_size_mode":
            if value not in FONT_SIZE_MODES:
                logger.error("Config font_size_mode: unknown mode %r ignored.", value)
                continue
        elif key == "search_axes":
            value = _filter_options(key, value, lambda a: a in SEARCH_AXES)
        elif key == "position_options":
            value = _filter_options(key, value, _valid_position)
        elif key == "num_rows_options":
            value = _filter_options(key, value, _valid_num_rows)
        elif key == "font_size_multipliers":
            value = _filter_options(key, value, _valid_multiplier)
            if value is not None:
                value = tuple(float(v) for v in value)
        elif key in ("experiment_loop_limit", "margin", "initial_font_size", "fixed_font_size"):
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                logger.error("Config %s: invalid value %r ignored.", key, value)
                continue
        if value is None:
            continue
        updates[key] = value

    return _couple_ratios(replace(base, **updates))


def load_config(path: str | Path) -> LabelingConfig:
    """Read a JSON config file. Raises FileNotFoundError if missing."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {p}")
    return config_from_dict(data)
