# tests/test_config.py
"""
Config loading: defaults, validation of enum and option values, presets, coupled anchors.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

import pytest

from facelabel.core.config import (
    EXPERIMENT_LOOP_LIMIT,
    EXPERIMENT_LOOP_LIMIT_PRESETS,
    LabelingConfig,
    config_from_dict,
    load_config,
)


def test_defaults() -> None:
    cfg = config_from_dict(None)
    assert cfg == LabelingConfig()
    assert cfg.experiment_loop_limit == EXPERIMENT_LOOP_LIMIT
    assert cfg.axis_enabled("position")


def test_unknown_key_logged_and_ignored(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        cfg = config_from_dict({"bogus": 1, "margin": 12})
    assert cfg.margin == 12
    assert any("bogus" in r.getMessage() for r in caplog.records)


def test_unknown_enum_values_ignored(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        cfg = config_from_dict({
            "default_position": "diagonal",
            "font_size_mode": "huge",
            "search_axes": ["position", "colour"],
            "position_options": ["above", "sideways", "below"],
        })
    assert cfg.default_position == LabelingConfig().default_position
    assert cfg.font_size_mode == LabelingConfig().font_size_mode
    assert cfg.search_axes == ("position",)
    assert cfg.position_options == ("above", "below")
    messages = " ".join(r.getMessage() for r in caplog.records)
    for bad in ("diagonal", "huge", "colour", "sideways"):
        assert bad in messages


def test_loop_limit_presets() -> None:
    assert config_from_dict({"experiment_loop_limit": "high"}).experiment_loop_limit == (
        EXPERIMENT_LOOP_LIMIT_PRESETS["high"]
    )
    assert config_from_dict({"experiment_loop_limit": 7}).experiment_loop_limit == 7
    assert config_from_dict({"experiment_loop_limit": "absurd"}).experiment_loop_limit == EXPERIMENT_LOOP_LIMIT


def test_coupled_ratios(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        cfg = config_from_dict({
            "label_width_to_region_ratio_small": 0.2,
            "label_width_to_region_ratio_large": 0.5,
        })
    assert cfg.label_width_to_region_ratio_large == 0.2
    assert cfg.label_width_to_region_ratio_small == 0.2
    assert caplog.records


def test_multipliers_normalised_to_float() -> None:
    cfg = config_from_dict({"font_size_multipliers": [1, 0.5, -1, "x"]})
    assert cfg.font_size_multipliers == (1.0, 0.5)


def test_load_config_file() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "config.json"
        path.write_text(json.dumps({"auto_optimise": False, "num_rows_options": [1, 2]}), encoding="utf-8")
        cfg = load_config(path)
        assert cfg.auto_optimise is False
        assert cfg.num_rows_options == (1, 2)
        with pytest.raises(FileNotFoundError):
            load_config(Path(tmp) / "missing.json")
