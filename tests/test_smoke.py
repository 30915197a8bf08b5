# tests/test_smoke.py
"""
Smoke tests with the real Pillow text metrics, the debug renderer and the CLI.
"""

from __future__ import annotations

import csv
import json
import tempfile
from pathlib import Path

import pytest

from facelabel.core.geometry import Rect
from facelabel.core.layout import run_photo_layout
from facelabel.core.render import render_debug
from facelabel.core.runner import main
from facelabel.core.text_metrics import PillowTextMetrics, TextMeasurementError
from facelabel.core.types import Person, PhotoContext


@pytest.mark.filterwarnings("ignore:Font not found")
def test_pillow_measures_text() -> None:
    metrics = PillowTextMetrics()
    w1, h1 = metrics.measure_text("Alice", "DejaVu Sans", 20, 1)
    w2, h2 = metrics.measure_text("Alice\nSmith", "DejaVu Sans", 20, 1)
    assert w1 > 0 and h1 > 0
    assert h2 > h1


def test_pillow_rejects_bad_size() -> None:
    with pytest.raises(TextMeasurementError):
        PillowTextMetrics().measure_text("Alice", "DejaVu Sans", 0, 1)


def test_render_debug_writes_png(fixed_config, metrics) -> None:
    persons = [Person("Alice Smith", Rect(100, 100, 50, 50)), Person("Bob Jones", Rect(160, 100, 50, 50))]
    layout = run_photo_layout(PhotoContext(400, 300, margin=5), persons, fixed_config, metrics)
    with tempfile.TemporaryDirectory() as tmp:
        out = Path(tmp) / "debug.png"
        render_debug(layout, out)
        assert out.stat().st_size > 0


@pytest.mark.filterwarnings("ignore:Font not found")
def test_cli_runs_end_to_end() -> None:
    photos = {
        "photos": [
            {"id": "a", "width": 1200, "height": 900,
             "regions": [{"name": "Alice", "x": 400, "y": 300, "w": 120, "h": 120}]},
        ]
    }
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "photos.json").write_text(json.dumps(photos), encoding="utf-8")
        (root / "config.json").write_text(json.dumps({"experiment_loop_limit": "low"}), encoding="utf-8")
        main([
            "--input", "photos.json", "--config", "config.json",
            "--repo-root", str(root), "--run-name", "cli",
        ])
        with open(root / "reports" / "cli" / "index.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert rows[0]["photo_id"] == "a"
        assert rows[0]["status"] == "found"
        meta = json.loads((root / "reports" / "cli" / "run_metadata.json").read_text(encoding="utf-8"))
        assert meta["config"]["experiment_loop_limit"] == 50
