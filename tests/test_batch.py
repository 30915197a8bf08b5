# tests/test_batch.py
"""
Batch mode: index.csv contract, per-photo layout.json, error rows for failing photos.
"""

from __future__ import annotations

import csv
import json
import tempfile
from pathlib import Path

from facelabel.core.batch import INDEX_FIELDS, run_batch
from facelabel.core.error_codes import INVALID_INPUT, RUN_FAILED, TEXT_METRICS_UNAVAILABLE

PHOTOS = {
    "photos": [
        {
            "id": "IMG_0001",
            "width": 1000,
            "height": 1000,
            "regions": [
                {"name": "Alice Smith", "x": 100, "y": 100, "w": 50, "h": 50},
                {"name": "Bob Jones", "x": 160, "y": 100, "w": 50, "h": 50},
            ],
        },
        {"id": "IMG_0002", "width": 800, "height": 600, "regions": [{"name": None, "x": 1, "y": 1, "w": 5, "h": 5}]},
        {"id": "IMG_0003", "height": 600, "regions": []},
    ]
}


def _read_index(batch_dir: Path) -> list[dict]:
    with open(batch_dir / "index.csv", newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def test_batch_writes_index_and_layouts(fixed_config, metrics) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "photos.json").write_text(json.dumps(PHOTOS), encoding="utf-8")
        batch_dir = run_batch("photos.json", "t", config=fixed_config, repo_root=root, metrics=metrics)
        assert batch_dir == (root / "reports" / "t").resolve()
        rows = _read_index(batch_dir)
        assert list(rows[0].keys()) == INDEX_FIELDS
        by_id = {r["photo_id"]: r for r in rows}
        assert by_id["IMG_0001"]["status"] == "found"
        assert by_id["IMG_0001"]["n_labels"] == "2"
        assert by_id["IMG_0002"]["status"] == "no_labels"
        assert by_id["IMG_0003"]["status"] == "error"
        assert by_id["IMG_0003"]["error"] == INVALID_INPUT

        layout = json.loads((batch_dir / "cases" / "IMG_0001" / "layout.json").read_text(encoding="utf-8"))
        assert layout["schema_version"] == "1.0"
        assert len(layout["labels"]) == 2
        assert not (batch_dir / "cases" / "IMG_0003").exists()

        meta = json.loads((batch_dir / "run_metadata.json").read_text(encoding="utf-8"))
        assert meta["n_photos"] == 3
        assert meta["config"]["font_size_mode"] == "fixed"


def test_batch_limit(fixed_config, metrics) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "photos.json").write_text(json.dumps(PHOTOS), encoding="utf-8")
        batch_dir = run_batch("photos.json", "t", config=fixed_config, repo_root=root, limit=1, metrics=metrics)
        assert [r["photo_id"] for r in _read_index(batch_dir)] == ["IMG_0001"]


def test_failing_metrics_gives_error_row_and_continues(fixed_config, failing_metrics) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "photos.json").write_text(json.dumps(PHOTOS), encoding="utf-8")
        batch_dir = run_batch(
            "photos.json", "t", config=fixed_config, repo_root=root, metrics=failing_metrics(0)
        )
        rows = _read_index(batch_dir)
        assert len(rows) == 3
        assert rows[0]["status"] == "error"
        assert rows[0]["error"] == TEXT_METRICS_UNAVAILABLE
        # the second photo needs no measurement
        assert rows[1]["status"] == "no_labels"


def test_debug_png_written(fixed_config, metrics) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "photos.json").write_text(json.dumps(PHOTOS), encoding="utf-8")
        batch_dir = run_batch(
            "photos.json", "t", config=fixed_config, repo_root=root, limit=1, debug_png=True, metrics=metrics
        )
        assert (batch_dir / "cases" / "IMG_0001" / "debug.png").stat().st_size > 0


def test_malformed_region_fails_only_its_photo(fixed_config, metrics) -> None:
    photos = {
        "photos": [
            {"id": "a", "width": 1000, "height": 1000, "regions": ["oops"]},
            {
                "id": "b",
                "width": 1000,
                "height": 1000,
                "regions": [{"name": "Alice", "x": 100, "y": 100, "w": 50, "h": 50}],
            },
        ]
    }
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "photos.json").write_text(json.dumps(photos), encoding="utf-8")
        batch_dir = run_batch("photos.json", "t", config=fixed_config, repo_root=root, metrics=metrics)
        rows = _read_index(batch_dir)
        assert [r["photo_id"] for r in rows] == ["a", "b"]
        assert rows[0]["status"] == "error"
        assert rows[0]["error"] == INVALID_INPUT
        assert rows[1]["status"] == "found"
        assert (batch_dir / "run_metadata.json").exists()


class _BrokenMetrics:
    def measure_text(self, text: str, font: str, point_size: int, stroke_width: int) -> tuple[int, int]:
        raise RuntimeError("unexpected backend failure")


def test_unexpected_layout_error_gives_run_failed_row(fixed_config) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "photos.json").write_text(json.dumps(PHOTOS), encoding="utf-8")
        batch_dir = run_batch("photos.json", "t", config=fixed_config, repo_root=root, metrics=_BrokenMetrics())
        rows = _read_index(batch_dir)
        assert len(rows) == 3
        assert rows[0]["status"] == "error"
        assert rows[0]["error"] == RUN_FAILED
        assert rows[1]["status"] == "no_labels"
        assert rows[2]["error"] == INVALID_INPUT
