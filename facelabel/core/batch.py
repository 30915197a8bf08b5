# facelabel/core/batch.py
"""
Batch mode: lay out labels for every photo in a photos JSON file.
Output: reports/<run_name>/index.csv and cases/<photo_id>/layout.json (+ debug.png).
A photo that cannot be laid out gets an error row; the remaining photos still run.
"""

from __future__ import annotations

import csv
import logging
import time
from pathlib import Path
from typing import Callable

import numpy as np

from facelabel.core.config import REPORTS_DIR, LabelingConfig
from facelabel.core.error_codes import INVALID_INPUT, RUN_FAILED, TEXT_METRICS_UNAVAILABLE
from facelabel.core.io import load_photos, parse_photo
from facelabel.core.layout import run_photo_layout
from facelabel.core.reporting import ensure_report_dir, write_layout_json, write_run_metadata_json
from facelabel.core.text_metrics import PillowTextMetrics, TextMetricsPort, TextMetricsUnavailable

logger = logging.getLogger(__name__)

INDEX_FIELDS = [
    "photo_id",
    "status",
    "n_persons",
    "n_labels",
    "font_size",
    "iterations",
    "total_overlap_area",
    "used_best_config",
    "duration_ms",
    "warnings_count",
    "error",
]


def _safe_dir_name(photo_id: str) -> str:
    return "".join(c if c.isalnum() or c in "-_." else "_" for c in photo_id) or "photo"


def _error_row(photo_id: str, error_key: str, t0: float, n_persons: int = 0) -> dict:
    return {
        "photo_id": photo_id, "status": "error", "n_persons": n_persons, "n_labels": 0,
        "font_size": "", "iterations": 0, "total_overlap_area": "", "used_best_config": False,
        "duration_ms": int((time.perf_counter() - t0) * 1000), "warnings_count": 0,
        "error": error_key,
    }


def write_index_csv(batch_dir: Path, rows: list[dict]) -> Path:
    index_path = batch_dir / "index.csv"
    with open(index_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=INDEX_FIELDS)
        w.writeheader()
        w.writerows(rows)
    return index_path


def run_batch(
    input_path: str | Path,
    run_name: str,
    config: LabelingConfig | None = None,
    repo_root: Path | None = None,
    output_dir: str | None = REPORTS_DIR,
    limit: int | None = None,
    debug_png: bool = False,
    metrics: TextMetricsPort | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> Path:
    """
    Run the layout on every photo in input_path.
    Returns report directory containing index.csv, run_metadata.json and cases/<photo_id>/.
    """
    root = repo_root or Path.cwd().resolve()
    config = config or LabelingConfig()
    metrics = metrics or PillowTextMetrics()
    entries = load_photos(input_path, repo_root=root)
    if limit is not None:
        entries = entries[:limit]

    batch_dir = ensure_report_dir(root, run_name, output_dir=output_dir)
    cases_dir = batch_dir / "cases"
    cases_dir.mkdir(parents=True, exist_ok=True)
    rng = np.random.default_rng(config.seed)

    rows: list[dict] = []
    for i, entry in enumerate(entries):
        t0 = time.perf_counter()
        try:
            record = parse_photo(entry, config, index=i, rng=rng)
        except ValueError as e:
            photo_id = str(entry.get("id", f"photo_{i:04d}")) if isinstance(entry, dict) else f"photo_{i:04d}"
            logger.error("%s: invalid photo entry: %s", photo_id, e)
            rows.append(_error_row(photo_id, INVALID_INPUT, t0))
            continue
        try:
            layout = run_photo_layout(
                record.context, record.persons, config, metrics,
                photo_id=record.photo_id, should_stop=should_stop,
            )
        except TextMetricsUnavailable as e:
            logger.error("%s: %s", record.photo_id, e)
            rows.append(_error_row(record.photo_id, TEXT_METRICS_UNAVAILABLE, t0, len(record.persons)))
            continue
        except Exception:
            logger.exception("%s: layout failed", record.photo_id)
            rows.append(_error_row(record.photo_id, RUN_FAILED, t0, len(record.persons)))
            continue
        duration_ms = int((time.perf_counter() - t0) * 1000)

        case_dir = cases_dir / _safe_dir_name(record.photo_id)
        case_dir.mkdir(parents=True, exist_ok=True)
        write_layout_json(case_dir, layout, config)
        if debug_png:
            from facelabel.core.render import render_debug
            render_debug(layout, case_dir / "debug.png")

        rows.append({
            "photo_id": record.photo_id, "status": layout.status,
            "n_persons": len(record.persons), "n_labels": len(layout.labels),
            "font_size": layout.font_size, "iterations": layout.iterations,
            "total_overlap_area": round(layout.total_overlap_area, 2),
            "used_best_config": layout.used_best_config,
            "duration_ms": duration_ms, "warnings_count": len(layout.warnings),
            "error": "",
        })

    write_run_metadata_json(batch_dir, run_name, str(input_path), config, len(entries))
    write_index_csv(batch_dir, rows)
    return batch_dir
