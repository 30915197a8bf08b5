# facelabel/core/reporting.py
"""
Create reports/<run_name>/ and write layout.json (per photo) and run_metadata.json.
layout.json is what the compositing step consumes: one entry per label with its
wrapped lines, rect, alignment and gravity.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from facelabel.core.config import REPORTS_DIR, LabelingConfig
from facelabel.core.types import Label, PhotoLayout
from facelabel.core.wrap import text_line_wrap

SCHEMA_VERSION = "1.0"

GRAVITY: dict[str, str] = {"left": "west", "center": "center", "right": "east"}
"""Text alignment -> compositor gravity."""


def _rect_dict(rect) -> dict | None:
    if rect is None:
        return None
    return {"x": rect.x, "y": rect.y, "w": rect.w, "h": rect.h}


def label_to_dict(label: Label) -> dict:
    return {
        "id": label.label_id,
        "text": label.text,
        "lines": text_line_wrap(label.text, label.num_rows),
        "rect": _rect_dict(label.rect),
        "align": label.align,
        "gravity": GRAVITY.get(label.align, "center"),
        "font_size": label.font_size,
        "position": label.position,
        "num_rows": label.num_rows,
        "clash": bool(label.clash),
    }


def layout_to_dict(layout: PhotoLayout, config: LabelingConfig | None = None) -> dict:
    """Exact structure for layout.json."""
    out = {
        "schema_version": SCHEMA_VERSION,
        "photo_id": layout.photo_id,
        "image": {
            "width": layout.context.width,
            "height": layout.context.height,
            "crop": _rect_dict(layout.context.crop),
            "margin": layout.context.margin,
        },
        "font": {"size": layout.font_size},
        "labels": [label_to_dict(l) for l in layout.labels],
        "persons": [
            {"name": p.name, "rect": _rect_dict(p.rect)} for p in layout.persons
        ],
        "result": {
            "status": layout.status,
            "iterations": layout.iterations,
            "used_best_config": layout.used_best_config,
        },
        "metrics": {
            "n_labels": len(layout.labels),
            "n_clashing": sum(1 for l in layout.labels if l.clash),
            "total_overlap_area": layout.total_overlap_area,
        },
        "warnings": list(layout.warnings),
    }
    if config is not None:
        out["font"].update(
            family=config.font_family,
            colour=config.font_colour,
            stroke_width=config.font_stroke_width,
        )
    return out


def run_metadata_dict(
    run_name: str,
    input_path: str,
    config: LabelingConfig,
    n_photos: int,
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "input_path": input_path,
        "n_photos": n_photos,
        "config": {k: list(v) if isinstance(v, tuple) else v for k, v in asdict(config).items()},
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_layout_json(report_dir: Path, layout: PhotoLayout, config: LabelingConfig | None = None) -> Path:
    """Write layout.json to report_dir. Returns path to file."""
    path = report_dir / "layout.json"
    data = layout_to_dict(layout, config)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    input_path: str,
    config: LabelingConfig,
    n_photos: int,
) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, input_path, config, n_photos)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
