# facelabel/core/runner.py
"""
CLI entrypoint: load photos and config, lay out name labels, write reports.
Log level from the LOG_LEVEL environment variable (e.g. LOG_LEVEL=DEBUG).
"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import replace
from pathlib import Path

from facelabel.core.batch import run_batch
from facelabel.core.config import LabelingConfig, REPORTS_DIR, load_config


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Face name label layout.")
    p.add_argument("--input", type=str, required=True, help="Photos JSON path (repo-relative)")
    p.add_argument("--config", type=str, default=None, help="Config JSON path")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--limit", type=int, default=None, help="Max photos to process")
    p.add_argument("--debug-png", action="store_true", dest="debug_png", help="Write debug.png per photo")
    p.add_argument("--font-family", type=str, default=None, dest="font_family", help="Override font family")
    return p.parse_args(argv)


def _configure_logging() -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    _configure_logging()
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    config = LabelingConfig()
    if args.config:
        config_path = Path(args.config)
        if not config_path.is_absolute():
            config_path = repo_root / config_path
        config = load_config(config_path)
    if args.font_family:
        config = replace(config, font_family=args.font_family)

    out = run_batch(
        args.input,
        args.run_name,
        config=config,
        repo_root=repo_root,
        output_dir=args.output_dir,
        limit=args.limit,
        debug_png=args.debug_png,
    )
    print(out / "index.csv")
    print(out / "run_metadata.json")


if __name__ == "__main__":
    main()
