# facelabel/core/io.py
"""
Load photos and their face regions from a JSON file.

Format:
    {"photos": [{"id": "IMG_0001", "width": 4000, "height": 3000,
                 "crop": {"x": 0, "y": 0, "w": 4000, "h": 3000},   (optional)
                 "margin": 5,                                        (optional)
                 "regions": [{"name": "Alice", "x": 100, "y": 100, "w": 50, "h": 50,
                              "type": "Face"}]}]}

Region rects are absolute pixels, already corrected for rotation and crop.
Only regions of type "Face" (or without a type) become persons.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from facelabel.core.config import LabelingConfig
from facelabel.core.geometry import Rect
from facelabel.core.types import Person, PhotoContext

_LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_DIGITS = "0123456789"


@dataclass(frozen=True)
class PhotoRecord:
    photo_id: str
    context: PhotoContext
    persons: list[Person]


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def randomise_text(text: str, rng: np.random.Generator) -> str:
    """Replace characters with random ones of the same kind; spaces are kept."""
    out = []
    for ch in text:
        if ch == " ":
            out.append(ch)
        elif ch.isdigit():
            out.append(_DIGITS[int(rng.integers(len(_DIGITS)))])
        else:
            out.append(_LETTERS[int(rng.integers(len(_LETTERS)))])
    return "".join(out)


def _int_field(entry: dict[str, Any], key: str, where: str) -> int:
    if key not in entry:
        raise ValueError(f"{where}: missing {key!r}")
    try:
        return int(round(float(entry[key])))
    except (TypeError, ValueError) as e:
        raise ValueError(f"{where}: {key!r} is not a number: {entry[key]!r}") from e


def _rect_from(entry: dict[str, Any], where: str) -> Rect:
    if not isinstance(entry, dict):
        raise ValueError(f"{where}: must be an object")
    return Rect(
        _int_field(entry, "x", where),
        _int_field(entry, "y", where),
        _int_field(entry, "w", where),
        _int_field(entry, "h", where),
    )


def parse_photo(
    entry: dict[str, Any],
    config: LabelingConfig,
    index: int = 0,
    rng: np.random.Generator | None = None,
) -> PhotoRecord:
    """Build PhotoContext and persons from one photo entry. Raises ValueError if malformed."""
    if not isinstance(entry, dict):
        raise ValueError(f"photo {index}: entry must be an object")
    photo_id = str(entry.get("id", f"photo_{index:04d}"))
    width = _int_field(entry, "width", photo_id)
    height = _int_field(entry, "height", photo_id)
    if width <= 0 or height <= 0:
        raise ValueError(f"{photo_id}: image size must be positive, got {width}x{height}")
    crop = None
    if entry.get("crop"):
        crop = _rect_from(entry["crop"], f"{photo_id} crop")
    margin = _int_field(entry, "margin", photo_id) if "margin" in entry else config.margin
    context = PhotoContext(width=width, height=height, crop=crop, margin=margin)

    regions = entry.get("regions") or []
    if not isinstance(regions, list):
        raise ValueError(f"{photo_id}: regions must be a list")
    if config.obfuscate_labels and rng is None:
        rng = np.random.default_rng(config.seed)

    persons: list[Person] = []
    for i, region in enumerate(regions):
        if not isinstance(region, dict):
            raise ValueError(f"{photo_id} region {i}: must be an object")
        region_type = region.get("type")
        if region_type is not None and region_type != "Face":
            continue
        name = region.get("name")
        name = str(name).strip() if name is not None else None
        if name and config.obfuscate_labels:
            name = randomise_text(name, rng)
        persons.append(Person(name=name or None, rect=_rect_from(region, f"{photo_id} region {i}")))
    return PhotoRecord(photo_id=photo_id, context=context, persons=persons)


def load_photos(path: str | Path, repo_root: Path | None = None) -> list[dict[str, Any]]:
    """
    Read the raw photo entries from a JSON file. Entries are parsed one by one with
    parse_photo so a malformed photo fails alone.
    Raises FileNotFoundError if path is missing, ValueError if the file has no photo list.
    """
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"Photos file not found: {resolved}")
    data = json.loads(resolved.read_text(encoding="utf-8"))
    if isinstance(data, list):
        photos = data
    elif isinstance(data, dict) and isinstance(data.get("photos"), list):
        photos = data["photos"]
    else:
        raise ValueError(f"No photo list found in {resolved}")
    return photos
