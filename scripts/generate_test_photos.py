#!/usr/bin/env python3
"""
Generate a photos JSON with synthetic face regions for manual runs of facelabel.

Categories:
1-10:  Sparse group shots (a few faces, plenty of room)
11-20: Crowded rows (faces side by side, labels must move or wrap)
21-25: Edge cases (faces at the image border, unnamed faces, cropped photos)
"""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np

OUTPUT_PATH = Path(__file__).parent.parent / "docs" / "assets" / "test_photos.json"

FIRST_NAMES = ["Alice", "Bob", "Carol", "Dave", "Eve", "Frank", "Grace", "Heidi", "Ivan", "Judy"]
LAST_NAMES = ["Smith", "Jones", "Brown", "Taylor", "Wilson", "Evans", "Thomas", "Roberts"]


def random_name(rng: np.random.Generator) -> str:
    first = FIRST_NAMES[int(rng.integers(len(FIRST_NAMES)))]
    if rng.random() < 0.6:
        return f"{first} {LAST_NAMES[int(rng.integers(len(LAST_NAMES)))]}"
    return first


def face(rng: np.random.Generator, x: float, y: float, size: float, name: str | None) -> dict:
    return {"name": name, "x": int(x), "y": int(y), "w": int(size), "h": int(size), "type": "Face"}


def generate_sparse(seed: int, width: int, height: int, n_faces: int) -> dict:
    rng = np.random.default_rng(seed)
    size = width / 12
    regions = []
    for _ in range(n_faces):
        x = rng.uniform(size, width - 2 * size)
        y = rng.uniform(size, height - 3 * size)
        regions.append(face(rng, x, y, size, random_name(rng)))
    return {"width": width, "height": height, "regions": regions}


def generate_row(seed: int, width: int, height: int, n_faces: int, gap_frac: float) -> dict:
    """Faces in one horizontal row; gap_frac is the gap between faces as a fraction of face size."""
    rng = np.random.default_rng(seed)
    size = width / (n_faces * (1 + gap_frac) + 1)
    y = height * 0.4
    regions = []
    for i in range(n_faces):
        x = size / 2 + i * size * (1 + gap_frac)
        jitter = rng.normal(0, size * 0.05)
        regions.append(face(rng, x, y + jitter, size, random_name(rng)))
    return {"width": width, "height": height, "regions": regions}


def generate_edge_case(seed: int, kind: str) -> dict:
    rng = np.random.default_rng(seed)
    width, height = 1600, 1200
    if kind == "border":
        regions = [
            face(rng, 0, 0, 150, random_name(rng)),
            face(rng, width - 150, height - 150, 150, random_name(rng)),
        ]
        return {"width": width, "height": height, "regions": regions}
    if kind == "unnamed":
        regions = [face(rng, 300 + i * 250, 400, 150, random_name(rng) if i % 2 else None) for i in range(4)]
        regions.append({"name": "Not a face", "x": 50, "y": 50, "w": 100, "h": 100, "type": "Pet"})
        return {"width": width, "height": height, "regions": regions}
    if kind == "cropped":
        regions = [face(rng, 500 + i * 180, 500, 120, random_name(rng)) for i in range(3)]
        return {
            "width": width, "height": height,
            "crop": {"x": 400, "y": 300, "w": 800, "h": 500},
            "regions": regions,
        }
    if kind == "tiny":
        regions = [face(rng, 900 + i * 30, 600, 20, random_name(rng)) for i in range(5)]
        return {"width": 4000, "height": 3000, "regions": regions}
    # huge: one face fills most of the frame
    return {"width": width, "height": height, "regions": [face(rng, 100, 50, 1100, random_name(rng))]}


def main():
    """Generate all test photos into one JSON file."""
    print(f"Generating photos in: {OUTPUT_PATH}")
    photos = []

    for i in range(10):
        photo = generate_sparse(seed=1000 + i, width=1600 + i * 100, height=1200, n_faces=2 + i % 4)
        photo["id"] = f"photo_{len(photos) + 1:03d}_sparse"
        photos.append(photo)

    for i in range(10):
        photo = generate_row(seed=2000 + i, width=2000, height=1500, n_faces=3 + i, gap_frac=0.5 - i * 0.05)
        photo["id"] = f"photo_{len(photos) + 1:03d}_row"
        photos.append(photo)

    for i, kind in enumerate(["border", "unnamed", "cropped", "tiny", "huge"]):
        photo = generate_edge_case(seed=3000 + i, kind=kind)
        photo["id"] = f"photo_{len(photos) + 1:03d}_{kind}"
        photos.append(photo)

    OUTPUT_PATH.parent.mkdir(parents=True, exist_ok=True)
    OUTPUT_PATH.write_text(json.dumps({"photos": photos}, indent=2), encoding="utf-8")
    print(f"Created {len(photos)} photos")


if __name__ == "__main__":
    main()
