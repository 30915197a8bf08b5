# tests/test_layout.py
"""
Per-photo layout: unnamed faces, no-label photos, auto-optimise switch and
fatal measurement failures.
"""

from __future__ import annotations

from dataclasses import replace

import pytest

from facelabel.core.config import LabelingConfig
from facelabel.core.error_codes import LOOP_LIMIT_REACHED, NO_NAMED_PEOPLE, user_message
from facelabel.core.geometry import Rect
from facelabel.core.layout import run_photo_layout
from facelabel.core.text_metrics import TextMetricsUnavailable
from facelabel.core.types import Person, PhotoContext

CTX = PhotoContext(1000, 1000, margin=5)

SIDE_BY_SIDE = [
    Person("Alice Smith", Rect(100, 100, 50, 50)),
    Person("Bob Jones", Rect(160, 100, 50, 50)),
]


def test_single_named_face(fixed_config, metrics) -> None:
    layout = run_photo_layout(CTX, [Person("Alice", Rect(100, 100, 50, 50))], fixed_config, metrics)
    assert layout.status == "found"
    [label] = layout.labels
    assert label.rect == Rect(95, 150, 60, 20)
    assert label.align == "center"
    assert layout.warnings == []


def test_unnamed_face_gets_no_label_but_still_blocks(fixed_config, metrics) -> None:
    persons = [
        Person("Alice", Rect(100, 100, 50, 50)),
        Person("", Rect(100, 160, 50, 50)),
    ]
    layout = run_photo_layout(CTX, persons, fixed_config, metrics)
    assert [l.text for l in layout.labels] == ["Alice"]
    assert layout.status == "found"
    # the default spot below Alice overlaps the unnamed face, so the label moved
    assert layout.labels[0].position != "below"


def test_no_named_people(fixed_config, metrics) -> None:
    persons = [Person(None, Rect(0, 0, 10, 10)), Person("   ", Rect(20, 0, 10, 10))]
    layout = run_photo_layout(CTX, persons, fixed_config, metrics)
    assert layout.status == "no_labels"
    assert layout.labels == []
    assert layout.warnings == [user_message(NO_NAMED_PEOPLE)]
    assert metrics.calls == 0


def test_auto_optimise_off_keeps_default_placement(fixed_config, metrics) -> None:
    config = replace(fixed_config, auto_optimise=False)
    layout = run_photo_layout(CTX, SIDE_BY_SIDE, config, metrics)
    assert layout.status == "not_optimised"
    assert all(l.position == "below" for l in layout.labels)
    assert all(l.clash for l in layout.labels)
    assert layout.total_overlap_area == 2400


def test_optimised_side_by_side(fixed_config, metrics) -> None:
    layout = run_photo_layout(CTX, SIDE_BY_SIDE, fixed_config, metrics, photo_id="IMG_1")
    assert layout.photo_id == "IMG_1"
    assert layout.status == "found"
    assert layout.total_overlap_area == 0


def test_loop_limit_warning(fixed_config, metrics) -> None:
    config = replace(fixed_config, experiment_loop_limit=1)
    layout = run_photo_layout(CTX, SIDE_BY_SIDE, config, metrics)
    assert layout.status == "loop_limit_reached"
    assert layout.used_best_config
    assert user_message(LOOP_LIMIT_REACHED) in layout.warnings


def test_dynamic_font_size_applied_to_labels(metrics) -> None:
    config = LabelingConfig(search_axes=("position", "num_rows"))
    ctx = PhotoContext(2000, 1500)
    layout = run_photo_layout(ctx, [Person("Alice", Rect(100, 100, 100, 100))], config, metrics)
    assert layout.font_size == 33
    assert layout.labels[0].font_size == 33


def test_unmeasurable_text_is_fatal(fixed_config, failing_metrics) -> None:
    with pytest.raises(TextMetricsUnavailable):
        run_photo_layout(CTX, SIDE_BY_SIDE, fixed_config, failing_metrics(0))
