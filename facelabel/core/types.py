# facelabel/core/types.py
"""
Dataclasses for photo context, persons, labels and per-photo layout results.
Schema of the serialized form: see reporting.layout_to_dict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from facelabel.core.geometry import Rect, inset


Position = Literal["below", "above", "left", "right"]
Alignment = Literal["left", "center", "right"]
LayoutStatus = Literal[
    "found", "loop_limit_reached", "space_exhausted", "stopped", "not_optimised", "no_labels"
]


@dataclass(frozen=True)
class PhotoContext:
    """Image size, optional crop and label margin. Immutable for one photo."""
    width: int
    height: int
    crop: Rect | None = None
    margin: int = 0

    @property
    def bounds(self) -> Rect:
        """Crop rect if present, else the full image."""
        if self.crop is not None:
            return self.crop
        return Rect(0, 0, self.width, self.height)

    @property
    def usable(self) -> Rect:
        return inset(self.bounds, self.margin)

    @property
    def image_width(self) -> int:
        return self.bounds.w


@dataclass(frozen=True)
class Person:
    """A face region with an optional name; rect is absolute and already corrected upstream."""
    name: str | None
    rect: Rect


@dataclass(frozen=True)
class LabelPlacement:
    """Output of the placement calculator."""
    rect: Rect
    align: Alignment


@dataclass
class Label:
    """
    Name label attached to one person. Format fields (position, num_rows, font_size)
    are changed through set_format, which invalidates the derived placement; the
    placement calculator fills it back in lazily.
    """
    label_id: int
    person: Person
    text: str
    position: Position
    num_rows: int
    font_size: int
    placement: LabelPlacement | None = None
    size: tuple[int, int] | None = None
    clash: bool | None = None
    clash_area: float = 0.0
    stale: bool = True

    def set_format(
        self,
        position: Position | None = None,
        num_rows: int | None = None,
        font_size: int | None = None,
    ) -> None:
        changed = False
        if position is not None and position != self.position:
            self.position = position
            changed = True
        if num_rows is not None and num_rows != self.num_rows:
            self.num_rows = num_rows
            self.size = None
            changed = True
        if font_size is not None and font_size != self.font_size:
            self.font_size = font_size
            self.size = None
            changed = True
        if changed:
            self.stale = True
            self.clash = None

    @property
    def rect(self) -> Rect | None:
        return self.placement.rect if self.placement is not None else None

    @property
    def align(self) -> Alignment:
        return self.placement.align if self.placement is not None else "center"


@dataclass
class PhotoLayout:
    """Final labels for one photo, handed to the compositing step."""
    photo_id: str
    context: PhotoContext
    persons: list[Person]
    labels: list[Label]
    font_size: int
    status: LayoutStatus
    iterations: int = 0
    total_overlap_area: float = 0.0
    used_best_config: bool = False
    warnings: list[str] = field(default_factory=list)
