# facelabel/core/geometry.py
"""
Geometry helpers: axis-aligned rectangles in image pixels, overlap test and area,
clamping into the usable image area.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; (x, y) is the top-left corner, y grows downwards."""
    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def area(self) -> int:
        return max(0, self.w) * max(0, self.h)

    def moved_to(self, x: int, y: int) -> "Rect":
        return Rect(x, y, self.w, self.h)

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.w, self.h)


def rects_overlap(a: Rect, b: Rect) -> bool:
    """False iff a and b are separated on either axis. Touching edges do not overlap."""
    separated = a.right <= b.x or a.x >= b.right or a.bottom <= b.y or a.y >= b.bottom
    return not separated


def overlap_area(a: Rect, b: Rect) -> int:
    """Product of the positive per-axis overlaps; 0 when separated."""
    dx = min(a.right, b.right) - max(a.x, b.x)
    dy = min(a.bottom, b.bottom) - max(a.y, b.y)
    if dx <= 0 or dy <= 0:
        return 0
    return dx * dy


def inset(bounds: Rect, margin: int) -> Rect:
    """Bounds shrunk by margin on every side (may have non-positive size)."""
    return Rect(bounds.x + margin, bounds.y + margin, bounds.w - 2 * margin, bounds.h - 2 * margin)


def clamp_rect(rect: Rect, bounds: Rect, margin: int) -> Rect:
    """
    Shift rect into [origin + margin, origin + size - margin] on each axis independently.
    Never resizes. The upper bound is applied last, so a rect larger than the
    usable area ends up flush with the far edge and still sticks out at the near one.
    """
    x, y = rect.x, rect.y
    lo_x, lo_y = bounds.x + margin, bounds.y + margin
    hi_x, hi_y = bounds.right - margin, bounds.bottom - margin
    if x < lo_x:
        x = lo_x
    if y < lo_y:
        y = lo_y
    if x + rect.w > hi_x:
        x = hi_x - rect.w
    if y + rect.h > hi_y:
        y = hi_y - rect.h
    if x == rect.x and y == rect.y:
        return rect
    return rect.moved_to(x, y)


def exceeds(rect: Rect, usable: Rect) -> bool:
    """True if rect is wider or taller than the usable area."""
    return rect.w > usable.w or rect.h > usable.h
