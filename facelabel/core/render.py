# facelabel/core/render.py
"""
Matplotlib PNG rendering of a photo layout: debug.png.
Draws the photo bounds, usable area, face regions and label rects. Clashing labels
are drawn in red. This is a diagnostic of the layout, not the composited photo.
"""

from __future__ import annotations

import warnings
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt

from facelabel.core.config import RENDER_HEIGHT_PX, RENDER_WIDTH_PX
from facelabel.core.geometry import Rect
from facelabel.core.types import PhotoLayout


def _new_fig(width_px: int, height_px: int) -> tuple[plt.Figure, plt.Axes]:
    fig = plt.figure(
        figsize=(width_px / 100.0, height_px / 100.0),
        dpi=100,
        constrained_layout=False,
    )
    # Leave bottom margin for the legend
    ax = fig.add_axes([0.05, 0.08, 0.9, 0.88])
    ax.axis("off")
    return fig, ax


def _draw_rect(ax: plt.Axes, rect: Rect, **kwargs) -> None:
    ax.add_patch(mpatches.Rectangle((rect.x, rect.y), rect.w, rect.h, **kwargs))


def set_axes_to_rect(ax: plt.Axes, rect: Rect, pad_frac: float = 0.05) -> None:
    """Set xlim/ylim from rect with margin; y grows downwards as in image coordinates."""
    dx = max(1.0, rect.w * pad_frac)
    dy = max(1.0, rect.h * pad_frac)
    ax.set_xlim(rect.x - dx, rect.right + dx)
    ax.set_ylim(rect.bottom + dy, rect.y - dy)
    ax.set_aspect("equal", adjustable="box")


def render_debug(
    layout: PhotoLayout,
    output_path: str | Path,
    width_px: int = RENDER_WIDTH_PX,
    height_px: int = RENDER_HEIGHT_PX,
    scale: int = 1,
) -> None:
    """Render debug overlay. scale multiplies output resolution (1x, 2x, 4x)."""
    w, h = width_px * scale, height_px * scale
    fig, ax = _new_fig(w, h)
    context = layout.context

    _draw_rect(ax, context.bounds, facecolor="whitesmoke", edgecolor="black", linewidth=1)
    _draw_rect(ax, context.usable, fill=False, edgecolor="grey", linewidth=1, linestyle="--")
    for person in layout.persons:
        _draw_rect(ax, person.rect, facecolor="lightblue", edgecolor="navy", linewidth=1, alpha=0.6)

    for label in layout.labels:
        if label.rect is None:
            continue
        colour = "red" if label.clash else "green"
        _draw_rect(ax, label.rect, facecolor=colour, edgecolor=colour, linewidth=1, alpha=0.3)
        r = label.rect
        ax.text(
            r.x + r.w / 2, r.y + r.h / 2, label.text,
            fontsize=7, ha="center", va="center", color="black", zorder=6,
        )

    handles = [
        mpatches.Patch(facecolor="lightblue", edgecolor="navy", label="face"),
        mpatches.Patch(facecolor="green", alpha=0.3, label="label"),
        mpatches.Patch(facecolor="red", alpha=0.3, label="clashing label"),
    ]
    fig.legend(handles=handles, loc="lower center", ncol=3, fontsize=8, frameon=False)
    ax.set_title(
        f"{layout.photo_id}: {layout.status}, font {layout.font_size}px, "
        f"overlap {layout.total_overlap_area:.0f}",
        fontsize=9,
    )
    set_axes_to_rect(ax, context.bounds)
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=100, facecolor="white")
    plt.close(fig)
