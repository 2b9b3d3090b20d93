# -*- coding: utf-8 -*-
"""
SEGWHEEL: Segmented Color Wheel Picker
Copyright (c) 2025 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Qt-free geometry for the segmented color wheel.

* **Palette:** a fixed, ordered tuple of normalized RGBA tuples. The order
    defines the wedge position of each color.
* **Wedges:** the circle is split into ``len(PALETTE)`` equal wedges, wedge
    ``i`` spanning ``[i * step, (i + 1) * step)`` radians. Angles follow screen
    coordinates (y pointing down), so they increase clockwise.
* **Hit testing:** inverts the mapping, scalar or vectorized with NumPy.
* **Inspection:** ``WedgePath.polygon``, ``hit_test_array`` and
    ``wedge_index_map`` give whole-wedge and whole-grid views of the same
    geometry, for tests and other drawing backends.
"""

import logging
import math
from dataclasses import dataclass
from typing import Final, NamedTuple, Sequence, Tuple, Union

import numpy as np

__all__ = [
    "Rgba",
    "PALETTE",
    "INTERIOR_HOLE_FRACTION",
    "PADDING_FOR_SHADOW",
    "FULL_CIRCLE",
    "OUTLINE_WIDTH",
    "OUTLINE_COLOR",
    "WedgeSelection",
    "ArcSegment",
    "WedgePath",
    "angle_step",
    "wedge_span",
    "wedge_boundaries",
    "outer_radius",
    "wedge_path",
    "hit_test",
    "hit_test_array",
    "wedge_index_map",
    "palette_index",
    "selection_for_color",
]

logger = logging.getLogger(__name__)


class Rgba(NamedTuple):
    """Normalized color components, each in [0, 1]."""
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def to_rgb255(self) -> Tuple[int, int, int, int]:
        """Returns the color as 0-255 integer channels, alpha included."""
        return tuple(int(round(c * 255)) for c in self)


# Black, gray and white are plain RGB triples as well, so a swatch color
# compares equal to its palette entry component by component.
PALETTE: Final[Tuple[Rgba, ...]] = (
    Rgba(1.0, 0.0, 0.0),  # red
    Rgba(1.0, 0.5, 0.0),  # orange
    Rgba(1.0, 1.0, 0.0),  # yellow
    Rgba(0.0, 1.0, 0.0),  # green
    Rgba(0.0, 1.0, 1.0),  # cyan
    Rgba(0.0, 0.0, 1.0),  # blue
    Rgba(0.5, 0.0, 0.5),  # purple
    Rgba(0.6, 0.4, 0.2),  # brown
    Rgba(0.0, 0.0, 0.0),  # black
    Rgba(0.5, 0.5, 0.5),  # gray
    Rgba(1.0, 1.0, 1.0),  # white
)

INTERIOR_HOLE_FRACTION: Final[float] = 1.0 / 6.0
PADDING_FOR_SHADOW: Final[float] = 0.95
FULL_CIRCLE: Final[float] = 2.0 * math.pi

OUTLINE_WIDTH: Final[float] = 10.0
OUTLINE_COLOR: Final[Rgba] = Rgba(32 / 255, 64 / 255, 128 / 255)

ColorLike = Union[Rgba, Sequence[float]]


@dataclass(frozen=True)
class WedgeSelection:
    """A highlighted wedge. ``None`` in its place means no highlight."""
    index: int

    def is_valid(self, count: int = len(PALETTE)) -> bool:
        return 0 <= self.index < count


class ArcSegment(NamedTuple):
    """Circular arc around ``center``; ``sweep`` is signed, positive = clockwise on screen."""
    center: Tuple[float, float]
    radius: float
    start_angle: float
    sweep: float

    def point_at(self, t: float) -> Tuple[float, float]:
        angle = self.start_angle + self.sweep * t
        return (self.center[0] + self.radius * math.cos(angle),
                self.center[1] + self.radius * math.sin(angle))


def _shortest_sweep(start_angle: float, end_angle: float) -> float:
    """Signed sweep from ``start_angle`` to ``end_angle`` along the shorter span."""
    sweep = math.remainder(end_angle - start_angle, FULL_CIRCLE)
    # remainder() maps an exact half turn to -pi; keep the caller's direction
    if abs(sweep) == math.pi:
        sweep = math.copysign(math.pi, end_angle - start_angle)
    return sweep


def _polar(center: Tuple[float, float], radius: float, angle: float) -> Tuple[float, float]:
    return (center[0] + radius * math.cos(angle), center[1] + radius * math.sin(angle))


@dataclass(frozen=True)
class WedgePath:
    """Backend-independent outline of one wedge.

    The closed path runs inner start -> outer start, along ``outer_arc``,
    outer end -> inner end, then back along ``inner_arc``.
    """
    start_angle: float
    end_angle: float
    inner_start: Tuple[float, float]
    outer_start: Tuple[float, float]
    outer_arc: ArcSegment
    inner_end: Tuple[float, float]
    inner_arc: ArcSegment

    def polygon(self, samples: int = 32) -> np.ndarray:
        """Flattens the path into an ``(N, 2)`` vertex array (closing vertex omitted).

        Args:
            samples: Number of segments used for each arc.

        Returns:
            np.ndarray: Vertices in path order.
        """
        t = np.linspace(0.0, 1.0, samples + 1)
        outer = self.outer_arc.start_angle + self.outer_arc.sweep * t
        inner = self.inner_arc.start_angle + self.inner_arc.sweep * t
        cx, cy = self.outer_arc.center
        outer_pts = np.column_stack((cx + self.outer_arc.radius * np.cos(outer),
                                     cy + self.outer_arc.radius * np.sin(outer)))
        inner_pts = np.column_stack((cx + self.inner_arc.radius * np.cos(inner),
                                     cy + self.inner_arc.radius * np.sin(inner)))
        # The inner arc ends where the path started
        return np.vstack((inner_pts[-1:], outer_pts, inner_pts[:-1]))


def angle_step(count: int = len(PALETTE)) -> float:
    """Angular width of one wedge in radians."""
    if count <= 0:
        raise ValueError(f"Wedge count must be positive, got {count}")
    return FULL_CIRCLE / count


def wedge_span(index: int, count: int = len(PALETTE)) -> Tuple[float, float]:
    """Returns ``(start, end)`` angles of wedge ``index``."""
    step = angle_step(count)
    return index * step, (index + 1) * step


def wedge_boundaries(count: int = len(PALETTE)) -> np.ndarray:
    """Returns the ``count + 1`` boundary angles, from 0 to exactly 2*pi."""
    step = angle_step(count)
    bounds = np.arange(count + 1, dtype=np.float64) * step
    bounds[-1] = FULL_CIRCLE
    return bounds


def outer_radius(size: float) -> float:
    """Outer wheel radius, leaving room for a shadow around the wheel."""
    return size * PADDING_FOR_SHADOW / 2.0


def wedge_path(start_angle: float, end_angle: float, size: float, radius: float) -> WedgePath:
    """Builds the outline of a single wedge on a ``size`` x ``size`` canvas.

    Knows nothing about the palette, so it serves both the colored wedges
    and the selection outline.

    Args:
        start_angle: First edge of the wedge in radians.
        end_angle: Second edge of the wedge in radians.
        size: Side of the square canvas in pixels.
        radius: Outer radius of the wedge in pixels.

    Returns:
        WedgePath: The closed path description.
    """
    center = (size / 2.0, size / 2.0)
    hole_radius = size * INTERIOR_HOLE_FRACTION
    sweep = _shortest_sweep(start_angle, end_angle)

    return WedgePath(
        start_angle=start_angle,
        end_angle=end_angle,
        inner_start=_polar(center, hole_radius, start_angle),
        outer_start=_polar(center, radius, start_angle),
        outer_arc=ArcSegment(center, radius, start_angle, sweep),
        inner_end=_polar(center, hole_radius, end_angle),
        inner_arc=ArcSegment(center, hole_radius, end_angle, -sweep),
    )


def hit_test(x: float, y: float, width: float, height: float,
             count: int = len(PALETTE)) -> int:
    """Maps a point in the wheel's local coordinates to a wedge index.

    Total over the plane. The exact center has no defined angle;
    ``atan2(0, 0)`` is 0 there, so it reports wedge 0.

    Args:
        x: Horizontal position.
        y: Vertical position (pointing down).
        width: Width of the wheel's bounding box.
        height: Height of the wheel's bounding box.
        count: Number of wedges.

    Returns:
        int: Index in ``[0, count - 1]``.
    """
    if count <= 0:
        raise ValueError(f"Wedge count must be positive, got {count}")
    angle = math.atan2(y - height / 2.0, x - width / 2.0)
    if angle < 0:
        angle += FULL_CIRCLE
    index = int(math.floor(count * angle / FULL_CIRCLE))
    # angle can round up to exactly 2*pi
    return min(max(index, 0), count - 1)


def hit_test_array(xs, ys, width: float, height: float,
                   count: int = len(PALETTE)) -> np.ndarray:
    """Vectorized :func:`hit_test` over arrays of coordinates."""
    if count <= 0:
        raise ValueError(f"Wedge count must be positive, got {count}")
    angle = np.arctan2(np.asarray(ys, dtype=np.float64) - height / 2.0,
                       np.asarray(xs, dtype=np.float64) - width / 2.0)
    angle = np.where(angle < 0, angle + FULL_CIRCLE, angle)
    index = np.floor(count * angle / FULL_CIRCLE).astype(np.int64)
    return np.clip(index, 0, count - 1)


def wedge_index_map(size: int, count: int = len(PALETTE)) -> np.ndarray:
    """Wedge index of every pixel center of a ``size`` x ``size`` canvas."""
    if size <= 0:
        raise ValueError(f"Canvas size must be positive, got {size}")
    y, x = np.ogrid[0:size, 0:size]
    return hit_test_array(x + 0.5, y + 0.5, size, size, count)


def palette_index(color: ColorLike, palette: Sequence[Rgba] = PALETTE) -> int:
    """Reverse lookup of ``color`` in the palette.

    Compares all four components for exact equality; a color missing
    from the palette resolves to wedge 0.
    """
    key = tuple(float(c) for c in color)
    if len(key) == 3:
        key = key + (1.0,)
    for index, entry in enumerate(palette):
        if key == tuple(entry):
            return index
    logger.debug("Color %s not in palette, defaulting to wedge 0", key)
    return 0


def selection_for_color(color: ColorLike) -> WedgeSelection:
    """Wraps :func:`palette_index` as the wheel's initial selection."""
    return WedgeSelection(palette_index(color))
