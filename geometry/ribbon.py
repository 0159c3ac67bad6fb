"""
Track ribbon reconstruction from a projected centerline.

The map has no surveyed track edges, only the GPS trace and a recorded
lateral offset per sample. The ribbon is built by offsetting the projected
centerline along its normals:

    left  = p + n * half_width_px
    right = p - n * half_width_px
    line  = p + n * track_edge * pixels_per_meter

where n is the left normal of the unit tangent at p. All paths are then
smoothed with a clamped cubic B-spline.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy.interpolate import BSpline

from geometry.projection import ProjectedPoint

logger = logging.getLogger(__name__)

MIN_HALF_WIDTH_M = 10.0
HALF_WIDTH_MARGIN = 1.1
DEDUP_PIXELS = 0.5
_TANGENT_EPS = 1e-9
SPLINE_DEGREE = 3


@dataclass(frozen=True)
class TrackRibbon:
    """
    Ribbon geometry in (unzoomed) pixel space.

    Raw arrays are (n, 2) and aligned with ``points``; smoothed arrays are
    denser B-spline samples of the same paths.
    """
    points: tuple
    half_width_m: float
    half_width_px: float
    centerline: np.ndarray
    normals: np.ndarray
    left_edge: np.ndarray
    right_edge: np.ndarray
    driven_line: np.ndarray
    smooth_centerline: np.ndarray
    smooth_left: np.ndarray
    smooth_right: np.ndarray
    smooth_driven: np.ndarray
    polygon: np.ndarray


def track_half_width(track_edges) -> float:
    """
    Half width of the drawn track in metres.

    Wide enough to contain the furthest recorded lateral offset with 10%
    margin, and never below 10 m.
    """
    edges = np.abs(np.asarray(track_edges, dtype=float))
    edges = edges[np.isfinite(edges)]
    widest = float(edges.max()) if edges.size else 0.0
    return max(MIN_HALF_WIDTH_M, HALF_WIDTH_MARGIN * widest)


def dedupe_points(points: Sequence[ProjectedPoint], threshold: float = DEDUP_PIXELS) -> list:
    """
    Drop points closer than ``threshold`` pixels to the previously kept one.
    """
    kept = []
    last_x = last_y = None
    limit = threshold * threshold
    for p in points:
        if last_x is not None:
            dx = p.x - last_x
            dy = p.y - last_y
            if dx * dx + dy * dy < limit:
                continue
        kept.append(p)
        last_x, last_y = p.x, p.y
    return kept


def unit_tangents(xy: np.ndarray) -> Optional[np.ndarray]:
    """
    Central-difference unit tangents with clamped end neighbours.

    Where the neighbour span collapses (the path doubles back on itself) the
    last valid tangent is reused. Returns None if no tangent is valid.
    """
    n = len(xy)
    if n < 2:
        return None
    idx = np.arange(n)
    prev_i = np.maximum(idx - 1, 0)
    next_i = np.minimum(idx + 1, n - 1)
    span = xy[next_i] - xy[prev_i]
    length = np.hypot(span[:, 0], span[:, 1])
    valid = length > _TANGENT_EPS
    if not valid.any():
        return None

    # forward-fill from the last valid index; leading gaps take the first valid one
    source = np.where(valid, idx, -1)
    source = np.maximum.accumulate(source)
    source[source < 0] = int(np.argmax(valid))
    return span[source] / length[source][:, None]


def basis_spline(xy: np.ndarray, samples_per_segment: int = 4) -> np.ndarray:
    """
    Sample a uniform cubic B-spline over control points ``xy``.

    End points are tripled so the curve starts and ends exactly on the data.
    Each knot span is sampled ``samples_per_segment`` times, plus the final
    end point, giving ``(n + 1) * samples_per_segment + 1`` points.
    """
    xy = np.asarray(xy, dtype=float)
    if len(xy) < 2:
        return xy.copy()
    ctrl = np.concatenate([xy[:1], xy[:1], xy, xy[-1:], xy[-1:]])
    k = SPLINE_DEGREE
    knots = np.arange(len(ctrl) + k + 1, dtype=float)
    spline = BSpline(knots, ctrl, k, extrapolate=False)

    segments = len(ctrl) - k
    u = k + np.arange(segments * samples_per_segment) / samples_per_segment
    return np.vstack([spline(u), xy[-1:]])


def build_ribbon(points: Sequence[ProjectedPoint], pixels_per_meter: float,
                 half_width_m: float = None, dedup_pixels: float = DEDUP_PIXELS,
                 samples_per_segment: int = 4) -> Optional[TrackRibbon]:
    """
    Build ribbon edges, driven line and closed polygon for a projected lap.

    Args:
        points: Projected points in lap order (each carrying its Sample)
        pixels_per_meter: From the projection, converts metre offsets to pixels
        half_width_m: Half width to use; computed from ``points`` when None
        dedup_pixels: Merge distance for consecutive points
        samples_per_segment: B-spline density

    Returns:
        TrackRibbon, or None with fewer than 2 distinct points.
    """
    pts = dedupe_points(points, dedup_pixels)
    if len(pts) < 2:
        logger.debug(f"Ribbon needs 2 distinct points, got {len(pts)}")
        return None
    if not np.isfinite(pixels_per_meter) or pixels_per_meter <= 0:
        return None

    xy = np.array([(p.x, p.y) for p in pts], dtype=float)
    tangents = unit_tangents(xy)
    if tangents is None:
        return None
    normals = np.column_stack([-tangents[:, 1], tangents[:, 0]])

    offsets = np.array([getattr(p.sample, "track_edge", 0.0) or 0.0 for p in pts], dtype=float)
    offsets = np.nan_to_num(offsets, nan=0.0, posinf=0.0, neginf=0.0)
    if half_width_m is None:
        half_width_m = track_half_width(offsets)
    half_width_px = half_width_m * pixels_per_meter

    left = xy + normals * half_width_px
    right = xy - normals * half_width_px
    driven = xy + normals * (offsets * pixels_per_meter)[:, None]

    smooth_left = basis_spline(left, samples_per_segment)
    smooth_right = basis_spline(right, samples_per_segment)
    polygon = np.vstack([smooth_left, smooth_right[::-1], smooth_left[:1]])

    return TrackRibbon(
        points=tuple(pts),
        half_width_m=half_width_m,
        half_width_px=half_width_px,
        centerline=xy,
        normals=normals,
        left_edge=left,
        right_edge=right,
        driven_line=driven,
        smooth_centerline=basis_spline(xy, samples_per_segment),
        smooth_left=smooth_left,
        smooth_right=smooth_right,
        smooth_driven=basis_spline(driven, samples_per_segment),
        polygon=polygon,
    )
