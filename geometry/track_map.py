"""
Track map geometry: projected lap, ribbon and hover targets.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from geometry.downsample import downsample
from geometry.hover import HoverResolver, nearest_index_by_distance
from geometry.projection import GeoProjection, ProjectedPoint, fit_projection, project_samples
from geometry.ribbon import DEDUP_PIXELS, TrackRibbon, build_ribbon, track_half_width
from geometry.viewport import IDENTITY, ViewportTransform

logger = logging.getLogger(__name__)

DEFAULT_PADDING = 20


@dataclass(frozen=True)
class TrackMapGeometry:
    """
    Everything the map view draws, in content (unzoomed) pixel space.

    Attributes:
        projection: Fitted lat/long -> pixel projection
        points: Downsampled projected points (drawn)
        ribbon: Track band, centerline and driven line, None if < 2 points
        hover_xy: (n, 2) projected full-resolution positions
        hover_samples: Samples aligned with ``hover_xy``
        hover_distances: Lap distance of each hover target
        resolver: Full-resolution hover lookup over ``hover_samples``
        start: First projected point (start/finish marker)
    """
    color: str
    width: float
    height: float
    projection: GeoProjection
    points: Tuple[ProjectedPoint, ...]
    ribbon: Optional[TrackRibbon]
    hover_xy: np.ndarray
    hover_samples: tuple
    hover_distances: np.ndarray
    resolver: HoverResolver
    start: Optional[ProjectedPoint]


def _arrays(samples):
    if hasattr(samples, "lats"):
        return samples.distances, samples.lats, samples.longs, samples.track_edges
    n = len(samples)
    return (np.fromiter((s.distance for s in samples), dtype=float, count=n),
            np.fromiter((s.lat for s in samples), dtype=float, count=n),
            np.fromiter((s.long for s in samples), dtype=float, count=n),
            np.fromiter((s.track_edge or 0.0 for s in samples), dtype=float, count=n))


def build_track_map(samples, target: int, width: float, height: float,
                    color: str = "#FFFFFF", padding: float = DEFAULT_PADDING,
                    dedup_pixels: float = DEDUP_PIXELS) -> Optional[TrackMapGeometry]:
    """
    Project a lap into a ``width`` x ``height`` map and build its ribbon.

    The projection is fitted to the downsampled positions (what is drawn),
    the ribbon half width and the hover targets use the full lap.

    Returns:
        TrackMapGeometry, or None when there is no renderable position data.
    """
    if not samples or width <= 0 or height <= 0:
        return None

    reduced = downsample(samples, target)
    if not reduced:
        return None
    _, lats, longs, _ = _arrays(reduced)
    projection = fit_projection(lats, longs, width, height, padding)
    if projection is None:
        return None

    points = tuple(project_samples(reduced, projection))
    if not points:
        return None

    full_distances, full_lats, full_longs, full_edges = _arrays(samples)
    half_width = track_half_width(full_edges)
    ribbon = build_ribbon(points, projection.pixels_per_meter,
                          half_width_m=half_width, dedup_pixels=dedup_pixels)

    hx, hy = projection.project(full_lats, full_longs)
    finite = np.isfinite(hx) & np.isfinite(hy)
    hover_xy = np.column_stack([hx[finite], hy[finite]])
    hover_samples = tuple(s for s, ok in zip(samples, finite) if ok)
    hover_distances = full_distances[finite]

    logger.debug(f"Track map: {len(points)} drawn points, {len(hover_samples)} hover targets, "
                 f"{projection.pixels_per_meter:.4f} px/m")

    return TrackMapGeometry(
        color=color,
        width=float(width),
        height=float(height),
        projection=projection,
        points=points,
        ribbon=ribbon,
        hover_xy=hover_xy,
        hover_samples=hover_samples,
        hover_distances=hover_distances,
        resolver=HoverResolver(hover_samples, distances=hover_distances),
        start=points[0],
    )


def active_marker(track: TrackMapGeometry, distance: Optional[float]) -> Optional[Tuple[float, float, object]]:
    """
    Content-space (x, y, sample) of the hover target nearest to ``distance``.
    """
    if track is None or not track.hover_samples:
        return None
    i = nearest_index_by_distance(track.hover_distances, distance)
    if i is None:
        return None
    x, y = track.hover_xy[i]
    return float(x), float(y), track.hover_samples[i]


def pointer_to_sample(track: TrackMapGeometry, x: Optional[float], y: Optional[float],
                      transform: ViewportTransform = IDENTITY):
    """
    Sample under a screen-space pointer, after undoing pan/zoom.
    """
    if track is None:
        return None
    return track.resolver.by_pointer(x, y, track.hover_xy, transform)
