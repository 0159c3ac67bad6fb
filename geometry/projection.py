"""
Geographic (lat, long) -> planar pixel projection for the track map.

Uses an equirectangular projection around the lap's mean latitude: one
degree of longitude is shortened by cos(lat) so the track keeps its real
shape, then the result is fitted into the viewport with a uniform scale and
letterboxed on the shorter axis.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from geometry.errors import DegenerateGeometryError
from geometry.scale import LinearScale, extent

logger = logging.getLogger(__name__)

METERS_PER_DEGREE = 111139.0   # metres per degree of longitude at the equator


@dataclass(frozen=True)
class ProjectedPoint:
    x: float
    y: float
    sample: Any


@dataclass(frozen=True)
class GeoProjection:
    """
    Result of fitting a lap into a viewport.

    Attributes:
        x_scale: longitude -> pixel column
        y_scale: latitude -> pixel row (inverted, north is up)
        aspect_correction: cos(mean latitude)
        pixels_per_meter: ground metres -> pixels at the chosen scale
    """
    x_scale: LinearScale
    y_scale: LinearScale
    aspect_correction: float
    pixels_per_meter: float
    width: float
    height: float

    def project(self, lats, longs) -> Tuple[np.ndarray, np.ndarray]:
        """Project arrays of coordinates; returns (xs, ys)."""
        xs = self.x_scale(np.asarray(longs, dtype=float))
        ys = self.y_scale(np.asarray(lats, dtype=float))
        return xs, ys


def _centered_scale(value: float, center_px: float) -> LinearScale:
    # Zero-range axis: every coordinate lands on the viewport centre line.
    return LinearScale((value - 0.5, value + 0.5), (center_px, center_px))


def fit_projection(lats: Sequence[float], longs: Sequence[float],
                   width: float, height: float, padding: float = 20) -> Optional[GeoProjection]:
    """
    Fit the given coordinates into a ``width`` x ``height`` viewport.

    Args:
        lats: Latitudes in degrees (non-finite values are ignored)
        longs: Longitudes in degrees (non-finite values are ignored)
        width: Viewport width in pixels
        height: Viewport height in pixels
        padding: Inset kept free on every side

    Returns:
        GeoProjection, or None when there is nothing renderable: no finite
        coordinates, a single point, or a viewport too small for the padding.
    """
    inner_w = width - 2 * padding
    inner_h = height - 2 * padding
    if inner_w <= 0 or inner_h <= 0:
        logger.debug(f"Viewport {width}x{height} too small for padding {padding}")
        return None

    lats = np.asarray(lats, dtype=float)
    longs = np.asarray(longs, dtype=float)
    ok = np.isfinite(lats) & np.isfinite(longs)
    long_extent = extent(longs[ok])
    lat_extent = extent(lats[ok])
    if long_extent is None or lat_extent is None:
        logger.debug("No finite GPS coordinates to project")
        return None

    long_range = long_extent[1] - long_extent[0]
    lat_range = lat_extent[1] - lat_extent[0]
    if long_range == 0 and lat_range == 0:
        logger.debug("All GPS samples at a single position, nothing to draw")
        return None

    avg_lat_rad = (lat_extent[0] + lat_extent[1]) / 2 * (math.pi / 180)
    aspect_correction = math.cos(avg_lat_rad)
    if lat_range == 0:
        data_aspect = math.inf
    else:
        data_aspect = (long_range * aspect_correction) / lat_range
    container_aspect = inner_w / inner_h

    try:
        if data_aspect > container_aspect:
            # fit to width, letterbox vertically
            scale_w = inner_w
            scale_h = scale_w / data_aspect
            top = (height - scale_h) / 2
            x_scale = LinearScale(long_extent, (padding, width - padding))
            if lat_range == 0:
                y_scale = _centered_scale(lat_extent[0], height / 2)
            else:
                y_scale = LinearScale(lat_extent, (top + scale_h, top))
            pixels_per_meter = scale_w / (long_range * METERS_PER_DEGREE * aspect_correction)
        else:
            # fit to height, letterbox horizontally
            scale_h = inner_h
            scale_w = scale_h * data_aspect
            left = (width - scale_w) / 2
            y_scale = LinearScale(lat_extent, (height - padding, padding))
            if long_range == 0:
                x_scale = _centered_scale(long_extent[0], width / 2)
            else:
                x_scale = LinearScale(long_extent, (left, left + scale_w))
            pixels_per_meter = scale_h / (lat_range * METERS_PER_DEGREE)
    except DegenerateGeometryError as e:
        logger.debug(f"Projection degenerate: {e}")
        return None

    if not math.isfinite(pixels_per_meter) or pixels_per_meter <= 0:
        return None

    return GeoProjection(
        x_scale=x_scale,
        y_scale=y_scale,
        aspect_correction=aspect_correction,
        pixels_per_meter=pixels_per_meter,
        width=float(width),
        height=float(height),
    )


def project_samples(samples, projection: GeoProjection) -> List[ProjectedPoint]:
    """
    Project every sample with finite coordinates, preserving order.
    """
    lats = np.fromiter((s.lat for s in samples), dtype=float, count=len(samples))
    longs = np.fromiter((s.long for s in samples), dtype=float, count=len(samples))
    xs, ys = projection.project(lats, longs)
    return [
        ProjectedPoint(float(x), float(y), s)
        for x, y, s in zip(xs, ys, samples)
        if math.isfinite(x) and math.isfinite(y)
    ]
