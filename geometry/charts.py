"""
Line chart geometry for one telemetry channel plotted against lap distance.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from scipy.interpolate import PchipInterpolator

from geometry.downsample import downsample
from geometry.errors import DegenerateGeometryError
from geometry.hover import nearest_index_by_distance
from geometry.scale import LinearScale, scale_from_values

logger = logging.getLogger(__name__)

MARGIN_TOP = 20
MARGIN_RIGHT = 30
MARGIN_BOTTOM = 30
MARGIN_LEFT = 50
X_TICKS = 6
Y_TICKS = 5
CURVE_SAMPLES = 4


@dataclass(frozen=True)
class ChartMarker:
    sample: object
    x: float
    y: float
    value: float


@dataclass(frozen=True)
class LineChartGeometry:
    channel: str
    color: str
    width: float
    height: float
    x_scale: LinearScale
    y_scale: LinearScale
    path: np.ndarray                      # (n, 2) pixel coordinates
    curve: np.ndarray                     # monotone cubic through ``path``
    x_ticks: List[Tuple[float, str]]      # (pixel x, label)
    y_ticks: List[Tuple[float, str]]      # (pixel y, label)
    samples: object                       # full-resolution sequence for hover

    @property
    def plot_left(self) -> float:
        return float(MARGIN_LEFT)

    @property
    def plot_right(self) -> float:
        return float(self.width - MARGIN_RIGHT)

    @property
    def plot_top(self) -> float:
        return float(MARGIN_TOP)

    @property
    def plot_bottom(self) -> float:
        return float(self.height - MARGIN_BOTTOM)


def _label(value: float) -> str:
    return f"{value:g}"


def _column(samples, channel: str) -> np.ndarray:
    if hasattr(samples, "channel"):
        return samples.channel(channel)
    return np.fromiter((s.value(channel) for s in samples), dtype=float, count=len(samples))


def _distances(samples) -> np.ndarray:
    if hasattr(samples, "distances"):
        return samples.distances
    return np.fromiter((s.distance for s in samples), dtype=float, count=len(samples))


def monotone_curve(path: np.ndarray, samples_per_segment: int = CURVE_SAMPLES) -> np.ndarray:
    """
    Monotone cubic (PCHIP) through the path points, densified along x.

    The curve passes through every point and never overshoots between two
    neighbours. Points that do not advance in x are dropped first; fewer
    than two remaining points returns the path unchanged.
    """
    path = np.asarray(path, dtype=float)
    if len(path) < 2:
        return path.copy()
    xs = path[:, 0]
    advancing = np.concatenate([[True], xs[1:] > np.maximum.accumulate(xs)[:-1]])
    xs, ys = xs[advancing], path[advancing, 1]
    if len(xs) < 2:
        return path.copy()

    frac = np.arange(samples_per_segment) / samples_per_segment
    u = (xs[:-1, None] + np.diff(xs)[:, None] * frac).ravel()
    u = np.append(u, xs[-1])
    return np.column_stack([u, PchipInterpolator(xs, ys)(u)])


def build_line_chart(samples, channel: str, target: int, width: float, height: float,
                     color: str = "#6FA8FF") -> Optional[LineChartGeometry]:
    """
    Build pixel-space geometry for a channel-vs-distance chart.

    Axis domains come from the full sequence so they do not move when the
    downsample target changes; only the drawn path is downsampled.

    Returns:
        LineChartGeometry, or None when the chart cannot be drawn (no data,
        zero-size viewport, constant distance or constant channel).
    """
    if not samples or width <= MARGIN_LEFT + MARGIN_RIGHT or height <= MARGIN_TOP + MARGIN_BOTTOM:
        return None

    try:
        x_scale = scale_from_values(_distances(samples), (MARGIN_LEFT, width - MARGIN_RIGHT))
        y_scale = scale_from_values(_column(samples, channel), (height - MARGIN_BOTTOM, MARGIN_TOP))
    except DegenerateGeometryError as e:
        logger.debug(f"Chart '{channel}' not drawn: {e}")
        return None

    reduced = downsample(samples, target)
    xs = x_scale(_distances(reduced))
    ys = y_scale(_column(reduced, channel))
    finite = np.isfinite(xs) & np.isfinite(ys)
    path = np.column_stack([xs[finite], ys[finite]])

    return LineChartGeometry(
        channel=channel,
        color=color,
        width=float(width),
        height=float(height),
        x_scale=x_scale,
        y_scale=y_scale,
        path=path,
        curve=monotone_curve(path),
        x_ticks=[(float(x_scale(t)), f"{_label(t)}m") for t in x_scale.ticks(X_TICKS)],
        y_ticks=[(float(y_scale(t)), _label(t)) for t in y_scale.ticks(Y_TICKS)],
        samples=samples,
    )


def active_marker(chart: LineChartGeometry, distance: Optional[float]) -> Optional[ChartMarker]:
    """
    Marker for the sample nearest to the shared cursor distance.
    """
    if chart is None:
        return None
    i = nearest_index_by_distance(_distances(chart.samples), distance)
    if i is None:
        return None
    sample = chart.samples[i]
    value = sample.value(chart.channel)
    x = float(chart.x_scale(sample.distance))
    y = float(chart.y_scale(value))
    if not (np.isfinite(x) and np.isfinite(y)):
        return None
    return ChartMarker(sample=sample, x=x, y=y, value=value)


def pointer_to_distance(chart: LineChartGeometry, x: Optional[float]) -> Optional[float]:
    """
    Lap distance under a pointer x, clamped to the plotted distance range.
    """
    if chart is None or x is None:
        return None
    return chart.x_scale.clamp(float(chart.x_scale.invert(x)))
