"""
Nearest-sample lookup that keeps every view on the same cursor position.

Both query modes are plain linear scans over the full-resolution lap; no
index structure is kept. np.argmin returns the first minimum, so ties go to
the lowest index.
"""
from typing import Optional, Sequence

import numpy as np

from geometry.viewport import IDENTITY, ViewportTransform


def nearest_index_by_distance(distances, query: Optional[float]) -> Optional[int]:
    """
    Index minimising |distances[i] - query|, or None for no query / no data.
    """
    if query is None:
        return None
    distances = np.asarray(distances, dtype=float)
    if distances.size == 0 or not np.isfinite(query):
        return None
    diff = np.abs(distances - query)
    diff[~np.isfinite(diff)] = np.inf
    if not np.isfinite(diff).any():
        return None
    return int(np.argmin(diff))


def nearest_index_by_position(xy, x: float, y: float) -> Optional[int]:
    """
    Index of the (n, 2) point with the smallest squared distance to (x, y).
    """
    xy = np.asarray(xy, dtype=float)
    if xy.size == 0 or not (np.isfinite(x) and np.isfinite(y)):
        return None
    d2 = (xy[:, 0] - x) ** 2 + (xy[:, 1] - y) ** 2
    d2[~np.isfinite(d2)] = np.inf
    if not np.isfinite(d2).any():
        return None
    return int(np.argmin(d2))


class HoverResolver:
    """
    Resolves cursor queries against one lap at full resolution.

    Args:
        samples: The complete (not downsampled) sample sequence
        distances: Precomputed lap distances aligned with ``samples``
    """

    def __init__(self, samples: Sequence, distances=None):
        self.samples = samples
        if distances is None:
            distances = getattr(samples, "distances", None)
        if distances is None:
            distances = np.fromiter((s.distance for s in samples), dtype=float, count=len(samples))
        self.distances = distances

    def by_distance(self, query: Optional[float]):
        """Sample nearest to ``query`` metres along the lap."""
        i = nearest_index_by_distance(self.distances, query)
        return None if i is None else self.samples[i]

    def by_pointer(self, x: Optional[float], y: Optional[float], projected_xy,
                   transform: ViewportTransform = IDENTITY):
        """
        Sample whose projected position is nearest to a screen-space pointer.

        Args:
            x, y: Pointer position in screen pixels, None when outside the view
            projected_xy: (n, 2) content-space positions aligned with the samples
            transform: Current pan/zoom, inverted before comparing
        """
        if x is None or y is None or len(projected_xy) == 0:
            return None
        cx, cy = transform.invert(x, y)
        i = nearest_index_by_position(projected_xy, cx, cy)
        return None if i is None else self.samples[i]
