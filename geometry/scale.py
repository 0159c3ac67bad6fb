"""
Linear domain -> pixel range mapping used by chart axes and the map projector.
"""
import math
from typing import Iterable, List, Optional, Tuple

import numpy as np

from geometry.errors import DegenerateGeometryError

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def extent(values) -> Optional[Tuple[float, float]]:
    """
    Finite (min, max) of ``values``, or None when nothing finite is present.
    """
    arr = np.asarray(values, dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None
    return float(arr.min()), float(arr.max())


def _tick_increment(start: float, stop: float, count: int) -> float:
    step = (stop - start) / max(count, 1)
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    return factor * 10.0 ** power


def nice_ticks(start: float, stop: float, count: int = 10) -> List[float]:
    """
    Round-valued ticks covering [start, stop], in the order of the bounds.
    """
    if count <= 0 or not (math.isfinite(start) and math.isfinite(stop)):
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)

    inc = _tick_increment(lo, hi, count)
    if inc >= 1:
        i0, i1 = math.ceil(lo / inc), math.floor(hi / inc)
        ticks = [i * inc for i in range(i0, i1 + 1)]
    else:
        # work in multiples of the inverse to keep 0.1, 0.2 ... exact
        inv = round(1 / inc)
        i0, i1 = math.ceil(lo * inv), math.floor(hi * inv)
        ticks = [i / inv for i in range(i0, i1 + 1)]
    return ticks[::-1] if reverse else ticks


class LinearScale:
    """
    Maps a continuous domain [d0, d1] onto a pixel range [r0, r1].

    A zero-width domain cannot be mapped and raises DegenerateGeometryError.
    The range may be zero-width (everything lands on one pixel); only
    ``invert`` is undefined in that case.
    """

    def __init__(self, domain: Tuple[float, float], range_: Tuple[float, float]):
        d0, d1 = float(domain[0]), float(domain[1])
        r0, r1 = float(range_[0]), float(range_[1])
        if not all(math.isfinite(v) for v in (d0, d1, r0, r1)):
            raise DegenerateGeometryError(f"non-finite scale bounds {domain} -> {range_}")
        if d0 == d1:
            raise DegenerateGeometryError(f"zero-width domain [{d0}, {d1}]")
        self.domain = (d0, d1)
        self.range = (r0, r1)

    def __call__(self, value):
        d0, d1 = self.domain
        r0, r1 = self.range
        if isinstance(value, (list, tuple, np.ndarray)):
            value = np.asarray(value, dtype=float)
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel):
        """Map a range value (e.g. a pointer x) back into the domain."""
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            raise DegenerateGeometryError("cannot invert a zero-width range")
        if isinstance(pixel, (list, tuple, np.ndarray)):
            pixel = np.asarray(pixel, dtype=float)
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)

    def clamp(self, value: float) -> float:
        """Clamp a domain value into [min(domain), max(domain)]."""
        lo, hi = sorted(self.domain)
        return min(hi, max(lo, value))

    def ticks(self, count: int = 10) -> List[float]:
        return nice_ticks(self.domain[0], self.domain[1], count)

    def __repr__(self):
        return f"LinearScale(domain={self.domain}, range={self.range})"


def scale_from_values(values: Iterable[float], range_: Tuple[float, float]) -> LinearScale:
    """
    Build a scale whose domain is the finite extent of ``values``.

    Raises:
        DegenerateGeometryError: no finite values, or all values equal
    """
    bounds = extent(values)
    if bounds is None:
        raise DegenerateGeometryError("no finite values to build a domain from")
    return LinearScale(bounds, range_)
