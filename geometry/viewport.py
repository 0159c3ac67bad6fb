"""
Pan/zoom state of the track map.

A transform maps content (projected) coordinates to screen coordinates:

    screen = content * scale + translate

Hit-testing goes the other way through ``invert``.
"""
import enum
from dataclasses import dataclass, replace
from typing import Tuple

import numpy as np

DEFAULT_MAX_ZOOM = 15.0
DEFAULT_RESET_MS = 750.0


class ViewState(enum.Enum):
    IDLE = "idle"
    TRANSFORMED = "transformed"


@dataclass(frozen=True)
class ViewportTransform:
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    @property
    def is_identity(self) -> bool:
        return self.scale == 1.0 and self.translate_x == 0.0 and self.translate_y == 0.0

    @property
    def state(self) -> ViewState:
        return ViewState.IDLE if self.is_identity else ViewState.TRANSFORMED

    def apply(self, x, y) -> Tuple:
        """Content -> screen. Accepts scalars or numpy arrays."""
        return x * self.scale + self.translate_x, y * self.scale + self.translate_y

    def invert(self, x, y) -> Tuple:
        """Screen -> content (subtract translation, divide by scale)."""
        return (x - self.translate_x) / self.scale, (y - self.translate_y) / self.scale

    def apply_xy(self, xy: np.ndarray) -> np.ndarray:
        """Apply to an (n, 2) array."""
        return np.asarray(xy, dtype=float) * self.scale + (self.translate_x, self.translate_y)

    def clamped(self, max_scale: float = DEFAULT_MAX_ZOOM) -> "ViewportTransform":
        """Same transform with scale limited to [1, max_scale]."""
        k = min(max_scale, max(1.0, self.scale))
        if k == self.scale:
            return self
        return replace(self, scale=k)

    def zoomed(self, factor: float, cx: float, cy: float,
               max_scale: float = DEFAULT_MAX_ZOOM) -> "ViewportTransform":
        """
        Zoom by ``factor`` keeping the screen point (cx, cy) fixed.

        The resulting scale is clamped to [1, max_scale]; the translation is
        derived from the clamped scale so the anchor never drifts.
        """
        k = min(max_scale, max(1.0, self.scale * factor))
        px, py = self.invert(cx, cy)
        return ViewportTransform(scale=k, translate_x=cx - px * k, translate_y=cy - py * k)

    def panned(self, dx: float, dy: float) -> "ViewportTransform":
        return replace(self, translate_x=self.translate_x + dx, translate_y=self.translate_y + dy)

    def as_tuple(self) -> Tuple[float, float, float]:
        return self.scale, self.translate_x, self.translate_y


IDENTITY = ViewportTransform()


def _ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


class ResetAnimation:
    """
    Interpolates from a starting transform back to IDENTITY.

    ``at(elapsed_ms)`` is pure; the caller owns the clock. Once ``elapsed_ms``
    reaches the duration the result is exactly IDENTITY.
    """

    def __init__(self, start: ViewportTransform, duration_ms: float = DEFAULT_RESET_MS):
        self.start = start
        self.duration_ms = float(duration_ms)

    def finished(self, elapsed_ms: float) -> bool:
        return elapsed_ms >= self.duration_ms

    def at(self, elapsed_ms: float) -> ViewportTransform:
        if self.duration_ms <= 0 or self.finished(elapsed_ms):
            return IDENTITY
        e = _ease_cubic_in_out(max(0.0, elapsed_ms) / self.duration_ms)
        s = self.start
        return ViewportTransform(
            scale=s.scale + (1.0 - s.scale) * e,
            translate_x=s.translate_x * (1.0 - e),
            translate_y=s.translate_y * (1.0 - e),
        )
