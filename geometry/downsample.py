"""
Fixed-stride downsampling shared by every view.

Every chart and the track map reduce the lap to the same target point count
with the same stride, so a given (sequence, target) pair always draws the
same samples. Hover lookups never go through here; they use the full lap.
"""
from typing import Sequence, TypeVar

T = TypeVar("T")


def stride_for(n: int, target: int) -> int:
    """
    Stride used to reduce ``n`` samples to at most ``target`` points.

    Returns 1 when no reduction is needed.
    """
    if target <= 0:
        raise ValueError(f"target must be positive, got {target}")
    if n <= target:
        return 1
    return -(-n // target)  # ceil(n / target) on integers


def downsample(samples: Sequence[T], target: int) -> Sequence[T]:
    """
    Keep every stride-th sample, always including the first one.

    Args:
        samples: Any sliceable sequence (list, tuple, ndarray, LapTelemetry)
        target: Maximum number of points a view may draw

    Returns:
        An empty slice when ``target <= 0``, the input object itself when it
        is already short enough, otherwise ``samples[::stride]``.
    """
    if target <= 0:
        return samples[:0]
    n = len(samples)
    if n <= target:
        return samples
    return samples[::stride_for(n, target)]
