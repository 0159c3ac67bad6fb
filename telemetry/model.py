# telemetry/model.py
from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple, Union

import numpy as np

CHANNELS = ("speed", "rpm", "throttle", "brake", "gear")


@dataclass(frozen=True)
class Sample:
    distance: float    # metres along the lap
    time: float        # seconds
    lat: float         # GPS latitude, degrees
    long: float        # GPS longitude, degrees
    track_edge: float = 0.0    # lateral offset from centerline, metres (signed)
    channels: Dict[str, float] = field(default_factory=dict, compare=False)

    def value(self, channel: str) -> float:
        """Channel value, NaN when the channel was not recorded."""
        return float(self.channels.get(channel, np.nan))


class LapTelemetry:
    """
    Immutable, distance-ordered samples for one (session, lap) pair.

    Behaves like a tuple of Sample. Numeric columns are built once on first
    access so every view shares the same arrays. Slicing returns a new
    LapTelemetry so downsampled sequences keep the same interface.
    """

    def __init__(self, samples: Sequence[Sample], session: str = None, lap: int = None):
        self.samples: Tuple[Sample, ...] = tuple(samples)
        self.session = session
        self.lap = lap
        self._columns: Dict[str, np.ndarray] = {}

    def __len__(self):
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def __bool__(self):
        return bool(self.samples)

    def __getitem__(self, index: Union[int, slice]):
        if isinstance(index, slice):
            return LapTelemetry(self.samples[index], session=self.session, lap=self.lap)
        return self.samples[index]

    def __repr__(self):
        return f"LapTelemetry(session={self.session!r}, lap={self.lap!r}, samples={len(self)})"

    def _column(self, key: str, getter) -> np.ndarray:
        arr = self._columns.get(key)
        if arr is None:
            arr = np.fromiter((getter(s) for s in self.samples), dtype=float, count=len(self.samples))
            arr.setflags(write=False)
            self._columns[key] = arr
        return arr

    @property
    def distances(self) -> np.ndarray:
        return self._column("distance", lambda s: s.distance)

    @property
    def times(self) -> np.ndarray:
        return self._column("time", lambda s: s.time)

    @property
    def lats(self) -> np.ndarray:
        return self._column("lat", lambda s: s.lat)

    @property
    def longs(self) -> np.ndarray:
        return self._column("long", lambda s: s.long)

    @property
    def track_edges(self) -> np.ndarray:
        return self._column("track_edge", lambda s: s.track_edge)

    def channel(self, name: str) -> np.ndarray:
        return self._column(f"ch:{name}", lambda s: s.value(name))
