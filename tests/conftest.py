"""Shared fixtures and sample factories for the viewer tests."""

import math

import pytest

from telemetry.model import LapTelemetry, Sample


def make_sample(distance=0.0, lat=0.0, long=0.0, track_edge=0.0, time=None, **channels):
    channels = {
        "speed": 100.0,
        "rpm": 6000.0,
        "throttle": 50.0,
        "brake": 0.0,
        "gear": 3.0,
        **channels,
    }
    return Sample(
        distance=float(distance),
        time=float(distance / 50.0 if time is None else time),
        lat=lat,
        long=long,
        track_edge=track_edge,
        channels=channels,
    )


def make_lap(distances, lats=None, longs=None, track_edges=None, speeds=None, session="test", lap=1):
    n = len(distances)
    lats = lats if lats is not None else [0.0] * n
    longs = longs if longs is not None else [0.0] * n
    track_edges = track_edges if track_edges is not None else [0.0] * n
    speeds = speeds if speeds is not None else [100.0 + i for i in range(n)]
    samples = [
        make_sample(d, lat=la, long=lo, track_edge=te, speed=sp)
        for d, la, lo, te, sp in zip(distances, lats, longs, track_edges, speeds)
    ]
    return LapTelemetry(samples, session=session, lap=lap)


@pytest.fixture
def north_south_lap():
    """Five samples on a straight north-south line, 10 m apart in distance."""
    return make_lap(
        distances=[0, 10, 20, 30, 40],
        lats=[0.0, 0.0001, 0.0002, 0.0003, 0.0004],
        longs=[0.0] * 5,
        track_edges=[0, 2, -2, 0, 0],
    )


@pytest.fixture
def loop_lap():
    """A roughly circular lap of 400 samples around (47.0, 8.0)."""
    n = 400
    lats, longs = [], []
    for i in range(n):
        a = 2 * math.pi * i / n
        lats.append(47.0 + 0.004 * math.sin(a))
        longs.append(8.0 + 0.006 * math.cos(a))
    return make_lap(
        distances=[i * 5.0 for i in range(n)],
        lats=lats,
        longs=longs,
        track_edges=[3.0 * math.sin(4 * 2 * math.pi * i / n) for i in range(n)],
    )
