"""Tests for the lap data model."""

import math

import numpy as np
import pytest

from telemetry.model import CHANNELS, LapTelemetry
from tests.conftest import make_lap, make_sample


class TestSample:
    def test_missing_channel_is_nan(self):
        s = make_sample(10)
        assert s.value("speed") == 100
        assert math.isnan(s.value("oil_temp"))

    def test_frozen(self):
        s = make_sample(10)
        with pytest.raises(AttributeError):
            s.distance = 11


class TestLapTelemetry:
    def test_sequence_behaviour(self):
        lap = make_lap(distances=[0, 10, 20])
        assert len(lap) == 3
        assert bool(lap)
        assert not LapTelemetry([])
        assert [s.distance for s in lap] == [0, 10, 20]

    def test_slice_keeps_type_and_tags(self):
        lap = make_lap(distances=[0, 10, 20, 30], session="s.csv", lap=4)
        part = lap[::2]
        assert isinstance(part, LapTelemetry)
        assert part.session == "s.csv" and part.lap == 4
        assert list(part.distances) == [0, 20]
        assert part[1] is lap[2]

    def test_columns_are_cached_and_read_only(self):
        lap = make_lap(distances=[0, 10, 20])
        assert lap.distances is lap.distances
        with pytest.raises(ValueError):
            lap.distances[0] = 5

    def test_channel_columns(self):
        lap = make_lap(distances=[0, 10], speeds=[150, 160])
        assert np.array_equal(lap.channel("speed"), [150, 160])
        assert np.all(np.isnan(lap.channel("nope")))
        assert set(CHANNELS) <= set(lap[0].channels)
