"""
Backend record -> Sample conversion.

The telemetry service returns one JSON object per sample using its logger's
channel names. Everything downstream only sees Sample / LapTelemetry.
"""
import json
import logging
import math
from typing import Any, Dict, Iterable, Optional, Union

from telemetry.model import LapTelemetry, Sample

logger = logging.getLogger(__name__)

# backend field -> channel name
CHANNEL_FIELDS = {
    "Ground Speed": "speed",
    "Engine RPM": "rpm",
    "Throttle Pos": "throttle",
    "Brake Pos": "brake",
    "Gear": "gear",
}

DISTANCE_FIELD = "Lap Dist"
TIME_FIELD = "Time"
LAT_FIELD = "GPS Latitude"
LONG_FIELD = "GPS Longitude"
TRACK_EDGE_FIELD = "Track Edge"


def _number(value: Any, default: float = math.nan) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def record_to_sample(record: Dict[str, Any]) -> Optional[Sample]:
    """
    Convert one backend record. Returns None when it has no usable distance.

    Missing gear and lateral offset become 0. Missing GPS becomes NaN so the
    map skips the sample instead of drawing it at (0, 0).
    """
    distance = _number(record.get(DISTANCE_FIELD))
    if math.isnan(distance):
        return None

    channels = {name: _number(record.get(field)) for field, name in CHANNEL_FIELDS.items()}
    if math.isnan(channels["gear"]):
        channels["gear"] = 0.0

    return Sample(
        distance=distance,
        time=_number(record.get(TIME_FIELD)),
        lat=_number(record.get(LAT_FIELD)),
        long=_number(record.get(LONG_FIELD)),
        track_edge=_number(record.get(TRACK_EDGE_FIELD), default=0.0),
        channels=channels,
    )


def normalize_records(payload: Union[str, bytes, Iterable[Dict[str, Any]]],
                      session: str = None, lap: int = None) -> LapTelemetry:
    """
    Build a LapTelemetry from a decoded (or still JSON-encoded) record list.

    Args:
        payload: List of records, or a JSON string holding one
        session: Session identifier to tag the lap with
        lap: Lap number to tag the lap with

    Raises:
        ValueError: payload is a string that is not valid JSON
    """
    if isinstance(payload, (str, bytes)):
        payload = json.loads(payload)

    if not isinstance(payload, list):
        logger.warning(f"Telemetry payload is not a list ({type(payload).__name__}), treating as empty")
        return LapTelemetry([], session=session, lap=lap)

    samples = []
    dropped = 0
    for record in payload:
        sample = record_to_sample(record) if isinstance(record, dict) else None
        if sample is None:
            dropped += 1
            continue
        samples.append(sample)

    if dropped:
        logger.info(f"Dropped {dropped} telemetry records without a lap distance")
    return LapTelemetry(samples, session=session, lap=lap)
