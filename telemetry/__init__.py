"""
Telemetry data model and the backend client that produces it.
"""
from telemetry.model import CHANNELS, LapTelemetry, Sample
from telemetry.normalize import normalize_records, record_to_sample
from telemetry.api_client import TelemetryApiClient, TelemetryFetchError, load_lap_file

__all__ = [
    'CHANNELS', 'LapTelemetry', 'Sample',
    'normalize_records', 'record_to_sample',
    'TelemetryApiClient', 'TelemetryFetchError', 'load_lap_file',
]
