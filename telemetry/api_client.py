"""
HTTP client for the telemetry backend.

Endpoints:
    GET /sessions/                 -> {"files": [session, ...]}
    GET /laps/{session}            -> [{"lap_number": n}, ...]
    GET /laps/{session}/{lap}      -> [record, ...]  (possibly JSON-in-a-string)
"""
import logging
from pathlib import Path
from typing import List, Union
from urllib.parse import quote

import requests

from telemetry.model import LapTelemetry
from telemetry.normalize import normalize_records

logger = logging.getLogger(__name__)


class TelemetryFetchError(Exception):
    """The backend could not be reached or returned unusable data."""


class TelemetryApiClient:
    """
    Thin wrapper around a requests.Session for the telemetry service.

    Args:
        base_url: Service root, e.g. "http://127.0.0.1:8000"
        timeout: Per-request timeout in seconds
    """

    def __init__(self, base_url: str, timeout: float = 10.0, session: requests.Session = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()
        self.http.headers.update({"Content-Type": "application/json"})

    def _get(self, path: str):
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url}")
        try:
            response = self.http.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise TelemetryFetchError(f"GET {path} failed: {e}") from e
        except ValueError as e:
            raise TelemetryFetchError(f"GET {path} returned invalid JSON: {e}") from e

    def list_sessions(self) -> List[str]:
        data = self._get("/sessions/")
        files = (data.get("files") if isinstance(data, dict) else None) or []
        if not isinstance(files, list):
            raise TelemetryFetchError(f"Session list is not a list: {files!r}")
        return [str(f) for f in files]

    def list_laps(self, session: str) -> List[int]:
        data = self._get(f"/laps/{quote(session, safe='')}")
        if not isinstance(data, list):
            raise TelemetryFetchError(f"Lap list for {session!r} is not a list")
        laps = []
        for item in data:
            if isinstance(item, dict) and "lap_number" in item:
                try:
                    laps.append(int(item["lap_number"]))
                except (TypeError, ValueError) as e:
                    raise TelemetryFetchError(
                        f"Lap list for {session!r} has an invalid lap number {item['lap_number']!r}"
                    ) from e
        return laps

    def fetch_lap(self, session: str, lap: int) -> LapTelemetry:
        """
        Download and normalise one lap.

        Raises:
            TelemetryFetchError: transport failure or undecodable body
        """
        data = self._get(f"/laps/{quote(session, safe='')}/{int(lap)}")
        try:
            telemetry = normalize_records(data, session=session, lap=lap)
        except ValueError as e:
            raise TelemetryFetchError(f"Lap {lap} of {session!r} is not valid JSON: {e}") from e
        logger.info(f"Fetched {len(telemetry)} samples for {session} lap {lap}")
        return telemetry


def load_lap_file(path: Union[str, Path], lap: int = 0) -> LapTelemetry:
    """
    Load a lap saved in the backend's record format from a JSON file.

    Raises:
        TelemetryFetchError: the file is missing or not valid JSON
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
        telemetry = normalize_records(text, session=path.name, lap=lap)
    except (OSError, ValueError) as e:
        raise TelemetryFetchError(f"Could not read lap file {path}: {e}") from e
    logger.info(f"Loaded {len(telemetry)} samples from {path}")
    return telemetry
