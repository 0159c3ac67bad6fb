"""
Runtime configuration.

Values come from the environment (a local .env file is loaded first) and
fall back to the defaults below.
"""
import os

from dotenv import load_dotenv

load_dotenv()


def _int(name: str, default: int) -> int:
    return int(os.getenv(name, default))


def _float(name: str, default: float) -> float:
    return float(os.getenv(name, default))


# Telemetry backend
TELEMETRY_API_URL = os.getenv("TELEMETRY_API_URL", "http://127.0.0.1:8000")
TELEMETRY_API_TIMEOUT = _float("TELEMETRY_API_TIMEOUT", 10.0)

# Resolution (downsample target) control
DEFAULT_RESOLUTION = _int("DEFAULT_RESOLUTION", 4000)
MIN_RESOLUTION = _int("MIN_RESOLUTION", 100)
RESOLUTION_STEP = _int("RESOLUTION_STEP", 100)

# Track map
MAX_ZOOM = _float("MAX_ZOOM", 15.0)
ZOOM_RESET_MS = _int("ZOOM_RESET_MS", 750)
MAP_PADDING = _float("MAP_PADDING", 20.0)
DEDUP_PIXELS = _float("DEDUP_PIXELS", 0.5)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
