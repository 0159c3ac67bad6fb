"""
Background fetch of sessions, laps and lap telemetry.

Each request runs in its own short-lived QThread so the UI never blocks on
the network. Results carry the request id; the window drops anything that
is not from its latest request.
"""
import logging

from PyQt5 import QtCore

from telemetry.api_client import TelemetryApiClient, TelemetryFetchError

logger = logging.getLogger(__name__)

SESSIONS = "sessions"
LAPS = "laps"
LAP = "lap"


class TelemetryFetchWorker(QtCore.QThread):
    """
    Runs one API request off the UI thread.

    Signals:
        sessions_loaded(int request_id, list sessions)
        laps_loaded(int request_id, list laps)
        lap_loaded(int request_id, object LapTelemetry)
        error_occurred(int request_id, str message)
        status_update(str message)
    """
    sessions_loaded = QtCore.pyqtSignal(int, list)
    laps_loaded = QtCore.pyqtSignal(int, list)
    lap_loaded = QtCore.pyqtSignal(int, object)
    error_occurred = QtCore.pyqtSignal(int, str)
    status_update = QtCore.pyqtSignal(str)

    def __init__(self, client: TelemetryApiClient, request_id: int, kind: str,
                 session: str = None, lap: int = None, parent=None):
        super().__init__(parent)
        if kind not in (SESSIONS, LAPS, LAP):
            raise ValueError(f"Unknown request kind '{kind}'")
        self.client = client
        self.request_id = request_id
        self.kind = kind
        self.session = session
        self.lap = lap

    def run(self):
        try:
            self.execute()
        except TelemetryFetchError as e:
            logger.error(f"Request {self.request_id} ({self.kind}) failed: {e}", exc_info=True)
            self.error_occurred.emit(self.request_id, str(e))
        except Exception as e:
            logger.error(f"Request {self.request_id} ({self.kind}) crashed: {e}", exc_info=True)
            self.error_occurred.emit(self.request_id, f"Unexpected error: {e}")

    def execute(self):
        """Perform the request in the calling thread and emit the result."""
        if self.kind == SESSIONS:
            self.status_update.emit("Loading sessions...")
            self.sessions_loaded.emit(self.request_id, self.client.list_sessions())
        elif self.kind == LAPS:
            self.status_update.emit(f"Loading laps for {self.session}...")
            self.laps_loaded.emit(self.request_id, self.client.list_laps(self.session))
        else:
            self.status_update.emit(f"Loading trace data for lap {self.lap}...")
            self.lap_loaded.emit(self.request_id, self.client.fetch_lap(self.session, self.lap))
