"""Tests for the telemetry backend client and the fetch worker."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from telemetry.api_client import TelemetryApiClient, TelemetryFetchError, load_lap_file
from tests.test_normalize import RECORD


def make_client(payload=None, error=None):
    http = MagicMock()
    if error is not None:
        http.get.side_effect = error
    else:
        http.get.return_value.json.return_value = payload
    return TelemetryApiClient("http://backend:8000/", timeout=3, session=http), http


class TestTelemetryApiClient:
    def test_list_sessions(self):
        client, http = make_client({"files": ["a.csv", "b.csv"]})
        assert client.list_sessions() == ["a.csv", "b.csv"]
        http.get.assert_called_once_with("http://backend:8000/sessions/", timeout=3)

    def test_list_laps_quotes_session(self):
        client, http = make_client([{"lap_number": 0}, {"lap_number": 1}])
        assert client.list_laps("my session.csv") == [0, 1]
        assert http.get.call_args[0][0] == "http://backend:8000/laps/my%20session.csv"

    def test_fetch_lap(self):
        client, http = make_client([RECORD])
        lap = client.fetch_lap("a.csv", 2)
        assert http.get.call_args[0][0] == "http://backend:8000/laps/a.csv/2"
        assert len(lap) == 1
        assert lap.session == "a.csv" and lap.lap == 2

    def test_fetch_lap_json_in_string(self):
        client, _ = make_client(json.dumps([RECORD]))
        assert len(client.fetch_lap("a.csv", 0)) == 1

    def test_fetch_lap_broken_string(self):
        client, _ = make_client("{oops")
        with pytest.raises(TelemetryFetchError):
            client.fetch_lap("a.csv", 0)

    def test_transport_error(self):
        client, _ = make_client(error=requests.ConnectionError("refused"))
        with pytest.raises(TelemetryFetchError):
            client.list_sessions()

    def test_http_error_status(self):
        client, http = make_client({})
        http.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")
        with pytest.raises(TelemetryFetchError):
            client.list_laps("missing.csv")

    def test_invalid_json_body(self):
        client, http = make_client()
        http.get.return_value.json.side_effect = ValueError("no json")
        with pytest.raises(TelemetryFetchError):
            client.list_sessions()

    def test_null_session_list_is_empty(self):
        client, _ = make_client({"files": None})
        assert client.list_sessions() == []

    def test_session_list_wrong_shape(self):
        client, _ = make_client({"files": "a.csv"})
        with pytest.raises(TelemetryFetchError):
            client.list_sessions()

    @pytest.mark.parametrize("lap_number", ["abc", None, [1]])
    def test_invalid_lap_number(self, lap_number):
        client, _ = make_client([{"lap_number": 0}, {"lap_number": lap_number}])
        with pytest.raises(TelemetryFetchError):
            client.list_laps("a.csv")


class TestLoadLapFile:
    def test_reads_records(self, tmp_path):
        path = tmp_path / "lap.json"
        path.write_text(json.dumps([RECORD, dict(RECORD, **{"Lap Dist": 251.0})]), encoding="utf-8")
        lap = load_lap_file(path, lap=4)
        assert len(lap) == 2
        assert lap.session == "lap.json" and lap.lap == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(TelemetryFetchError):
            load_lap_file(tmp_path / "nope.json")


class TestFetchWorker:
    def test_emits_result_with_request_id(self):
        pytest.importorskip("PyQt5.QtCore")
        from telemetry.fetch_worker import LAPS, TelemetryFetchWorker

        client = MagicMock()
        client.list_laps.return_value = [1, 2, 3]
        worker = TelemetryFetchWorker(client, 7, LAPS, session="a.csv")
        received = []
        worker.laps_loaded.connect(lambda rid, laps: received.append((rid, laps)))
        worker.execute()
        assert received == [(7, [1, 2, 3])]

    def test_fetch_error_becomes_signal(self):
        pytest.importorskip("PyQt5.QtCore")
        from telemetry.fetch_worker import LAP, TelemetryFetchWorker

        client = MagicMock()
        client.fetch_lap.side_effect = TelemetryFetchError("boom")
        worker = TelemetryFetchWorker(client, 3, LAP, session="a.csv", lap=1)
        errors = []
        worker.error_occurred.connect(lambda rid, msg: errors.append((rid, msg)))
        worker.run()
        assert errors == [(3, "boom")]

    def test_unknown_kind(self):
        pytest.importorskip("PyQt5.QtCore")
        from telemetry.fetch_worker import TelemetryFetchWorker

        with pytest.raises(ValueError):
            TelemetryFetchWorker(MagicMock(), 1, "everything")

    def test_malformed_lap_list_reported(self):
        pytest.importorskip("PyQt5.QtCore")
        from telemetry.fetch_worker import LAPS, TelemetryFetchWorker

        client, _ = make_client([{"lap_number": "abc"}])
        worker = TelemetryFetchWorker(client, 5, LAPS, session="a.csv")
        errors = []
        worker.error_occurred.connect(lambda rid, msg: errors.append((rid, msg)))
        worker.run()
        assert len(errors) == 1 and errors[0][0] == 5

    def test_unexpected_exception_reported(self):
        pytest.importorskip("PyQt5.QtCore")
        from telemetry.fetch_worker import SESSIONS, TelemetryFetchWorker

        client = MagicMock()
        client.list_sessions.side_effect = KeyError("files")
        worker = TelemetryFetchWorker(client, 9, SESSIONS)
        errors = []
        worker.error_occurred.connect(lambda rid, msg: errors.append((rid, msg)))
        worker.run()
        assert [rid for rid, _ in errors] == [9]
