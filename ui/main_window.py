"""
Main window for the lap telemetry viewer.
"""
import logging
from typing import Optional

from PyQt5 import QtCore
from PyQt5.QtWidgets import (
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QSlider,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

import config
from geometry.hover import HoverResolver
from telemetry.api_client import TelemetryApiClient
from telemetry.fetch_worker import LAP, LAPS, SESSIONS, TelemetryFetchWorker
from telemetry.model import CHANNELS, LapTelemetry
from ui import styles
from ui.canvases import LineChartCanvas, TrackMapCanvas
from ui.cursor import ActiveCursor

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Lap analysis window.

    Displays:
    - Session / lap selection and the resolution (downsample target) control
    - Speed, RPM, throttle, brake and gear traces against lap distance
    - GPS track map with ribbon and racing line
    - Lap info panel with the hovered sample's values

    The window owns the loaded lap and the ActiveCursor; every view gets the
    cursor's ``set`` as its hover callback and redraws its own marker when
    the cursor changes.
    """

    def __init__(self, client: Optional[TelemetryApiClient] = None,
                 resolution: int = config.DEFAULT_RESOLUTION):
        super().__init__()

        self.setWindowTitle("Lap Telemetry Viewer")
        self.resize(1600, 900)

        self.client = client
        self.lap: Optional[LapTelemetry] = None
        self.resolver: Optional[HoverResolver] = None
        self.resolution = resolution

        self.cursor = ActiveCursor(self)
        self.cursor.changed.connect(self._on_cursor_changed)

        # Request bookkeeping: only the latest request of each kind is applied
        self._request_seq = 0
        self._latest = {SESSIONS: None, LAPS: None, LAP: None}
        self._workers = []

        central = QWidget()
        self.setCentralWidget(central)

        root_layout = QVBoxLayout()
        root_layout.setContentsMargins(8, 8, 8, 8)
        root_layout.setSpacing(10)
        central.setLayout(root_layout)

        root_layout.addLayout(self._build_header())

        body = QHBoxLayout()
        body.setSpacing(10)
        body.addLayout(self._build_chart_column(), 2)
        body.addLayout(self._build_map_column(), 1)
        root_layout.addLayout(body, 1)

        self.charts = [self.channel_canvases[name] for name in CHANNELS]
        self.views = self.charts + [self.track_canvas]
        for view in self.views:
            view.set_hover_callback(self.cursor.set)

        self.setStyleSheet(styles.DARK_STYLESHEET)
        self.statusBar().showMessage("No session selected")

    # ==========================================================================
    # Layout
    # ==========================================================================

    def _build_header(self):
        """Build header: title, resolution control, session / lap selectors."""
        header = QHBoxLayout()
        header.setSpacing(12)

        title = QLabel("Telemetry<span style='color: #3B82F6;'>Hub</span>")
        title.setStyleSheet("font-size: 16px; font-weight: bold;")
        header.addWidget(title)
        header.addStretch()

        header.addWidget(QLabel("Resolution:"))
        self.resolution_slider = QSlider(QtCore.Qt.Horizontal)
        self.resolution_slider.setFixedWidth(200)
        self.resolution_spin = QSpinBox()
        self.resolution_spin.setFixedWidth(80)
        for control in (self.resolution_slider, self.resolution_spin):
            control.setMinimum(config.MIN_RESOLUTION)
            control.setMaximum(max(config.MIN_RESOLUTION, self.resolution))
            control.setSingleStep(config.RESOLUTION_STEP)
            control.setValue(self.resolution)
            control.setEnabled(False)
        self.resolution_slider.setPageStep(config.RESOLUTION_STEP)
        self.resolution_slider.valueChanged.connect(self._on_resolution_changed)
        self.resolution_spin.valueChanged.connect(self._on_resolution_changed)
        header.addWidget(self.resolution_slider)
        header.addWidget(self.resolution_spin)
        header.addWidget(QLabel("pts"))

        self.session_combo = QComboBox()
        self.session_combo.setMinimumWidth(220)
        self.session_combo.setPlaceholderText("Select session")
        self.session_combo.activated.connect(self._on_session_activated)
        header.addWidget(self.session_combo)

        self.lap_combo = QComboBox()
        self.lap_combo.setMinimumWidth(100)
        self.lap_combo.setPlaceholderText("Select lap")
        self.lap_combo.setEnabled(False)
        self.lap_combo.activated.connect(self._on_lap_activated)
        header.addWidget(self.lap_combo)

        return header

    def _build_chart_column(self):
        """Build left column: one trace per channel."""
        col = QVBoxLayout()
        col.setSpacing(6)

        self.channel_canvases = {}
        for name in CHANNELS:
            title, color, fmt = styles.CHANNEL_STYLES[name]
            canvas = LineChartCanvas(name, title=title, color=color, value_format=fmt, parent=self)
            self.channel_canvases[name] = canvas

        col.addWidget(self.channel_canvases["speed"], 2)
        pair = QHBoxLayout()
        pair.addWidget(self.channel_canvases["rpm"])
        pair.addWidget(self.channel_canvases["throttle"])
        col.addLayout(pair, 1)
        pair = QHBoxLayout()
        pair.addWidget(self.channel_canvases["brake"])
        pair.addWidget(self.channel_canvases["gear"])
        col.addLayout(pair, 1)
        return col

    def _build_map_column(self):
        """Build right column: lap info + track map."""
        col = QVBoxLayout()
        col.setSpacing(10)

        info_group = QGroupBox("Lap Info")
        info_layout = QVBoxLayout()
        info_layout.setSpacing(2)
        info_group.setLayout(info_layout)

        self.session_label = QLabel("Session: ----")
        self.lap_label = QLabel("Lap: --")
        self.points_label = QLabel("Points: --")
        self.hover_label = QLabel("Cursor: --")
        for label in (self.session_label, self.lap_label, self.points_label, self.hover_label):
            info_layout.addWidget(label)

        map_group = QGroupBox("GPS Track Map")
        map_layout = QVBoxLayout()
        map_group.setLayout(map_layout)
        self.track_canvas = TrackMapCanvas(self, width=5, height=5, dpi=100)
        map_layout.addWidget(self.track_canvas)

        col.addWidget(info_group)
        col.addWidget(map_group, 1)
        return col

    # ==========================================================================
    # Fetching
    # ==========================================================================

    def _start_request(self, kind: str, session: str = None, lap: int = None):
        if self.client is None:
            return
        self._request_seq += 1
        self._latest[kind] = self._request_seq
        worker = TelemetryFetchWorker(self.client, self._request_seq, kind, session=session, lap=lap, parent=self)
        worker.sessions_loaded.connect(self._on_sessions_loaded)
        worker.laps_loaded.connect(self._on_laps_loaded)
        worker.lap_loaded.connect(self._on_lap_loaded)
        worker.error_occurred.connect(self._on_fetch_error)
        worker.status_update.connect(self.statusBar().showMessage)
        worker.finished.connect(lambda w=worker: self._workers.remove(w))
        self._workers.append(worker)
        worker.start()

    def _is_latest(self, kind: str, request_id: int) -> bool:
        if self._latest.get(kind) != request_id:
            logger.debug(f"Dropping superseded {kind} result (request {request_id})")
            return False
        return True

    def load_sessions(self):
        self._start_request(SESSIONS)

    def _on_sessions_loaded(self, request_id: int, sessions: list):
        if not self._is_latest(SESSIONS, request_id):
            return
        self.session_combo.clear()
        self.session_combo.addItems(sessions)
        self.session_combo.setCurrentIndex(-1)
        self.statusBar().showMessage(f"{len(sessions)} sessions available")

    def _on_session_activated(self, index: int):
        session = self.session_combo.itemText(index)
        logger.info(f"Session selected: {session}")
        self.lap_combo.clear()
        self.lap_combo.setEnabled(False)
        self._latest[LAP] = None
        self.show_lap(None)
        self.session_label.setText(f"Session: {session}")
        self._start_request(LAPS, session=session)

    def _on_laps_loaded(self, request_id: int, laps: list):
        if not self._is_latest(LAPS, request_id):
            return
        self.lap_combo.clear()
        for lap in laps:
            self.lap_combo.addItem(f"Lap {lap}", lap)
        self.lap_combo.setCurrentIndex(-1)
        self.lap_combo.setEnabled(bool(laps))
        self.statusBar().showMessage("Select a lap to analyze telemetry")

    def _on_lap_activated(self, index: int):
        lap = self.lap_combo.itemData(index)
        session = self.session_combo.currentText()
        if lap is None or not session:
            return
        self.show_lap(None)
        self._start_request(LAP, session=session, lap=int(lap))

    def _on_lap_loaded(self, request_id: int, lap: LapTelemetry):
        if not self._is_latest(LAP, request_id):
            return
        self.show_lap(lap)

    def _on_fetch_error(self, request_id: int, message: str):
        if request_id not in self._latest.values():
            return
        self.statusBar().showMessage(f"Error loading telemetry: {message}")

    # ==========================================================================
    # Lap display
    # ==========================================================================

    def show_lap(self, lap: Optional[LapTelemetry]):
        """
        Replace the displayed lap. None (or an empty lap) clears every view.

        Args:
            lap: Normalized samples of one lap
        """
        self.cursor.clear()
        if lap is not None and len(lap) == 0:
            self.statusBar().showMessage("Lap has no telemetry samples")
            lap = None

        self.lap = lap
        self.resolver = HoverResolver(lap) if lap is not None else None

        count = len(lap) if lap is not None else 0
        upper = max(config.MIN_RESOLUTION, count)
        for control in (self.resolution_slider, self.resolution_spin):
            control.blockSignals(True)
            control.setMaximum(upper)
            control.setValue(min(self.resolution, upper))
            control.setEnabled(lap is not None)
            control.blockSignals(False)
        self.resolution = min(self.resolution, upper)

        if lap is not None:
            self.session_label.setText(f"Session: {lap.session or '----'}")
            self.lap_label.setText(f"Lap: #{lap.lap if lap.lap is not None else '--'}")
            self.points_label.setText(f"Points: {count:,}")
            self.statusBar().showMessage(f"Loaded {count:,} samples")
        else:
            self.lap_label.setText("Lap: --")
            self.points_label.setText("Points: --")

        self._update_views()

    def _on_resolution_changed(self, value: int):
        if value == self.resolution:
            return
        self.resolution = value
        for control in (self.resolution_slider, self.resolution_spin):
            if control.value() != value:
                control.blockSignals(True)
                control.setValue(value)
                control.blockSignals(False)
        self._update_views()

    def _update_views(self):
        for view in self.views:
            view.set_data(self.lap, self.resolution)

    def _on_cursor_changed(self, distance):
        for view in self.views:
            view.set_active_distance(distance)

        sample = self.resolver.by_distance(distance) if self.resolver is not None else None
        if sample is None:
            self.hover_label.setText("Cursor: --")
            return
        ch = sample.channels
        self.hover_label.setText(
            f"Cursor: {sample.distance:.0f} m | "
            f"{ch.get('speed', 0):.0f} km/h | "
            f"{ch.get('rpm', 0):.0f} rpm | "
            f"gear {ch.get('gear', 0):.0f}"
        )
