"""
Track map canvas: GPS racing line over a reconstructed track ribbon.
"""
import logging
from typing import Callable, Optional

from PyQt5 import QtCore
from matplotlib.backends.backend_qt5agg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
from matplotlib.patches import Polygon

import config
from geometry.cache import GeometryCache
from geometry.track_map import active_marker, build_track_map, pointer_to_sample
from geometry.viewport import IDENTITY, ResetAnimation, ViewportTransform
from ui import styles

logger = logging.getLogger(__name__)

ZOOM_STEP = 1.2
FRAME_MS = 16


class TrackMapCanvas(FigureCanvas):
    """
    Matplotlib canvas for the plan-view track map.

    Geometry is built in unzoomed pixel space and pushed through the current
    ViewportTransform when drawn. Scroll zooms around the pointer, left-drag
    pans, double-click animates back to the identity view. Hover reports the
    nearest full-resolution sample through the hover callback.
    """

    def __init__(self, parent=None, width=5, height=5, dpi=100,
                 color=styles.TRACK_LINE_COLOR, max_zoom=None, reset_ms=None):
        """
        Initialize track map canvas.

        Args:
            parent: Parent QWidget
            width: Figure width in inches
            height: Figure height in inches
            dpi: Dots per inch resolution
            color: Racing line color
            max_zoom: Upper zoom bound (defaults to config.MAX_ZOOM)
            reset_ms: Duration of the double-click reset animation
        """
        self.fig = Figure(figsize=(width, height), dpi=dpi)
        self.ax = self.fig.add_axes([0, 0, 1, 1])
        super().__init__(self.fig)
        self.setParent(parent)

        self.fig.patch.set_facecolor(styles.BG_COLOR_LIGHT)
        self.ax.set_facecolor(styles.BG_COLOR_LIGHT)
        self.ax.set_axis_off()

        self.color = color
        self.max_zoom = max_zoom if max_zoom is not None else config.MAX_ZOOM
        self.reset_ms = reset_ms if reset_ms is not None else config.ZOOM_RESET_MS

        self.samples = None
        self.target = 0
        self.active_distance: Optional[float] = None
        self.on_hover: Optional[Callable[[Optional[float]], None]] = None
        self.transform: ViewportTransform = IDENTITY

        self.cache = GeometryCache("track_map")
        self._geometry = None
        self._marker_artists = []
        self._drag_origin = None

        # Reset animation clock
        self._reset = None
        self._reset_clock = QtCore.QElapsedTimer()
        self._reset_timer = QtCore.QTimer(self)
        self._reset_timer.setInterval(FRAME_MS)
        self._reset_timer.timeout.connect(self._step_reset)

        self.mpl_connect("motion_notify_event", self._on_motion)
        self.mpl_connect("figure_leave_event", self._on_leave)
        self.mpl_connect("scroll_event", self._on_scroll)
        self.mpl_connect("button_press_event", self._on_press)
        self.mpl_connect("button_release_event", self._on_release)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_data(self, samples, target: int):
        """Show a new lap and/or downsample target."""
        if samples is not self.samples:
            self._stop_reset()
            self.transform = IDENTITY
        self.samples = samples
        self.target = target
        self.redraw()

    def set_active_distance(self, distance: Optional[float]):
        self.active_distance = distance
        self._draw_marker()
        self.draw_idle()

    def set_hover_callback(self, callback: Callable[[Optional[float]], None]):
        self.on_hover = callback

    def set_transform(self, transform: ViewportTransform):
        self.transform = transform.clamped(self.max_zoom)
        self.redraw()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def geometry_for_size(self):
        width, height = self.width(), self.height()
        if self.samples is None:
            return None
        key = (self.target, width, height, self.color)
        return self.cache.get(
            self.samples, key,
            lambda: build_track_map(self.samples, self.target, width, height, self.color,
                                    padding=config.MAP_PADDING, dedup_pixels=config.DEDUP_PIXELS),
        )

    def redraw(self):
        self._geometry = self.geometry_for_size()
        self.ax.clear()
        self.ax.set_axis_off()
        self._marker_artists = []
        width, height = max(self.width(), 1), max(self.height(), 1)
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)

        track = self._geometry
        if track is not None:
            t = self.transform
            ribbon = track.ribbon
            if ribbon is not None:
                self.ax.add_patch(Polygon(
                    t.apply_xy(ribbon.polygon), closed=True,
                    facecolor=styles.RIBBON_FILL, edgecolor=styles.RIBBON_EDGE, linewidth=1,
                ))
                center = t.apply_xy(ribbon.smooth_centerline)
                self.ax.plot(center[:, 0], center[:, 1], color=styles.CENTERLINE_COLOR,
                             linewidth=0.8, linestyle=(0, (4, 4)), alpha=0.7)
                driven = t.apply_xy(ribbon.smooth_driven)
                self.ax.plot(driven[:, 0], driven[:, 1], color=track.color, linewidth=2.5,
                             solid_joinstyle="round", solid_capstyle="round")
            if track.start is not None:
                sx, sy = t.apply(track.start.x, track.start.y)
                self.ax.plot([sx], [sy], marker="o", markersize=6, color=styles.TEXT_COLOR, alpha=0.5)

        self.ax.text(width - 8, height - 8, "Scroll to Zoom • Drag to Pan • DblClick Reset",
                     color=styles.TEXT_COLOR_DARK, fontsize=6, ha="right", va="bottom")
        self._draw_marker()
        self.draw_idle()

    def _draw_marker(self):
        for artist in self._marker_artists:
            artist.remove()
        self._marker_artists = []

        hit = active_marker(self._geometry, self.active_distance)
        if hit is None:
            return
        x, y = self.transform.apply(hit[0], hit[1])
        self._marker_artists.extend(self.ax.plot(
            [x], [y], marker="o", markersize=16, color=self._geometry.color, alpha=0.3,
        ))
        self._marker_artists.extend(self.ax.plot(
            [x], [y], marker="o", markersize=8, markerfacecolor=styles.TEXT_COLOR,
            markeredgecolor=self._geometry.color, markeredgewidth=2,
        ))

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if getattr(self, "cache", None) is not None:
            self.redraw()

    # ------------------------------------------------------------------
    # Zoom / pan
    # ------------------------------------------------------------------

    def _on_scroll(self, event):
        if event.xdata is None or event.ydata is None:
            return
        self._stop_reset()
        factor = ZOOM_STEP ** event.step
        self.set_transform(self.transform.zoomed(factor, event.xdata, event.ydata, self.max_zoom))

    def _on_press(self, event):
        if event.xdata is None or event.ydata is None:
            return
        if event.dblclick:
            self.reset_view()
            return
        if event.button == 1:
            self._stop_reset()
            self._drag_origin = (event.xdata, event.ydata, self.transform)

    def _on_release(self, event):
        self._drag_origin = None

    def reset_view(self):
        """Animate back to the identity transform."""
        if self.transform.is_identity:
            return
        self._reset = ResetAnimation(self.transform, self.reset_ms)
        self._reset_clock.start()
        self._reset_timer.start()

    def _step_reset(self):
        if self._reset is None:
            self._reset_timer.stop()
            return
        elapsed = self._reset_clock.elapsed()
        self.transform = self._reset.at(elapsed)
        if self._reset.finished(elapsed):
            self._stop_reset()
        self.redraw()

    def _stop_reset(self):
        self._reset = None
        self._reset_timer.stop()

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------

    def _on_motion(self, event):
        if event.xdata is None or event.ydata is None:
            return
        if self._drag_origin is not None:
            x0, y0, start = self._drag_origin
            self.set_transform(start.panned(event.xdata - x0, event.ydata - y0))
            return
        if self.on_hover is None or self._geometry is None:
            return
        sample = pointer_to_sample(self._geometry, event.xdata, event.ydata, self.transform)
        self.on_hover(sample.distance if sample is not None else None)

    def _on_leave(self, event):
        self._drag_origin = None
        if self.on_hover is not None:
            self.on_hover(None)
