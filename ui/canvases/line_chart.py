"""
Channel-vs-distance chart canvas synchronized on the shared cursor.
"""
import logging
from typing import Callable, Optional

from matplotlib.backends.backend_qt5agg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from geometry.cache import GeometryCache
from geometry.charts import active_marker, build_line_chart, pointer_to_distance
from ui import styles

logger = logging.getLogger(__name__)


class LineChartCanvas(FigureCanvas):
    """
    Matplotlib canvas drawing one telemetry channel against lap distance.

    The axes span the whole figure and use pixel coordinates (y down), so the
    geometry from ``geometry.charts`` is drawn as-is. Moving the pointer
    reports a lap distance through the hover callback; leaving reports None.
    """

    def __init__(self, channel: str, title: str = None, color: str = None,
                 value_format: str = "{:.2f}", parent=None, width=6, height=2.2, dpi=100):
        """
        Initialize chart canvas.

        Args:
            channel: Channel name in Sample.channels (e.g. "speed")
            title: Chart title
            color: Trace color
            value_format: Format for the hovered value in the title
            parent: Parent QWidget
            width: Figure width in inches
            height: Figure height in inches
            dpi: Dots per inch resolution
        """
        self.fig = Figure(figsize=(width, height), dpi=dpi)
        self.ax = self.fig.add_axes([0, 0, 1, 1])
        super().__init__(self.fig)
        self.setParent(parent)

        self.fig.patch.set_facecolor(styles.BG_COLOR_LIGHT)
        self.ax.set_facecolor(styles.BG_COLOR_LIGHT)
        self.ax.set_axis_off()

        self.channel = channel
        self.title = title or channel
        self.color = color or styles.ACCENT_BLUE
        self.value_format = value_format

        self.samples = None
        self.target = 0
        self.active_distance: Optional[float] = None
        self.on_hover: Optional[Callable[[Optional[float]], None]] = None

        self.cache = GeometryCache(f"chart:{channel}")
        self._geometry = None
        self._title = None
        self._marker_artists = []

        self.mpl_connect("motion_notify_event", self._on_motion)
        self.mpl_connect("figure_leave_event", self._on_leave)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_data(self, samples, target: int):
        """Show a new lap and/or downsample target."""
        self.samples = samples
        self.target = target
        self.redraw()

    def set_active_distance(self, distance: Optional[float]):
        self.active_distance = distance
        self._draw_marker()
        self.draw_idle()

    def set_hover_callback(self, callback: Callable[[Optional[float]], None]):
        self.on_hover = callback

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def geometry_for_size(self):
        width, height = self.width(), self.height()
        if self.samples is None:
            return None
        key = (self.channel, self.target, width, height, self.color)
        return self.cache.get(
            self.samples, key,
            lambda: build_line_chart(self.samples, self.channel, self.target, width, height, self.color),
        )

    def redraw(self):
        self._geometry = self.geometry_for_size()
        self.ax.clear()
        self.ax.set_axis_off()
        self._marker_artists = []
        width, height = max(self.width(), 1), max(self.height(), 1)
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)

        chart = self._geometry
        if chart is not None:
            for y, label in chart.y_ticks:
                self.ax.plot([chart.plot_left, chart.plot_right], [y, y],
                             color=styles.GRID_COLOR, linewidth=0.8, alpha=0.6)
                self.ax.text(chart.plot_left - 10, y, label, color=styles.TEXT_COLOR_DARK,
                             fontsize=7, ha="right", va="center")
            for x, label in chart.x_ticks:
                self.ax.text(x, height - 12, label, color=styles.TEXT_COLOR_DARK,
                             fontsize=7, ha="center", va="center")
            if len(chart.curve):
                self.ax.plot(chart.curve[:, 0], chart.curve[:, 1], color=chart.color, linewidth=1.5)

        self._title = self.ax.text(8, 10, self.title, color=styles.TEXT_COLOR_DIM,
                                   fontsize=8, fontweight="bold", va="center")
        self._draw_marker()
        self.draw_idle()

    def _draw_marker(self):
        for artist in self._marker_artists:
            artist.remove()
        self._marker_artists = []

        chart = self._geometry
        if self._title is None:
            return
        marker = active_marker(chart, self.active_distance)
        if marker is None:
            self._title.set_text(self.title)
            return

        self._title.set_text(f"{self.title}   {self.value_format.format(marker.value)}")
        dash = dict(color=styles.TEXT_COLOR, linewidth=1, linestyle=(0, (3, 3)), alpha=0.6)
        self._marker_artists.extend(self.ax.plot([marker.x, marker.x], [chart.plot_top, chart.plot_bottom], **dash))
        self._marker_artists.extend(self.ax.plot([chart.plot_left, marker.x], [marker.y, marker.y], **dash))
        self._marker_artists.extend(self.ax.plot(
            [marker.x], [marker.y], marker="o", markersize=8,
            markerfacecolor=styles.MARKER_FILL, markeredgecolor=styles.TEXT_COLOR, markeredgewidth=2,
        ))
        self._marker_artists.extend(self.ax.plot(
            [marker.x], [marker.y], marker="o", markersize=4, color=chart.color,
        ))

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if getattr(self, "cache", None) is not None:
            self.redraw()

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------

    def _on_motion(self, event):
        if self.on_hover is None or self._geometry is None or event.xdata is None:
            return
        self.on_hover(pointer_to_distance(self._geometry, event.xdata))

    def _on_leave(self, event):
        if self.on_hover is not None:
            self.on_hover(None)
