"""
Matplotlib canvas widgets for lap telemetry visualization.
"""
from ui.canvases.track_map import TrackMapCanvas
from ui.canvases.line_chart import LineChartCanvas

__all__ = ['TrackMapCanvas', 'LineChartCanvas']
