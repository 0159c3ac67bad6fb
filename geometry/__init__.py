"""
Geometry core for the lap views: downsampling, scales, projection, ribbon,
pan/zoom and hover lookup. numpy and scipy, no Qt.
"""
from geometry.downsample import downsample, stride_for
from geometry.errors import DegenerateGeometryError
from geometry.scale import LinearScale, extent, nice_ticks
from geometry.projection import GeoProjection, ProjectedPoint, fit_projection, project_samples
from geometry.ribbon import TrackRibbon, build_ribbon, track_half_width
from geometry.viewport import IDENTITY, ResetAnimation, ViewportTransform, ViewState
from geometry.hover import HoverResolver
from geometry.cache import GeometryCache

__all__ = [
    'downsample', 'stride_for', 'DegenerateGeometryError',
    'LinearScale', 'extent', 'nice_ticks',
    'GeoProjection', 'ProjectedPoint', 'fit_projection', 'project_samples',
    'TrackRibbon', 'build_ribbon', 'track_half_width',
    'IDENTITY', 'ResetAnimation', 'ViewportTransform', 'ViewState',
    'HoverResolver', 'GeometryCache',
]
