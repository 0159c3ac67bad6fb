"""
Exceptions raised by the geometry core.
"""


class DegenerateGeometryError(ValueError):
    """Input cannot produce finite geometry (zero range, empty data, zero viewport)."""
