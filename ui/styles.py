"""
Styling constants and theme configuration for the lap viewer UI.
"""

# =============================================================================
# Color Palette
# =============================================================================

# Dark theme colors
BG_COLOR = "#111111"          # Main background
BG_COLOR_LIGHT = "#181818"    # Lighter background (axes, panels)
TEXT_COLOR = "#EEEEEE"        # Main text
TEXT_COLOR_DIM = "#CCCCCC"    # Dimmed text (axis labels, etc.)
TEXT_COLOR_DARK = "#888888"   # Dark text (tick labels, hints)
BORDER_COLOR = "#555555"      # Borders
GRID_COLOR = "#333333"        # Grid lines

# Accent colors
ACCENT_BLUE = "#3B82F6"       # Speed trace
ACCENT_RED = "#EF4444"        # RPM trace
ACCENT_GREEN = "#22C55E"      # Throttle trace
ACCENT_YELLOW = "#FFD93D"     # Brake trace
ACCENT_CYAN = "#4ECDC4"       # Gear trace, driven line

# Track map
TRACK_LINE_COLOR = "#FFFFFF"
RIBBON_FILL = "#2A2D36"
RIBBON_EDGE = "#4B5060"
CENTERLINE_COLOR = "#6B7280"
MARKER_FILL = "#1A1C23"

# =============================================================================
# Channel charts: channel -> (title, color, value format)
# =============================================================================

CHANNEL_STYLES = {
    "speed": ("Speed (km/h)", ACCENT_BLUE, "{:.0f}"),
    "rpm": ("Engine RPM", ACCENT_RED, "{:.0f}"),
    "throttle": ("Throttle (%)", ACCENT_GREEN, "{:.0f}"),
    "brake": ("Brake (%)", ACCENT_YELLOW, "{:.0f}"),
    "gear": ("Gear", ACCENT_CYAN, "{:.0f}"),
}

# =============================================================================
# PyQt5 Stylesheet
# =============================================================================

DARK_STYLESHEET = f"""
    QMainWindow {{
        background-color: {BG_COLOR};
        color: {TEXT_COLOR};
    }}
    QGroupBox {{
        border: 1px solid {BORDER_COLOR};
        border-radius: 4px;
        margin-top: 8px;
        padding-top: 10px;
        font-weight: bold;
        color: {TEXT_COLOR};
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 8px;
        padding: 0 4px 0 4px;
    }}
    QLabel {{
        color: {TEXT_COLOR};
        font-size: 10pt;
    }}
    QComboBox, QSpinBox {{
        background-color: {BG_COLOR_LIGHT};
        color: {TEXT_COLOR};
        border: 1px solid {BORDER_COLOR};
        border-radius: 4px;
        padding: 2px 6px;
    }}
    QSlider::groove:horizontal {{
        height: 4px;
        background: {BORDER_COLOR};
        border-radius: 2px;
    }}
    QSlider::handle:horizontal {{
        background: {ACCENT_BLUE};
        width: 12px;
        margin: -5px 0;
        border-radius: 6px;
    }}
    QStatusBar {{
        background-color: {BG_COLOR};
        color: {TEXT_COLOR_DARK};
    }}
"""
