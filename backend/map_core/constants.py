"""Map constants: default view, region lock rectangle, marker colors and geometry."""
from map_core.geometry import Bounds

# Marker color used by the stock Leaflet pin and by the admin form's "default" option.
DEFAULT_MARKER_COLOR = "#3388ff"

# Jakarta; initial view and the "no markers" recenter fallback.
DEFAULT_CENTER: tuple[float, float] = (-6.2088, 106.8456)
DEFAULT_ZOOM = 11
FALLBACK_ZOOM = 6

# Indonesia, used while the region lock is on.
REGION_BOUNDS = Bounds(south=-11.0, west=94.7, north=6.2, east=141.1)
REGION_NAME = "Indonesia"

# Leaflet LatLngBounds.pad ratio applied before every marker fit.
FIT_PADDING = 0.1

RECENTER_DURATION_S = 1.0
ORIENTATION_RESET_DURATION_S = 0.5

TOAST_DURATION_S = 2.0
TOAST_FADE_S = 0.3

ICON_SIZE = (32, 32)
ICON_ANCHOR = (16, 32)
ICON_POPUP_ANCHOR = (0, -32)

PIN_SIZE = (25, 41)
PIN_ANCHOR = (12, 41)
PIN_POPUP_ANCHOR = (0, -41)

LABEL_OFFSET = (0, 10)
POPUP_MAX_WIDTH = 350

# Viewer sessions idle longer than this are dropped; the store never holds more than MAX_SESSIONS.
SESSION_IDLE_TTL_S = 30 * 60
MAX_SESSIONS = 500
