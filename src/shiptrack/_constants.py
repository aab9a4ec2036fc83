"""Internal constants shared across the library."""

BASE_URL = "http://localhost:3001"
USER_AGENT = "shiptrack/1"

#: Seconds between poll cycles.  Coarse on purpose to bound request volume.
DEFAULT_POLL_INTERVAL: float = 3.0
DEFAULT_REQUEST_TIMEOUT: float = 10.0
#: Maximum number of response-body characters carried in an error message.
DEFAULT_ERROR_BODY_LIMIT: int = 200
DEFAULT_ZOOM: int = 6

TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a>'

# ------------------------------------------------------------------
# Backend resource paths
# ------------------------------------------------------------------

TRACKING_PATH = "/api/containers/{subject_id}/tracking"
ROUTE_PATH = "/api/routes/{source}/{subject_id}"

JSON_MEDIA_TYPE = "application/json"
JSON_MEDIA_SUFFIX = "+json"
