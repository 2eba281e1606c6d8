"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CHECKIN_LEAD_MINUTES = 5
DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_REFRESH_INTERVAL_SECONDS = 30
DEFAULT_COUNTDOWN_TICK_SECONDS = 1
DEFAULT_HTTP_TIMEOUT_SECONDS = 10
DEFAULT_TIMEZONE = "UTC"

STATION_TOKEN_HEADER = "X-Station-Token"
SECONDS_PER_DAY = 24 * 60 * 60
