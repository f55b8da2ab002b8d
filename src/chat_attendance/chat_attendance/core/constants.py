"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SITE_RADIUS_METERS = 200
EARTH_RADIUS_METERS = 6_371_000

SHORT_ID_LENGTH = 8
DEFAULT_HISTORY_DAYS = 10
DEFAULT_LEAVE_BALANCE = 25

OFFLINE_DRIFT_MINUTES = 5
DEFAULT_DISPLAY_TIMEZONE = "Europe/Paris"
