"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_PAGE_SIZE = 30
MAX_PAGE_SIZE = 200
DEFAULT_SHIFT_PROFILE = "day"
DEFAULT_STANDARD_HOURS = 8.0
LIVE_HOURS_PRECISION = 2
