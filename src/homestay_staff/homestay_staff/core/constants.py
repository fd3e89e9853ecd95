"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

GRACE_MINUTES = 15
NOTES_MAX_LENGTH = 500
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
WEEK_DAYS = 7
MIN_REPORT_YEAR = 2020
SHIFT_LOCK_TIMEOUT_SECONDS = 10
