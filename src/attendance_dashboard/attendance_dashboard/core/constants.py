"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_WINDOW_DAYS = 7
DEFAULT_PAGE_SIZE = 10
MAX_STATS_DAYS = 60
ROSTER_PAGE_SIZE = 1000

NOT_MARKED_LABEL = "NOT MARKED"
MISSING_VALUE_LABEL = "N/A"
EMPTY_REMARKS_LABEL = "-"
ALL_CLASSES_SUFFIX = "all"

# Excel limits sheet names to 31 characters.
SHEET_NAME_MAX_LENGTH = 31
