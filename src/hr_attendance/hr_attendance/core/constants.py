"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_TIMEZONE = "Asia/Jakarta"
DEFAULT_ANNUAL_LEAVE_QUOTA_DAYS = 12
DEFAULT_CLOCK_IN_START = time(8, 0)
DEFAULT_CLOCK_IN_END = time(9, 0)
DEFAULT_CLOCK_OUT_START = time(17, 0)
DEFAULT_CLOCK_OUT_END = time(18, 0)
DEFAULT_LATE_THRESHOLD = time(9, 0)

JOURNAL_MIN_CONTENT_LENGTH = 10
BACKDATE_THRESHOLD_DAYS = 1

WEEKLY_TREND_DAYS = 7
MONTHLY_WINDOW_DAYS = 7
MONTHLY_WINDOW_COUNT = 4
DEFAULT_TREND_MONTHS = 6

DEFAULT_HISTORY_LIMIT = 30
UNASSIGNED_DEPARTMENT = "Unassigned"

# Service accounts that hold the employee role but are not tracked.
EXCLUDED_USER_NAMES = ("Super Admin", "Administrator", "Admin", "Manager")
