"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000

DEFAULT_WEEKLY_HOURS = 40
DEFAULT_WORK_START_TIME = "09:00"
DEFAULT_BREAK_MINUTES = 60
DEFAULT_TARGET_HOURS_PER_DAY = 8

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_ABSENCE_LIST_LIMIT = 200

PREDICTION_WINDOW = 30
BURNOUT_WINDOW = 10
BURNOUT_HIGH_HOURS = 10
BURNOUT_MEDIUM_HOURS = 9
BANK_FORECAST_DAYS = 30
PUNCTUALITY_TOLERANCE_MINUTES = 15
TOP_PATTERNS = 3

MIN_PASSWORD_LENGTH = 6
