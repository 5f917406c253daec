"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

AUTO_CLOSE_HOUR = 23
AUTO_CLOSE_MINUTE = 59

AUTO_CLOSE_INTERVAL_SECONDS = 60
EXPIRY_SWEEP_INTERVAL_SECONDS = 60 * 60

DEFAULT_BREAK_NAME = "昼休憩"
DEFAULT_BREAK_START = "12:00"
DEFAULT_BREAK_END = "13:20"
DEFAULT_BREAK_MINUTES = 80

# MySQL server error numbers
ER_DUP_ENTRY = 1062
ER_BAD_FIELD_ERROR = 1054
