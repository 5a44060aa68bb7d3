"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_MAX_BREAK_COUNT = 3
DEFAULT_BREAK_MINUTES = 30
DEFAULT_SCHEDULED_MINUTES = 8 * 60
DEFAULT_HOURLY_RATE = 183
DEFAULT_HISTORY_DAYS = 30

# Review triggers applied on clock-out
MAX_BREAK_FACTOR = 1.5
LATE_CLOCK_IN_REVIEW_MINUTES = 15
OVERTIME_REVIEW_MINUTES = 120
