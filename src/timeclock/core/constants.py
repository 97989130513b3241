"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_FORMAT = "%Y-%m-%d"

# Net work time below this marks the day as a half-day at punch-out.
HALF_DAY_THRESHOLD_MINUTES = 4 * 60

# Compare-and-swap attempts for a single attendance transition.
MAX_WRITE_ATTEMPTS = 3

CSV_COLUMNS = ("Date", "Day", "Punch In", "Punch Out", "Break Time", "Worked Hours", "Status")
CSV_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")
CSV_PLACEHOLDER = "-"
