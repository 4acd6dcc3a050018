"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_EARLY_GRACE_MINUTES = 15
DEFAULT_LATE_GRACE_MINUTES = 15

DEFAULT_OVERTIME_THRESHOLD_HOURS = 8.0
DEFAULT_AUTO_BREAK_DURATION_MINUTES = 30
DEFAULT_AUTO_BREAK_WAIT_HOURS = 6.0

LONG_TIMECARD_HOURS = 12
VERY_LONG_TIMECARD_HOURS = 24
LOCATION_MISMATCH_METERS = 500

# Job-site distance rule, when enabled for an employee without a limit.
DEFAULT_GEOFENCE_LIMIT_METERS = 50

# Punch-in record lookup around an open card's punch-in time.
PUNCH_IN_MATCH_SECONDS = 60

BACKFILL_DEFAULT_DAYS = 60
BACKFILL_DEFAULT_LIMIT = 1000
BACKFILL_MAX_LIMIT = 5000
BACKFILL_WINDOW_MINUTES = 60
BACKFILL_PUNCH_IN_MATCH_MINUTES = 2
BACKFILL_OPEN_CARD_HOURS = 12
