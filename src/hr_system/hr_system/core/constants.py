"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Deployments override the policy values through the settings module.
"""

DEFAULT_STANDARD_CHECK_IN = "08:00"
DEFAULT_STANDARD_DAILY_HOURS = 8
DEFAULT_WORKING_DAYS_PER_MONTH = 22
DEFAULT_OVERTIME_MULTIPLIER = "1.5"

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_LIST_LIMIT = 200
MIN_PASSWORD_LENGTH = 6
