"""Constants for ActionPlus.

This module centralizes all magic numbers and default values used throughout the application.
"""

# Group path encoding ("Goal: Element > SubElement")
GOAL_SEPARATOR = ": "
ELEMENT_SEPARATOR = " > "

# Default labels for missing hierarchy levels
DEFAULT_GOAL_LABEL = "Uncategorized"
DEFAULT_ELEMENT_LABEL = "Other"
DEFAULT_SUB_ELEMENT_LABEL = "General"

# Deadline reminders
DEADLINE_TODAY_CONTENT = "You have a task due today"
DEADLINE_OVERDUE_CONTENT = "A task is past its deadline"
DEADLINE_SOON_DAYS = 3  # "N days left" label window

# Notifications
NOTIFICATION_LIST_LIMIT = 50
MARK_READ_DELAY_SECONDS = 2  # Client waits this long before marking the list read

# Timezone used for calendar-day truncation when none is configured
DEFAULT_TIMEZONE = "UTC"
