"""
Constants for review analytics.
"""

# An item counts as overdue once it is at least this many days past due
OVERDUE_THRESHOLD_DAYS = 1

ITEM_COLUMNS = [
    "item_id",
    "scope",
    "strength",
    "interval_days",
    "ease_factor",
    "next_due",
    "last_review",
    "fsrs_stability",
    "fsrs_lapses",
]
