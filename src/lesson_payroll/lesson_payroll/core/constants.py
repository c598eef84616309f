"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

OBLIGATION_DONE_THRESHOLD = 0.80
DEFAULT_PENALTY_AMD = 1000
ACTIONS_PER_LESSON = 4
DEFAULT_LIST_LIMIT = 200
