"""
Constants shared by the scheduling engine.
"""

# Hashtags embedded in event notes so existing sessions can be recognized.
# Matched as case-insensitive substrings; do not change these values.
WORK_TAG = "#work"
SIDE_TAG = "#side"
DEEP_TAG = "#deep"
PLAN_TAG = "#plan"

# Minutes kept clear before and after every existing busy event
EXISTING_EVENT_BUFFER_MINUTES = 10

# Session starts are rounded up to this minute boundary
ROUNDING_INTERVAL_MINUTES = 5

# Smallest share of the configured Side duration a flexible Side session may shrink to.
# Tunable; the reduced session is never shorter than one minute.
FLEXIBLE_SIDE_MIN_FRACTION = 0.5

# Rest after a Planning session is half the work rest, but at least this
PLANNING_MIN_REST_MINUTES = 5

PLANNING_TITLE = "Planning"

# Upper bound on loop iterations per generate_schedule call
MAX_PLACEMENT_ATTEMPTS = 500
