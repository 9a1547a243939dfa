"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# check_out_time value of a record that has not been checked out yet.
CHECKOUT_UNSET = 0

DEFAULT_EVENTS_PAGE_LIMIT = 100
MAX_EVENTS_PAGE_LIMIT = 1000

SESSION_ADDRESS_KEY = "address"
