"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# secrets.token_hex(32) -> 256 bits
TOKEN_BYTES = 32

DEFAULT_SESSION_LIFETIME_MINUTES = 15
MIN_SESSION_LIFETIME_MINUTES = 1
MAX_SESSION_LIFETIME_MINUTES = 24 * 60

# Fixed policy: callers needing another cutoff must post-filter.
LOW_ATTENDANCE_THRESHOLD = 75

DEFAULT_HISTORY_LIMIT = 200
