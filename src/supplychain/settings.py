"""Runtime settings read from the environment."""

import os

# Minimum days between today and the requested arrival date of a new order.
MIN_LEAD_DAYS = int(os.getenv("SUPPLYCHAIN_MIN_LEAD_DAYS", "3"))

# Arrival date proposed when an agency promotes drafts without choosing one.
DEFAULT_LEAD_DAYS = int(os.getenv("SUPPLYCHAIN_DEFAULT_LEAD_DAYS", "4"))

# Seconds a write waits for the store guard before giving up with a conflict.
GUARD_TIMEOUT = float(os.getenv("SUPPLYCHAIN_GUARD_TIMEOUT", "5.0"))
