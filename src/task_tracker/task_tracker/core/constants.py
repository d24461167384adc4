"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

# Subdomain used by the landing site; never a real tenant.
RESERVED_SUBDOMAIN = "main"

UNKNOWN_WORKER_NAME = "Unknown Worker"
UNASSIGNED_DEPARTMENT_NAME = "Unassigned"
UNKNOWN_DEPARTMENT_NAME = "Unknown"

WORKER_POLL_INTERVAL_SECONDS = 30
DEFAULT_CLIENT_TIMEOUT_SECONDS = 30
DEFAULT_TOKEN_MAX_AGE_SECONDS = 7 * 24 * 3600

MISSING_TENANT_MESSAGE = "Company name is missing, login again."
