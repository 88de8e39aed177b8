"""
Application constants
"""

# Podio API
PODIO_API_BASE_URL = "https://api.podio.com"
PODIO_AUTH_SCHEME = "OAuth2"

# Task endpoints
TASK_ENDPOINT = "/task/"
TASK_ACTIVE_ENDPOINT = "/task/active/"
TASK_ASSIGNED_ACTIVE_ENDPOINT = "/task/assigned/active/"
TASK_ASSIGNED_COMPLETED_ENDPOINT = "/task/assigned/completed/"
TASK_COMPLETED_ENDPOINT = "/task/completed/"
TASK_STARTED_ENDPOINT = "/task/started/"
TASK_TOTAL_ENDPOINT = "/task/total"

# in_space listings
SORT_BY_DUE_DATE = "due_date"
SORT_BY_RESPONSIBLE = "responsible"

# Retry configuration (transport only, GET requests only)
MAX_RETRIES = 3
RETRY_DELAY = 1  # seconds
REQUEST_TIMEOUT = 30  # seconds

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOGGER_NAME = "podio_tasks"

# Timezone used for "today" when bucketing by due date
DEFAULT_TASK_TIMEZONE = "UTC"
