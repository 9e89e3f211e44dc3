"""Shared defaults for deskflow."""

DEFAULT_PRIORITY = 0
DEFAULT_MAX_CONCURRENT = 1
DEFAULT_HISTORY_LIMIT = 1000
DEFAULT_HISTORY_PAGE = 50

DEFAULT_CONFIG_FILE = "deskflow.yaml"

DEFAULT_DANGEROUS_ACTIONS = (
    "file_delete",
    "system_shutdown",
    "system_restart",
    "browser_submit",
    "app_close",
)

DEFAULT_BLOCKED_PATHS = (
    "C:\\Windows",
    "C:\\Program Files",
    "C:\\Program Files (x86)",
    "/System",
    "/usr/bin",
    "/usr/sbin",
)
