"""Shared constant values for the architect runtime."""

SOURCE_SUFFIX = ".py"
FETCH_TIMEOUT = 10.0
HTTP_SCHEMES = ("http://", "https://")
FILE_SCHEME = "file://"

RESERVED_PREFIX = "__"

LOG_TIME_FORMAT = "%H:%M:%S"
LOG_TEMPLATE = "at {stamp}:\n\n{message}"

MSG_GOT = "Got {address}"
MSG_REVERTED_ENVIRONMENTS = "Reverted all environments to their original states."
MSG_REVERTED_MEMORY = "Reverted the architect's memory and configuration."
MSG_FREED_MEMORY = "Freed up an estimated {kb}kb of memory"

LOGBOOK_FILE = "architect.logbook.jsonl"
KEY_FILE = "architect_private_key.pem"
PUB_FILE = "architect_public_key.pem"
LOGBOOK_LIMIT = 10

SCOPE_COLORS = {
    "unit": "#8BC34A",
    "excluded": "#FF7043",
    "ecosystem": "#FFEB3B",
    "default": "#9575CD",
    "builtins": "#B0BEC5",
}

__all__ = [
    "SOURCE_SUFFIX",
    "FETCH_TIMEOUT",
    "HTTP_SCHEMES",
    "FILE_SCHEME",
    "RESERVED_PREFIX",
    "LOG_TIME_FORMAT",
    "LOG_TEMPLATE",
    "MSG_GOT",
    "MSG_REVERTED_ENVIRONMENTS",
    "MSG_REVERTED_MEMORY",
    "MSG_FREED_MEMORY",
    "LOGBOOK_FILE",
    "KEY_FILE",
    "PUB_FILE",
    "LOGBOOK_LIMIT",
    "SCOPE_COLORS",
]
