"""Structured log field names used by the SDK, the CLI and the formatters."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EXCEPTION = "exception"

# Bound per storage call.
OPERATION = "operation"
METHOD = "method"
ZONE = "zone"
PATH = "path"

# Passed as ``extra`` on individual records.
STATUS_CODE = "status_code"
DURATION_MS = "duration_ms"
ERROR_KIND = "error_kind"

# Bound once per process.
SERVICE = "service"
ENVIRONMENT = "environment"

RECORD_EXTRAS = (STATUS_CODE, DURATION_MS, ERROR_KIND)
