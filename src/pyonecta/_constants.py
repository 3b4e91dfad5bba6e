"""Internal constants shared across the library."""

BASE_URL = "https://api.onecta.daikineurope.com"
USER_AGENT = "pyonecta"

GATEWAY_DEVICES_ENDPOINT = "/v1/gateway-devices"

# ------------------------------------------------------------------
# Retry / backoff defaults (seconds)
# ------------------------------------------------------------------

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY = 1.0
DEFAULT_MAX_DELAY = 10.0
DEFAULT_REQUEST_TIMEOUT = 30.0

# 408 Request Timeout, 429 Too Many Requests, 502-504 gateway errors.
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 429, 502, 503, 504})

#: Seconds to wait when a 429 response carries no ``retry-after`` header.
DEFAULT_RETRY_AFTER_SECONDS = 60.0
#: Upper bound on a server-requested rate-limit block (24 hours).
MAX_RATE_LIMIT_BLOCK_SECONDS = 86400.0

# ------------------------------------------------------------------
# Redaction
# ------------------------------------------------------------------

REDACTED = "REDACTED"

# Datapoints whose ``value`` identifies the operator or their network.
SENSITIVE_VALUE_FIELDS: tuple[str, ...] = (
    "ipAddress",
    "macAddress",
    "ssid",
    "serialNumber",
    "wifiConnectionSSID",
)

# Bulk records replaced as a whole.
SENSITIVE_RECORD_FIELDS: tuple[str, ...] = (
    "consumptionData",
    "schedule",
)
