"""Error taxonomy — every failure a handler can surface to a caller.

Each error carries the HTTP status it maps to and a user-facing message.
``register_error_handlers`` turns them into flat ``{"error": message}``
responses.
"""


class WeatherOpsError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ── 400 ──
class InvalidInput(WeatherOpsError):
    status_code = 400
    default_message = "Invalid request"


class MissingClientId(InvalidInput):
    default_message = "Client ID is required"


class InvalidLimit(InvalidInput):
    default_message = "Invalid rate limit value"


# ── 401 ──
class AuthorizationDenied(WeatherOpsError):
    status_code = 401
    default_message = "Not authorized"


# ── 404 ──
class NotFound(WeatherOpsError):
    status_code = 404
    default_message = "Not found"


class ClientNotConfigured(NotFound):
    default_message = "No rate limit configuration for client"


# ── 429 ──
class RateLimited(WeatherOpsError):
    status_code = 429
    default_message = "Too many requests"


class ClientBlocked(RateLimited):
    default_message = "Client is blocked"


class RateLimitExceeded(RateLimited):
    default_message = "Rate limit exceeded"


# ── 500 ──
class UpstreamFailure(WeatherOpsError):
    status_code = 500
    default_message = "Internal server error"


class ConfigLookupFailed(UpstreamFailure):
    pass
