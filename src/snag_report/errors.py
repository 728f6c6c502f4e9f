"""
snag-report error types.

Suppression by release stage is not an error and has no type here.
"""

from typing import Any, Optional


class SnagReportError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConfigurationError(SnagReportError):
    """Bad client configuration, unencodable metadata or a malformed endpoint."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("configuration_error", message, details)


class TransportError(SnagReportError):
    """Network failure, timeout or a non-2xx response. Never retried."""

    def __init__(self, message: str, status_code: Optional[int] = None, code: str = "transport_error"):
        super().__init__(code, message, {"status_code": status_code} if status_code is not None else None)
        self.status_code = status_code


class RateLimitedError(TransportError):
    """HTTP 429 from the ingestion endpoint."""

    def __init__(self, message: str = "HTTP 429: rate limited"):
        super().__init__(message, status_code=429, code="rate_limited")
