"""
snag-report — error, warning and info reports for Bugsnag, from Python.

Best-effort telemetry: submitting a report never raises for rate limiting,
network failures or a disabled release stage.
"""

from snag_report.client import AsyncNotifier, Notifier, create_notifier
from snag_report.config import ClientConfig, SchemaVariant, Severity, User, from_env
from snag_report.errors import ConfigurationError, RateLimitedError, SnagReportError, TransportError
from snag_report.ids import generate_identifier
from snag_report.models.result import ReportResult
from snag_report.stages import should_send

__version__ = "0.1.0"
__all__ = [
    "AsyncNotifier",
    "Notifier",
    "create_notifier",
    "ClientConfig",
    "SchemaVariant",
    "Severity",
    "User",
    "from_env",
    "ReportResult",
    "SnagReportError",
    "ConfigurationError",
    "TransportError",
    "RateLimitedError",
    "generate_identifier",
    "should_send",
]
