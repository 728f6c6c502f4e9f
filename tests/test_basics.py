"""Basic unit tests for snag-report package."""

from snag_report import (
    AsyncNotifier,
    Notifier,
    SnagReportError,
    ConfigurationError,
    TransportError,
    RateLimitedError,
    Severity,
    __version__,
)
from snag_report.payload import NOTIFIER_VERSION


def test_version():
    assert __version__ == "0.1.0"


def test_notifier_version_matches_package_version():
    assert NOTIFIER_VERSION == __version__


def test_public_exports():
    assert AsyncNotifier is not None
    assert Notifier is not None


def test_error_hierarchy():
    assert issubclass(ConfigurationError, SnagReportError)
    assert issubclass(TransportError, SnagReportError)
    assert issubclass(RateLimitedError, TransportError)


def test_error_attributes():
    err = SnagReportError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    bad_status = TransportError("HTTP 500: oops", status_code=500)
    assert bad_status.code == "transport_error"
    assert bad_status.details == {"status_code": 500}

    limited = RateLimitedError()
    assert limited.code == "rate_limited"
    assert limited.status_code == 429


def test_severity_values():
    assert Severity.ERROR == "error"
    assert Severity.WARNING == "warning"
    assert Severity.INFO == "info"
