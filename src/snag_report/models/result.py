"""
Outcomes of a single HTTP attempt and of a whole report submission.
"""

from typing import Optional

from snag_report.errors import SnagReportError


class SendOutcome:
    """Result of one POST. Produced by the transport, consumed by the retry policy."""

    __slots__ = ("ok", "status_code", "error")

    def __init__(self, ok: bool, status_code: Optional[int] = None, error: Optional[SnagReportError] = None):
        self.ok = ok
        self.status_code = status_code
        self.error = error

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429

    def __repr__(self) -> str:
        return f"SendOutcome(ok={self.ok!r}, status_code={self.status_code!r})"


class ReportResult:
    """What a report_* call resolves to.

    A report suppressed by the release-stage gate is ok=True with attempts=0;
    callers are not expected to tell it apart from a delivered one.
    """

    __slots__ = ("ok", "identifier", "status_code", "attempts", "error")

    def __init__(
        self,
        ok: bool,
        identifier: Optional[str] = None,
        status_code: Optional[int] = None,
        attempts: int = 0,
        error: Optional[SnagReportError] = None,
    ):
        self.ok = ok
        self.identifier = identifier
        self.status_code = status_code
        self.attempts = attempts
        self.error = error

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        return (f"ReportResult(ok={self.ok!r}, identifier={self.identifier!r}, "
                f"status_code={self.status_code!r}, attempts={self.attempts!r})")
