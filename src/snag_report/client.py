"""
AsyncNotifier / Notifier — report submission clients.

    gate -> identifier -> payload -> retry(transport) -> ReportResult

Submission is best effort. Expected failures (rate limiting that outlives the
retry budget, network errors, bad status codes, unencodable metadata) come
back as ReportResult(ok=False, error=...) and are never raised. A report
suppressed by the release-stage gate comes back as ok=True.
"""

import asyncio
import inspect
import logging
import time
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

import httpx

from snag_report.config import ClientConfig, Severity
from snag_report.errors import ConfigurationError
from snag_report.ids import generate_identifier
from snag_report.models.result import ReportResult
from snag_report.payload import build_payload
from snag_report.retry import Sleep, send_with_retry
from snag_report.stages import should_send
from snag_report.transport.http import HttpTransport, encode_body, report_headers

logger = logging.getLogger("snag_report.client")

Clock = Callable[[], Union[int, Awaitable[int]]]


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


class AsyncNotifier:
    """Async report client (primary)."""

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[HttpTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None,
    ):
        self._config = config
        self._owns_transport = transport is None
        self._transport = transport or HttpTransport(
            config.resolved_endpoint, timeout=config.timeout, client=http_client,
        )
        self._clock = clock or _wall_clock_ms
        self._sleep = sleep or asyncio.sleep
        self._pending: set[asyncio.Task[ReportResult]] = set()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def scoped(self, context: str) -> "AsyncNotifier":
        """Same client reporting under another context. Shares the transport."""
        return AsyncNotifier(
            self._config.with_context(context),
            transport=self._transport,
            clock=self._clock,
            sleep=self._sleep,
        )

    async def report_error(self, message: str, metadata: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> ReportResult:
        return await self.report(Severity.ERROR, message, metadata, **kwargs)

    async def report_warning(self, message: str, metadata: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> ReportResult:
        return await self.report(Severity.WARNING, message, metadata, **kwargs)

    async def report_info(self, message: str, metadata: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> ReportResult:
        return await self.report(Severity.INFO, message, metadata, **kwargs)

    async def report(
        self,
        severity: Severity,
        message: str,
        metadata: Optional[Mapping[str, Any]] = None,
        *,
        context: Optional[str] = None,
        max_retry_attempts: Optional[int] = None,
    ) -> ReportResult:
        severity = Severity(severity)
        metadata = dict(metadata or {})
        try:
            config = self._config if context is None else self._config.with_context(context)
        except ConfigurationError as e:
            return ReportResult(False, error=e)
        retries = config.max_retry_attempts if max_retry_attempts is None else max_retry_attempts
        if retries < 0:
            return ReportResult(False, error=ConfigurationError(
                f"max_retry_attempts must be >= 0, got {retries}", details={"fields": ["max_retry_attempts"]},
            ))

        timestamp_ms = await self._now_ms()
        enabled = should_send(config.enabled_release_stages, config.release_stage)
        try:
            identifier = generate_identifier(
                config.access_token, config.context, config.release_stage,
                severity.value, message, metadata, timestamp_ms,
            )
        except ConfigurationError as e:
            logger.warning("Dropping %s report: %s", severity.value, e)
            return ReportResult(False, error=e)

        if not enabled:
            logger.debug("Release stage %r not enabled, %s report %s suppressed",
                         config.release_stage, severity.value, identifier)
            return ReportResult(True, identifier=identifier)

        try:
            body = encode_body(build_payload(config, severity, message, metadata, identifier))
        except ConfigurationError as e:
            logger.warning("Dropping %s report %s: %s", severity.value, identifier, e)
            return ReportResult(False, identifier=identifier, error=e)
        headers = report_headers(config, timestamp_ms)

        result = await send_with_retry(
            lambda: self._transport.post(body, headers),
            max_retry_attempts=retries,
            sleep=self._sleep,
        )
        outcome = result.outcome
        if not outcome.ok:
            logger.info("Report %s not delivered after %d attempt(s): %s",
                        identifier, result.attempts, outcome.error)
        return ReportResult(
            outcome.ok,
            identifier=identifier,
            status_code=outcome.status_code,
            attempts=result.attempts,
            error=outcome.error,
        )

    # -- fire and forget ------------------------------------------------------

    def report_nowait(
        self, severity: Severity, message: str, metadata: Optional[Mapping[str, Any]] = None,
    ) -> "asyncio.Task[ReportResult]":
        """Schedule a report and return immediately. Failures are logged, never raised."""
        task = asyncio.ensure_future(self.report(severity, message, metadata))
        self._pending.add(task)
        task.add_done_callback(self._discard)
        return task

    def report_error_nowait(self, message: str, metadata: Optional[Mapping[str, Any]] = None) -> "asyncio.Task[ReportResult]":
        return self.report_nowait(Severity.ERROR, message, metadata)

    def report_warning_nowait(self, message: str, metadata: Optional[Mapping[str, Any]] = None) -> "asyncio.Task[ReportResult]":
        return self.report_nowait(Severity.WARNING, message, metadata)

    def report_info_nowait(self, message: str, metadata: Optional[Mapping[str, Any]] = None) -> "asyncio.Task[ReportResult]":
        return self.report_nowait(Severity.INFO, message, metadata)

    def _discard(self, task: "asyncio.Task[ReportResult]") -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background report raised: %r", exc)

    async def flush(self) -> None:
        """Wait for reports scheduled with report_*_nowait()."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        await self.flush()
        if self._owns_transport:
            await self._transport.close()

    async def __aenter__(self) -> "AsyncNotifier":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _now_ms(self) -> int:
        now = self._clock()
        if inspect.isawaitable(now):
            now = await now
        return int(now)


def create_notifier(
    config: ClientConfig,
    *,
    transport: Optional[HttpTransport] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    clock: Optional[Clock] = None,
    sleep: Optional[Sleep] = None,
) -> AsyncNotifier:
    """Bind a configuration once and get report_error/report_warning/report_info back."""
    return AsyncNotifier(config, transport=transport, http_client=http_client, clock=clock, sleep=sleep)


class Notifier:
    """Sync wrapper around AsyncNotifier. Runs the event loop internally.

    Notifiers returned by scoped() share the parent's loop and transport;
    closing the parent closes both.
    """

    def __init__(self, config: ClientConfig, **kwargs: Any):
        self._loop = asyncio.new_event_loop()
        self._async = AsyncNotifier(config, **kwargs)
        self._owns_loop = True

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def config(self) -> ClientConfig:
        return self._async.config

    def scoped(self, context: str) -> "Notifier":
        scoped = Notifier.__new__(Notifier)
        scoped._loop = self._loop
        scoped._async = self._async.scoped(context)
        scoped._owns_loop = False
        return scoped

    def report(self, severity: Severity, message: str, metadata: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> ReportResult:
        return self._run(self._async.report(severity, message, metadata, **kwargs))

    def report_error(self, message: str, metadata: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> ReportResult:
        return self.report(Severity.ERROR, message, metadata, **kwargs)

    def report_warning(self, message: str, metadata: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> ReportResult:
        return self.report(Severity.WARNING, message, metadata, **kwargs)

    def report_info(self, message: str, metadata: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> ReportResult:
        return self.report(Severity.INFO, message, metadata, **kwargs)

    def close(self) -> None:
        self._run(self._async.aclose())
        if self._owns_loop:
            self._loop.close()

    def __enter__(self) -> "Notifier":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
