"""
HTTP transport — one POST per call, no retries.

Every failure is returned as a SendOutcome instead of raised, so the retry
policy above can branch on status_code == 429.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from snag_report.config import ClientConfig, SchemaVariant
from snag_report.errors import ConfigurationError, RateLimitedError, TransportError
from snag_report.models.result import SendOutcome
from snag_report.payload import NOTIFIER_NAME, NOTIFIER_VERSION, PAYLOAD_VERSION

logger = logging.getLogger("snag_report.transport.http")


def report_headers(config: ClientConfig, sent_at_ms: Optional[int] = None) -> dict[str, str]:
    headers: dict[str, str] = {"Content-Type": "application/json"}
    if config.schema_variant is SchemaVariant.B:
        headers["X-Rollbar-Access-Token"] = config.access_token
        return headers
    headers["Bugsnag-Api-Key"] = config.access_token
    headers["Bugsnag-Payload-Version"] = PAYLOAD_VERSION
    if sent_at_ms is not None:
        sent_at = datetime.fromtimestamp(sent_at_ms / 1000, tz=timezone.utc)
        headers["Bugsnag-Sent-At"] = sent_at.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return headers


def encode_body(payload: dict[str, Any]) -> bytes:
    try:
        return json.dumps(payload, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Payload is not JSON encodable: {e}") from e


class HttpTransport:
    def __init__(self, endpoint: str, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self._endpoint = endpoint
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": f"{NOTIFIER_NAME}/{NOTIFIER_VERSION}"},
            timeout=timeout,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def post(self, body: bytes, headers: dict[str, str]) -> SendOutcome:
        try:
            resp = await self._client.post(self._endpoint, content=body, headers=headers, timeout=self._timeout)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            return SendOutcome(False, error=ConfigurationError(f"Malformed endpoint URL {self._endpoint!r}: {e}"))
        except httpx.TimeoutException as e:
            return SendOutcome(False, error=TransportError(f"Timed out posting report: {e!r}"))
        except httpx.HTTPError as e:
            return SendOutcome(False, error=TransportError(f"Network error posting report: {e!r}"))

        if 200 <= resp.status_code < 300:
            return SendOutcome(True, status_code=resp.status_code)
        if resp.status_code == 429:
            return SendOutcome(False, status_code=429, error=RateLimitedError())
        logger.debug("Report rejected with HTTP %s: %s", resp.status_code, resp.text[:200])
        return SendOutcome(
            False,
            status_code=resp.status_code,
            error=TransportError(f"HTTP {resp.status_code}: {resp.text[:200]}", status_code=resp.status_code),
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
