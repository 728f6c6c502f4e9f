"""
Retry-on-429 policy.

    Attempting --2xx--------------------------> Succeeded
    Attempting --429, budget left--> WaitingToRetry --delay--> Attempting
    Attempting --429, no budget / other failure--> Failed

Only rate limiting is retried. The budget drops by one per retry, so a call
makes at most max_retry_attempts + 1 attempts. Cancelling the awaiting task
interrupts the pending sleep and no further attempt is made.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from snag_report.models.result import SendOutcome

logger = logging.getLogger("snag_report.retry")

RETRY_DELAY_S = 1.0

Sleep = Callable[[float], Awaitable[None]]


class RetryOutcome:
    __slots__ = ("outcome", "attempts")

    def __init__(self, outcome: SendOutcome, attempts: int):
        self.outcome = outcome
        self.attempts = attempts


async def send_with_retry(
    attempt: Callable[[], Awaitable[SendOutcome]],
    max_retry_attempts: int,
    delay: float = RETRY_DELAY_S,
    sleep: Sleep = asyncio.sleep,
) -> RetryOutcome:
    if max_retry_attempts < 0:
        raise ValueError("max_retry_attempts must be >= 0")
    remaining = max_retry_attempts
    attempts = 0
    while True:
        outcome = await attempt()
        attempts += 1
        if outcome.ok:
            return RetryOutcome(outcome, attempts)
        if not outcome.rate_limited:
            return RetryOutcome(outcome, attempts)
        if remaining == 0:
            logger.warning("Report still rate limited after %d attempts, giving up", attempts)
            return RetryOutcome(outcome, attempts)
        remaining -= 1
        logger.debug("Rate limited, retrying in %.1fs (%d retries left)", delay, remaining)
        await sleep(delay)
