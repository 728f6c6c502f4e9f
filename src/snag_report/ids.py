"""
Report identifier generation.

An identifier is derived from the report content and the millisecond at which
it was submitted:

    canonical JSON of (severity, message, token, context, stage, metadata)
        -> murmur3 x86_32 seeded with the timestamp
        -> XOR with the timestamp
        -> seed for a PRNG that fills a version 4 UUID

The same inputs at the same millisecond always produce the same identifier,
so a retried report keeps its identity. Different messages or metadata at the
same millisecond collide only by chance.

This is not a cryptographic construction. Anyone who knows the inputs can
predict the identifier, and collisions can be forced on purpose. Do not use
these identifiers as secrets or where an adversary controls the inputs.
"""

import json
import random
import uuid
from typing import Any, Mapping

import mmh3

from snag_report.errors import ConfigurationError


def canonical_json(value: Any) -> bytes:
    """Stable JSON encoding: sorted keys, no whitespace, NaN rejected."""
    try:
        text = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Report metadata is not JSON encodable: {e}") from e
    return text.encode("utf-8")


def generate_identifier(
    access_token: str,
    context: str,
    release_stage: str,
    severity: str,
    message: str,
    metadata: Mapping[str, Any],
    timestamp_ms: int,
) -> str:
    # json would silently stringify int keys; the payload schema only takes str keys
    bad_keys = [key for key in metadata if not isinstance(key, str)]
    if bad_keys:
        raise ConfigurationError(f"Report metadata keys must be strings, got {bad_keys!r}")
    body = canonical_json([severity, message, access_token, context, release_stage, dict(metadata)])
    digest = mmh3.hash(body, timestamp_ms & 0xFFFFFFFF, signed=False)
    rng = random.Random(digest ^ timestamp_ms)
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))
