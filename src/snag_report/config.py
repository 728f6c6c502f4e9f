"""
Client configuration.

A ClientConfig is built once at startup and shared read-only by every
submission. Use with_context() to get a copy scoped to another page/module.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from snag_report.errors import ConfigurationError

BUGSNAG_ENDPOINT = "https://notify.bugsnag.com/"
ROLLBAR_ENDPOINT = "https://api.rollbar.com/api/1/item/"
DEFAULT_MAX_RETRY_ATTEMPTS = 60
ENV_PREFIX = "SNAG_REPORT_"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class SchemaVariant(str, Enum):
    A = "A"  # Bugsnag error reporting API v5
    B = "B"  # legacy Rollbar item format


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None


class ClientConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    access_token: str = Field(repr=False)
    code_version: str
    context: str
    release_stage: str
    enabled_release_stages: frozenset[str] = frozenset()
    user: Optional[User] = None
    schema_variant: SchemaVariant = SchemaVariant.A
    max_retry_attempts: int = Field(default=DEFAULT_MAX_RETRY_ATTEMPTS, ge=0)
    timeout: float = Field(default=30.0, gt=0)
    app_type: str = "python"
    endpoint: Optional[str] = None

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            raise ConfigurationError(
                f"Invalid client configuration: {', '.join(fields) or 'unknown field'}",
                details={"fields": fields},
            ) from None

    @field_validator("access_token", "code_version", "context", "release_stage")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @property
    def resolved_endpoint(self) -> str:
        if self.endpoint:
            return self.endpoint
        return BUGSNAG_ENDPOINT if self.schema_variant is SchemaVariant.A else ROLLBAR_ENDPOINT

    def with_context(self, context: str) -> ClientConfig:
        """Return a copy reporting under another context. The original is untouched."""
        data = self.model_dump()
        data["context"] = context
        return ClientConfig(**data)


def from_env(prefix: str = ENV_PREFIX, environ: Optional[dict[str, str]] = None) -> ClientConfig:
    """Build a ClientConfig from SNAG_REPORT_* environment variables."""
    env = os.environ if environ is None else environ

    def get(name: str) -> Optional[str]:
        return env.get(prefix + name)

    data: dict[str, Any] = {
        "access_token": get("ACCESS_TOKEN") or "",
        "code_version": get("CODE_VERSION") or "",
        "context": get("CONTEXT") or "",
        "release_stage": get("RELEASE_STAGE") or "",
    }
    stages = get("ENABLED_RELEASE_STAGES")
    if stages:
        data["enabled_release_stages"] = {s.strip() for s in stages.split(",") if s.strip()}
    if get("SCHEMA_VARIANT"):
        data["schema_variant"] = get("SCHEMA_VARIANT")
    if get("MAX_RETRY_ATTEMPTS"):
        data["max_retry_attempts"] = get("MAX_RETRY_ATTEMPTS")
    if get("ENDPOINT"):
        data["endpoint"] = get("ENDPOINT")
    return ClientConfig(**data)
