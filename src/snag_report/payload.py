"""
Payload construction for both schema variants.

Caller metadata is merged into an object the builder also writes to. Keys the
builder owns win over caller keys with the same name:

- variant A: ``metaData["identifier"]`` is always the generated identifier
- variant B: ``body.message["body"]`` is always the report message

A caller passing either key loses its value without warning.
"""

from typing import Any, Mapping

from pydantic import ValidationError

from snag_report.config import ClientConfig, SchemaVariant, Severity
from snag_report.errors import ConfigurationError
from snag_report.models.payload import (
    BugsnagApp,
    BugsnagEvent,
    BugsnagException,
    BugsnagPayload,
    BugsnagUser,
    NotifierInfo,
    RollbarBody,
    RollbarData,
    RollbarPayload,
    RollbarPerson,
)

NOTIFIER_NAME = "snag-report"
NOTIFIER_VERSION = "0.1.0"
NOTIFIER_URL = "https://github.com/snag-report/snag-report"
PAYLOAD_VERSION = "5"

IDENTIFIER_KEY = "identifier"
MESSAGE_BODY_KEY = "body"


def notifier_info() -> NotifierInfo:
    return NotifierInfo(name=NOTIFIER_NAME, version=NOTIFIER_VERSION, url=NOTIFIER_URL)


def build_bugsnag_payload(
    config: ClientConfig,
    severity: Severity,
    message: str,
    metadata: Mapping[str, Any],
    identifier: str,
) -> dict[str, Any]:
    user = None
    if config.user is not None:
        user = BugsnagUser(id=config.user.id, name=config.user.username, email=config.user.email)
    event = BugsnagEvent(
        exceptions=[BugsnagException(error_class=message)],
        context=config.context,
        severity=severity.value,
        meta_data={**metadata, IDENTIFIER_KEY: identifier},
        app=BugsnagApp(version=config.code_version, release_stage=config.release_stage, type=config.app_type),
        user=user,
    )
    payload = BugsnagPayload(payload_version=PAYLOAD_VERSION, notifier=notifier_info(), events=[event])
    return payload.model_dump(by_alias=True, exclude_none=True)


def build_rollbar_payload(
    config: ClientConfig,
    severity: Severity,
    message: str,
    metadata: Mapping[str, Any],
    identifier: str,
) -> dict[str, Any]:
    person = None
    if config.user is not None:
        person = RollbarPerson(id=config.user.id, username=config.user.username, email=config.user.email)
    payload = RollbarPayload(
        access_token=config.access_token,
        data=RollbarData(
            environment=config.release_stage,
            context=config.context,
            uuid=identifier,
            client={"python": {"code_version": config.code_version}},
            notifier=NotifierInfo(name=NOTIFIER_NAME, version=NOTIFIER_VERSION),
            level=severity.value,
            endpoint=config.context,
            person=person,
            body=RollbarBody(message={**metadata, MESSAGE_BODY_KEY: message}),
        ),
    )
    return payload.model_dump(by_alias=True, exclude_none=True)


def build_payload(
    config: ClientConfig,
    severity: Severity,
    message: str,
    metadata: Mapping[str, Any],
    identifier: str,
) -> dict[str, Any]:
    build = build_rollbar_payload if config.schema_variant is SchemaVariant.B else build_bugsnag_payload
    try:
        return build(config, severity, message, metadata, identifier)
    except ValidationError as e:
        raise ConfigurationError(f"Report does not fit the payload schema: {e}") from e
