"""
Ingestion payload models.

Variant A is the Bugsnag error reporting API, payload version 5.
Variant B is the legacy Rollbar item format, kept for receivers that still
speak it.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class NotifierInfo(BaseModel):
    name: str
    version: str
    url: Optional[str] = None


# -- Variant A ---------------------------------------------------------------

class BugsnagException(BaseModel):
    """The report message doubles as the error class; there is never a stacktrace."""
    error_class: str = Field(alias="errorClass")
    stacktrace: list[dict[str, Any]] = []

    model_config = {"populate_by_name": True}


class BugsnagApp(BaseModel):
    version: str
    release_stage: str = Field(alias="releaseStage")
    type: str

    model_config = {"populate_by_name": True}


class BugsnagUser(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None


class BugsnagEvent(BaseModel):
    exceptions: list[BugsnagException]
    context: str
    severity: str
    meta_data: dict[str, Any] = Field(default_factory=dict, alias="metaData")
    app: BugsnagApp
    user: Optional[BugsnagUser] = None

    model_config = {"populate_by_name": True}


class BugsnagPayload(BaseModel):
    payload_version: str = Field(default="5", alias="payloadVersion")
    notifier: NotifierInfo
    events: list[BugsnagEvent]

    model_config = {"populate_by_name": True}


# -- Variant B ---------------------------------------------------------------

class RollbarPerson(BaseModel):
    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None


class RollbarBody(BaseModel):
    # {"body": <message>, **metadata}
    message: dict[str, Any]


class RollbarData(BaseModel):
    environment: str
    context: str
    uuid: str
    client: dict[str, dict[str, str]]
    notifier: NotifierInfo
    level: str
    endpoint: str
    platform: str = "python"
    language: str = "python"
    person: Optional[RollbarPerson] = None
    body: RollbarBody


class RollbarPayload(BaseModel):
    access_token: str
    data: RollbarData
