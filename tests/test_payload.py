"""Payload builder — both schema variants."""

import json

import pytest

from snag_report.config import ClientConfig, Severity, User
from snag_report.errors import ConfigurationError
from snag_report.payload import NOTIFIER_NAME, NOTIFIER_URL, NOTIFIER_VERSION, build_payload
from snag_report.transport.http import encode_body, report_headers

IDENT = "0f8c9d4e-1b2a-4c3d-9e8f-7a6b5c4d3e2f"


def make_config(**overrides) -> ClientConfig:
    data = dict(access_token="t1", code_version="v1", context="Login", release_stage="test")
    data.update(overrides)
    return ClientConfig(**data)


def _roundtrip(payload):
    return json.loads(encode_body(payload))


class TestBugsnagPayload:
    def test_shape(self):
        user = User(id="u1", username="ada", email="ada@example.com")
        payload = _roundtrip(build_payload(
            make_config(user=user), Severity.WARNING, "bad state", {"k": "v", "n": [1, 2]}, IDENT,
        ))

        assert payload["payloadVersion"] == "5"
        assert payload["notifier"] == {"name": NOTIFIER_NAME, "version": NOTIFIER_VERSION, "url": NOTIFIER_URL}
        assert len(payload["events"]) == 1
        event = payload["events"][0]
        assert event["exceptions"] == [{"errorClass": "bad state", "stacktrace": []}]
        assert event["context"] == "Login"
        assert event["severity"] == "warning"
        assert event["metaData"] == {"k": "v", "n": [1, 2], "identifier": IDENT}
        assert event["app"] == {"version": "v1", "releaseStage": "test", "type": "python"}
        assert event["user"] == {"id": "u1", "name": "ada", "email": "ada@example.com"}

    def test_token_travels_in_header_not_body(self):
        config = make_config(access_token="secret-token")
        body = encode_body(build_payload(config, Severity.ERROR, "m", {}, IDENT))
        assert b"secret-token" not in body
        headers = report_headers(config, 1_700_000_000_123)
        assert headers["Bugsnag-Api-Key"] == "secret-token"
        assert headers["Bugsnag-Payload-Version"] == "5"
        assert headers["Bugsnag-Sent-At"] == "2023-11-14T22:13:20.123Z"
        assert headers["Content-Type"] == "application/json"

    def test_user_omitted_when_not_configured(self):
        event = _roundtrip(build_payload(make_config(), Severity.ERROR, "m", {}, IDENT))["events"][0]
        assert "user" not in event

    def test_builder_identifier_wins_over_caller_key(self):
        event = _roundtrip(build_payload(
            make_config(), Severity.ERROR, "m", {"identifier": "mine", "other": 1}, IDENT,
        ))["events"][0]
        assert event["metaData"]["identifier"] == IDENT
        assert event["metaData"]["other"] == 1

    def test_custom_app_type(self):
        event = build_payload(make_config(app_type="django"), Severity.INFO, "m", {}, IDENT)["events"][0]
        assert event["app"]["type"] == "django"


class TestRollbarPayload:
    def test_shape(self):
        config = make_config(schema_variant="B", user=User(id="u1", username="ada"))
        payload = _roundtrip(build_payload(config, Severity.ERROR, "bad state", {"k": "v"}, IDENT))

        assert payload["access_token"] == "t1"
        data = payload["data"]
        assert data["environment"] == "test"
        assert data["context"] == "Login"
        assert data["endpoint"] == "Login"
        assert data["uuid"] == IDENT
        assert data["client"] == {"python": {"code_version": "v1"}}
        assert data["notifier"] == {"name": NOTIFIER_NAME, "version": NOTIFIER_VERSION}
        assert data["level"] == "error"
        assert data["platform"] == "python"
        assert data["language"] == "python"
        assert data["person"] == {"id": "u1", "username": "ada"}
        assert data["body"] == {"message": {"k": "v", "body": "bad state"}}

    def test_builder_message_wins_over_caller_body_key(self):
        config = make_config(schema_variant="B")
        payload = build_payload(config, Severity.INFO, "real", {"body": "spoofed"}, IDENT)
        assert payload["data"]["body"]["message"]["body"] == "real"

    def test_headers(self):
        headers = report_headers(make_config(schema_variant="B", access_token="t9"))
        assert headers == {"Content-Type": "application/json", "X-Rollbar-Access-Token": "t9"}


def test_metadata_outside_the_schema_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        build_payload(make_config(), Severity.ERROR, "m", {1: "x"}, IDENT)
