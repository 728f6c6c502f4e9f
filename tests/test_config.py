"""ClientConfig construction and environment loading."""

import pytest
from pydantic import ValidationError

from snag_report.config import (
    BUGSNAG_ENDPOINT,
    ROLLBAR_ENDPOINT,
    ClientConfig,
    SchemaVariant,
    User,
    from_env,
)
from snag_report.errors import ConfigurationError


def make_config(**overrides) -> ClientConfig:
    data = dict(access_token="t1", code_version="v1", context="Login", release_stage="test")
    data.update(overrides)
    return ClientConfig(**data)


def test_defaults():
    config = make_config()
    assert config.enabled_release_stages == frozenset()
    assert config.user is None
    assert config.schema_variant is SchemaVariant.A
    assert config.max_retry_attempts == 60
    assert config.resolved_endpoint == BUGSNAG_ENDPOINT


def test_variant_b_uses_legacy_endpoint():
    assert make_config(schema_variant="B").resolved_endpoint == ROLLBAR_ENDPOINT


def test_endpoint_override():
    assert make_config(endpoint="http://localhost:9000/").resolved_endpoint == "http://localhost:9000/"


@pytest.mark.parametrize("field", ["access_token", "code_version", "context", "release_stage"])
def test_blank_required_field_is_rejected(field):
    with pytest.raises(ConfigurationError) as exc:
        make_config(**{field: "  "})
    assert exc.value.details == {"fields": [field]}


def test_negative_retry_budget_is_rejected():
    with pytest.raises(ConfigurationError):
        make_config(max_retry_attempts=-1)


def test_config_is_immutable():
    config = make_config()
    with pytest.raises(ValidationError):
        config.context = "Other"


def test_token_not_in_repr():
    assert "t1" not in repr(make_config(access_token="t1"))


def test_with_context_returns_copy():
    config = make_config(user=User(id="u1"), enabled_release_stages={"test"})
    scoped = config.with_context("Checkout")
    assert scoped.context == "Checkout"
    assert config.context == "Login"
    assert scoped.user == config.user
    assert scoped.enabled_release_stages == frozenset({"test"})


def test_from_env():
    config = from_env(environ={
        "SNAG_REPORT_ACCESS_TOKEN": "t1",
        "SNAG_REPORT_CODE_VERSION": "abc123",
        "SNAG_REPORT_CONTEXT": "Worker",
        "SNAG_REPORT_RELEASE_STAGE": "staging",
        "SNAG_REPORT_ENABLED_RELEASE_STAGES": "production, staging",
        "SNAG_REPORT_SCHEMA_VARIANT": "B",
        "SNAG_REPORT_MAX_RETRY_ATTEMPTS": "3",
    })
    assert config.code_version == "abc123"
    assert config.enabled_release_stages == frozenset({"production", "staging"})
    assert config.schema_variant is SchemaVariant.B
    assert config.max_retry_attempts == 3


def test_from_env_missing_token():
    with pytest.raises(ConfigurationError):
        from_env(environ={})
