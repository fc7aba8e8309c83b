"""Unit tests for logging helpers."""

from deploy_wizard.utils.logging import redact_secrets


def test_redacts_credentials():
    event = redact_secrets(
        None,
        "info",
        {"event": "x", "db_password": "pw", "api_key": "k", "domain": "x.com"},
    )

    assert event["db_password"] == "***"
    assert event["api_key"] == "***"
    assert event["domain"] == "x.com"


def test_empty_values_left_alone():
    event = redact_secrets(None, "info", {"event": "x", "github_token": ""})
    assert event["github_token"] == ""
