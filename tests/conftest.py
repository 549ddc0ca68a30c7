"""Test configuration and fixtures for aws-s3-service."""

import pytest

from aws_s3_service.credentials import system_properties

AWS_ENV_VARS = (
    "AWS_ACCESS_KEY_ID",
    "AWS_ACCESS_KEY",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SECRET_KEY",
    "AWS_SESSION_TOKEN",
)


@pytest.fixture(autouse=True)
def clean_credential_sources(monkeypatch):
    """Start every test without ambient AWS credentials."""
    for name in AWS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    system_properties.clear()
    yield
    system_properties.clear()


@pytest.fixture
def static_settings():
    """Settings bag with an explicit key pair."""
    return {
        "access_key": "test_key",
        "secret_key": "test_secret",
        "protocol": "https",
    }


@pytest.fixture
def env_credentials(monkeypatch):
    """Expose credentials through environment variables."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "env_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "env_secret")
