"""Unit tests for client settings."""

import pytest
from pydantic import ValidationError

from clambake.config import ClientSettings, get_settings


def test_defaults():
    settings = get_settings()

    assert settings.api_base_url == "https://api.github.com"
    assert settings.credentials_dir == ".clambake/credentials"
    assert settings.retry_max_attempts == 3
    assert settings.retry_base_delay == 0.5
    assert settings.git_remote == "origin"


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("CLAMBAKE_API_BASE_URL", "https://github.example.com/api/v3/")
    monkeypatch.setenv("CLAMBAKE_RETRY_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("CLAMBAKE_RETRY_BASE_DELAY", "0.1")

    settings = get_settings()

    assert settings.api_base_url == "https://github.example.com/api/v3"
    assert settings.retry_max_attempts == 5
    assert settings.retry_base_delay == 0.1


def test_token_variable_is_not_a_setting(monkeypatch):
    monkeypatch.setenv("CLAMBAKE_GITHUB_TOKEN", "ghp_secret")
    settings = get_settings()
    assert "ghp_secret" not in repr(settings)


@pytest.mark.parametrize(
    "field,value",
    [
        ("api_base_url", "ftp://github.com"),
        ("api_base_url", ""),
        ("retry_max_attempts", 0),
        ("retry_base_delay", -1.0),
        ("request_timeout", 0),
        ("git_remote", " "),
        ("git_timeout_seconds", 0),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        ClientSettings(**{field: value})
