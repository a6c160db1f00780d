"""Client configuration using pydantic-settings.

This module defines the ClientSettings class that reads configuration
from environment variables with the CLAMBAKE_ prefix. Every field has a
default, so an empty environment yields a usable configuration.

The GitHub token and repository coordinates are deliberately not part of
these settings: they are resolved by CredentialResolver, which layers
environment variables over the credential directory and rejects
placeholder values.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """GitHub client configuration from environment variables.

    All environment variables are prefixed with CLAMBAKE_
    (e.g., CLAMBAKE_API_BASE_URL, CLAMBAKE_RETRY_BASE_DELAY).
    """

    model_config = SettingsConfigDict(
        env_prefix="CLAMBAKE_",
        case_sensitive=False,
    )

    # -------------------------------------------------------------------------
    # GitHub API
    # -------------------------------------------------------------------------
    # Base URL for GitHub API (supports GitHub Enterprise)
    api_base_url: str = "https://api.github.com"

    # Request timeout in seconds for each HTTP call
    request_timeout: float = 30.0

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------
    # Directory holding github_token, github_owner and github_repo files.
    # Relative paths are resolved against the process working directory.
    credentials_dir: str = ".clambake/credentials"

    # -------------------------------------------------------------------------
    # Retry policy (issue assignment)
    # -------------------------------------------------------------------------
    # Total attempts, including the first one
    retry_max_attempts: int = 3

    # Seconds; the delay before retry n is retry_base_delay * n
    retry_base_delay: float = 0.5

    # -------------------------------------------------------------------------
    # Git
    # -------------------------------------------------------------------------
    git_path: str = "git"
    git_remote: str = "origin"
    git_timeout_seconds: int = 120

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate that the API base URL is an http(s) URL."""
        if not v or not v.strip():
            raise ValueError("api_base_url cannot be empty")
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("credentials_dir", "git_path", "git_remote")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("value cannot be empty")
        return v

    @field_validator("retry_max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        """Validate that at least one attempt is made."""
        if v < 1:
            raise ValueError("retry_max_attempts must be at least 1")
        return v

    @field_validator("retry_base_delay")
    @classmethod
    def validate_base_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("retry_base_delay cannot be negative")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        return v

    @field_validator("git_timeout_seconds")
    @classmethod
    def validate_git_timeout(cls, v: int) -> int:
        if v < 1:
            raise ValueError("git_timeout_seconds must be at least 1")
        return v


def get_settings() -> ClientSettings:
    """Create and return a ClientSettings instance.

    Returns:
        ClientSettings: Configured settings instance.

    Raises:
        pydantic.ValidationError: If a value is invalid.
    """
    return ClientSettings()
