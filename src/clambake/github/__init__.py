"""GitHub integration for clambake.

This module provides:
- GitHubOps: the capability interface for issue/branch/PR operations
- GitHubClient: the production implementation over the GitHub API
- InMemoryGitHub: an in-memory implementation for tests
- The GitHubError taxonomy and its report rendering
- Credential resolution and the assign retry policy
"""

from clambake.github.client import GitHubClient
from clambake.github.credentials import CredentialResolver, Credentials, write_credentials
from clambake.github.errors import (
    ApiError,
    ConfigNotFoundError,
    ErrorKind,
    FeatureNotImplementedError,
    GitHubError,
    IoError,
    TokenNotFoundError,
    log_error,
    render_error,
)
from clambake.github.memory import InMemoryGitHub
from clambake.github.models import Issue, PullRequest
from clambake.github.ops import GitHubOps
from clambake.github.retry import RetryState, with_retry

__all__ = [
    "ApiError",
    "ConfigNotFoundError",
    "CredentialResolver",
    "Credentials",
    "ErrorKind",
    "FeatureNotImplementedError",
    "GitHubClient",
    "GitHubError",
    "GitHubOps",
    "InMemoryGitHub",
    "IoError",
    "Issue",
    "PullRequest",
    "RetryState",
    "TokenNotFoundError",
    "log_error",
    "render_error",
    "with_retry",
    "write_credentials",
]
