"""Error taxonomy for GitHub client operations.

Every fallible client operation raises exactly one of five GitHubError
subclasses, each tagged with an ErrorKind:

- TokenNotFoundError: no usable personal access token
- ConfigNotFoundError: no usable owner/repo coordinates
- ApiError: a GitHub API call failed (wraps TransportError)
- IoError: a credential file could not be read or written (wraps OSError)
- FeatureNotImplementedError: the requested behaviour is not supported

str(error) renders a multi-line report: title, separator, the symptom
with its glyph, then a remediation list specific to the kind. Rendering
is driven by the REPORTS table, which must cover every ErrorKind.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional, Tuple

from clambake.github.transport import TransportError


class ErrorKind(str, Enum):
    """Closed set of failure kinds a client operation can produce."""

    TOKEN_NOT_FOUND = "token_not_found"
    CONFIG_NOT_FOUND = "config_not_found"
    API_ERROR = "api_error"
    IO_ERROR = "io_error"
    NOT_IMPLEMENTED = "not_implemented"


@dataclass(frozen=True)
class ErrorReport:
    """Static presentation of one error kind.

    Attributes:
        title: First line of the report.
        glyph: Severity glyph prefixed to the symptom line.
        heading: Heading of the remediation list.
        remediation: One entry per remediation step.
    """

    title: str
    glyph: str
    heading: str
    remediation: Tuple[str, ...]


REPORTS: Dict[ErrorKind, ErrorReport] = {
    ErrorKind.TOKEN_NOT_FOUND: ErrorReport(
        title="GitHub Authentication Error",
        glyph="🔑",
        heading="QUICK FIXES",
        remediation=(
            "Use GitHub CLI: gh auth login",
            "Set token directly: export CLAMBAKE_GITHUB_TOKEN=your_token",
            "Create token at: https://github.com/settings/tokens\n"
            "     (needs 'repo' scope for private repos, 'public_repo' for public)",
        ),
    ),
    ErrorKind.CONFIG_NOT_FOUND: ErrorReport(
        title="GitHub Configuration Error",
        glyph="📂",
        heading="QUICK FIXES",
        remediation=(
            "Set environment variables: export GITHUB_OWNER=username GITHUB_REPO=reponame",
            "Use GitHub CLI in repo: gh repo view",
            "Run setup: clambake init",
        ),
    ),
    ErrorKind.API_ERROR: ErrorReport(
        title="GitHub API Error",
        glyph="🌐",
        heading="TROUBLESHOOTING",
        remediation=(
            "Check authentication: gh auth status",
            "Test connection: curl -I https://api.github.com",
            "Verify repository access: gh repo view",
            "Check rate limits: gh api rate_limit",
        ),
    ),
    ErrorKind.IO_ERROR: ErrorReport(
        title="File System Error",
        glyph="📁",
        heading="POSSIBLE CAUSES",
        remediation=(
            "File permissions issue",
            "Directory doesn't exist",
            "Disk space or I/O error",
        ),
    ),
    ErrorKind.NOT_IMPLEMENTED: ErrorReport(
        title="Feature Not Yet Implemented",
        glyph="🚧",
        heading="ALTERNATIVES",
        remediation=(
            "Manual workaround may be available",
            "Feature coming in future release",
        ),
    ),
}

_uncovered = set(ErrorKind) - set(REPORTS)
if _uncovered:
    raise RuntimeError(f"No error report defined for: {sorted(k.value for k in _uncovered)}")


class GitHubError(Exception):
    """Base class of the client error taxonomy.

    Subclasses must declare a `kind`; the set of subclasses is closed and
    mirrors ErrorKind one-to-one.

    Attributes:
        message: The symptom shown on the report's glyph line.
    """

    kind: ClassVar[ErrorKind]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not isinstance(cls.__dict__.get("kind"), ErrorKind):
            raise TypeError(f"{cls.__name__} must declare an ErrorKind")

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return render_error(self)


class TokenNotFoundError(GitHubError):
    """No valid GitHub token in the environment or the credential directory."""

    kind = ErrorKind.TOKEN_NOT_FOUND


class ConfigNotFoundError(GitHubError):
    """No valid owner/repo pair in the environment or the credential directory."""

    kind = ErrorKind.CONFIG_NOT_FOUND


class ApiError(GitHubError):
    """A GitHub API call failed.

    Attributes:
        transport_error: The wrapped TransportError, rendered verbatim.
    """

    kind = ErrorKind.API_ERROR

    def __init__(self, transport_error: TransportError):
        self.transport_error = transport_error
        super().__init__(str(transport_error))
        self.__cause__ = transport_error

    @property
    def status_code(self) -> Optional[int]:
        return self.transport_error.status_code


class IoError(GitHubError):
    """A credential file could not be read or written.

    Attributes:
        os_error: The wrapped OSError, rendered verbatim.
    """

    kind = ErrorKind.IO_ERROR

    def __init__(self, os_error: OSError):
        self.os_error = os_error
        super().__init__(str(os_error))
        self.__cause__ = os_error


class FeatureNotImplementedError(GitHubError):
    """The requested behaviour is not supported by the client."""

    kind = ErrorKind.NOT_IMPLEMENTED


def render_error(error: GitHubError) -> str:
    """Render the structured report for a taxonomy member.

    Args:
        error: Any GitHubError subclass instance.

    Returns:
        Multi-line report: title, separator, symptom, remediation list.
    """
    report = REPORTS[error.kind]
    lines = [
        report.title,
        "─" * len(report.title),
        f"{report.glyph} {error.message}",
        "",
        f"🔧 {report.heading}:",
    ]
    lines.extend(f"   → {step}" for step in report.remediation)
    return "\n".join(lines)


def log_error(logger: logging.Logger, error: GitHubError) -> None:
    """Log the full report of a taxonomy member at error level."""
    logger.error(
        "%s",
        render_error(error),
        extra={"error_kind": error.kind.value},
    )
