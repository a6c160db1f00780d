"""Credential resolution for the GitHub client.

The access token and the target repository coordinates are resolved
with a fixed precedence:

1. Environment variables (CLAMBAKE_GITHUB_TOKEN, GITHUB_OWNER, GITHUB_REPO)
2. Files in the credential directory (.clambake/credentials/github_token,
   github_owner, github_repo), trimmed of surrounding whitespace

Values equal to the template placeholders shipped by `clambake init`
are treated as absent from the environment and rejected from files.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple, Union

from clambake.github.errors import ConfigNotFoundError, IoError, TokenNotFoundError


logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "CLAMBAKE_GITHUB_TOKEN"
OWNER_ENV_VAR = "GITHUB_OWNER"
REPO_ENV_VAR = "GITHUB_REPO"

DEFAULT_CREDENTIALS_DIR = Path(".clambake") / "credentials"
TOKEN_FILE = "github_token"
OWNER_FILE = "github_owner"
REPO_FILE = "github_repo"

TOKEN_PLACEHOLDER = "YOUR_GITHUB_TOKEN_HERE"
OWNER_PLACEHOLDER = "your-github-username"
REPO_PLACEHOLDER = "your-repo-name"

TOKEN_CREATION_URL = "https://github.com/settings/tokens"

# Token files hold a secret; owner-only read/write
TOKEN_FILE_PERMISSIONS = 0o600


def redact_secret(value: str, visible_chars: int = 4) -> str:
    """Redact a secret value, showing only the first few characters.

    Args:
        value: The secret value to redact.
        visible_chars: Number of characters to show at the start.

    Returns:
        Redacted string with asterisks replacing hidden characters.
    """
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def _is_usable(value: Optional[str], placeholder: str) -> bool:
    return bool(value) and value != placeholder


@dataclass(frozen=True)
class Credentials:
    """Resolved GitHub credentials.

    Construction validates every field; an empty or placeholder value
    raises the matching NotFound error, so a Credentials instance is
    always usable.

    Attributes:
        token: GitHub personal access token.
        owner: Repository owner (user or organization).
        repo: Repository name.
    """

    token: str = field(repr=False)
    owner: str
    repo: str

    def __post_init__(self):
        if not _is_usable(self.token, TOKEN_PLACEHOLDER):
            raise TokenNotFoundError(
                f"GitHub token must be set to an actual value, not empty or {TOKEN_PLACEHOLDER}"
            )
        if not _is_usable(self.owner, OWNER_PLACEHOLDER) or not _is_usable(
            self.repo, REPO_PLACEHOLDER
        ):
            raise ConfigNotFoundError(
                "GitHub owner and repo must be set to actual values, not placeholders"
            )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class CredentialResolver:
    """Resolve the token and repository coordinates.

    Attributes:
        environ: Environment mapping consulted first (defaults to os.environ).
        credentials_dir: Directory holding the fallback credential files.
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        credentials_dir: Union[str, Path] = DEFAULT_CREDENTIALS_DIR,
    ):
        self.environ = os.environ if environ is None else environ
        self.credentials_dir = Path(credentials_dir)

    @property
    def token_path(self) -> Path:
        return self.credentials_dir / TOKEN_FILE

    @property
    def owner_path(self) -> Path:
        return self.credentials_dir / OWNER_FILE

    @property
    def repo_path(self) -> Path:
        return self.credentials_dir / REPO_FILE

    def _env(self, name: str) -> str:
        return (self.environ.get(name) or "").strip()

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise IoError(e) from e

    def resolve_token(self) -> str:
        """Resolve the GitHub token.

        Returns:
            The token from CLAMBAKE_GITHUB_TOKEN, or from the token file.

        Raises:
            TokenNotFoundError: If neither source holds a usable token.
            IoError: If the token file exists but cannot be read.
        """
        token = self._env(TOKEN_ENV_VAR)
        if _is_usable(token, TOKEN_PLACEHOLDER):
            logger.debug("GitHub token resolved from environment")
            return token

        if not self.token_path.exists():
            raise TokenNotFoundError(
                f"GitHub token not found. Please set {TOKEN_ENV_VAR} environment "
                f"variable or create {self.token_path} with your GitHub personal "
                f"access token (create one at {TOKEN_CREATION_URL})."
            )

        token = self._read(self.token_path)
        if not _is_usable(token, TOKEN_PLACEHOLDER):
            raise TokenNotFoundError(
                f"Please replace {TOKEN_PLACEHOLDER} with your actual GitHub token "
                f"in {self.token_path} or set {TOKEN_ENV_VAR} "
                f"(create one at {TOKEN_CREATION_URL})."
            )

        logger.debug(
            "GitHub token resolved from file",
            extra={"path": str(self.token_path)},
        )
        return token

    def resolve_config(self) -> Tuple[str, str]:
        """Resolve the repository owner and name.

        Returns:
            (owner, repo) from GITHUB_OWNER/GITHUB_REPO when both are
            usable, otherwise from the owner and repo files.

        Raises:
            ConfigNotFoundError: If a required file is missing, or the file
                values are empty or placeholders.
            IoError: If a file exists but cannot be read.
        """
        owner = self._env(OWNER_ENV_VAR)
        repo = self._env(REPO_ENV_VAR)
        if _is_usable(owner, OWNER_PLACEHOLDER) and _is_usable(repo, REPO_PLACEHOLDER):
            logger.debug(
                "GitHub repository resolved from environment",
                extra={"owner": owner, "repo": repo},
            )
            return owner, repo

        if not self.owner_path.exists():
            raise ConfigNotFoundError(
                f"GitHub config not found. Please set {OWNER_ENV_VAR} and "
                f"{REPO_ENV_VAR} environment variables or create {self.owner_path} "
                f"with your GitHub username/organization."
            )
        if not self.repo_path.exists():
            raise ConfigNotFoundError(
                f"GitHub repo not found at {self.repo_path}. Please create this "
                f"file with your repository name."
            )

        owner = self._read(self.owner_path)
        repo = self._read(self.repo_path)
        if not _is_usable(owner, OWNER_PLACEHOLDER) or not _is_usable(repo, REPO_PLACEHOLDER):
            raise ConfigNotFoundError(
                "GitHub owner and repo must be set to actual values, not placeholders"
            )

        logger.debug(
            "GitHub repository resolved from files",
            extra={"owner": owner, "repo": repo},
        )
        return owner, repo

    def resolve(self) -> Credentials:
        """Resolve token then coordinates; fails on the first missing piece."""
        token = self.resolve_token()
        owner, repo = self.resolve_config()
        return Credentials(token=token, owner=owner, repo=repo)


def write_credentials(
    credentials: Credentials,
    credentials_dir: Union[str, Path] = DEFAULT_CREDENTIALS_DIR,
) -> None:
    """Persist credentials as the three files CredentialResolver reads.

    The directory is created if needed and the token file is restricted
    to its owner.

    Raises:
        IoError: If the directory or a file cannot be written.
    """
    directory = Path(credentials_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        token_path = directory / TOKEN_FILE
        token_path.write_text(credentials.token + "\n", encoding="utf-8")
        os.chmod(token_path, TOKEN_FILE_PERMISSIONS)
        (directory / OWNER_FILE).write_text(credentials.owner + "\n", encoding="utf-8")
        (directory / REPO_FILE).write_text(credentials.repo + "\n", encoding="utf-8")
    except OSError as e:
        raise IoError(e) from e

    logger.info(
        "Credentials written",
        extra={
            "credentials_dir": str(directory),
            "owner": credentials.owner,
            "repo": credentials.repo,
            "token": redact_secret(credentials.token),
        },
    )
