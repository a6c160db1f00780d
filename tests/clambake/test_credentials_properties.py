"""Property-based tests for credential resolution.

Testing Configuration:
- Library: Hypothesis (Python)
- Properties: placeholder rejection, environment precedence, file
  fallback, write/read round trip
"""

import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings, strategies as st

from clambake.github.credentials import (
    OWNER_ENV_VAR,
    OWNER_PLACEHOLDER,
    REPO_ENV_VAR,
    REPO_PLACEHOLDER,
    TOKEN_ENV_VAR,
    TOKEN_PLACEHOLDER,
    CredentialResolver,
    Credentials,
    write_credentials,
)
from clambake.github.errors import ConfigNotFoundError, TokenNotFoundError

PLACEHOLDERS = {TOKEN_PLACEHOLDER, OWNER_PLACEHOLDER, REPO_PLACEHOLDER}


@st.composite
def valid_token(draw):
    return "ghp_" + draw(st.text(
        alphabet=st.sampled_from(
            "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"),
        min_size=8, max_size=40))


@st.composite
def valid_name(draw):
    return draw(st.text(
        alphabet=st.sampled_from(
            "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_."),
        min_size=1, max_size=39,
    ).filter(lambda x: x not in PLACEHOLDERS))


@st.composite
def whitespace(draw):
    return draw(st.text(alphabet=st.sampled_from(" \t\n"), max_size=3))


def _write_files(directory: Path, token: str, owner: str, repo: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "github_token").write_text(token)
    (directory / "github_owner").write_text(owner)
    (directory / "github_repo").write_text(repo)


@given(valid_token(), valid_name(), valid_name())
@settings(max_examples=50)
def test_placeholders_rejected_from_files(token, owner, repo):
    """A placeholder in any file yields the matching NotFound error."""
    with tempfile.TemporaryDirectory() as tmp:
        directory = Path(tmp)

        _write_files(directory, TOKEN_PLACEHOLDER, owner, repo)
        with pytest.raises(TokenNotFoundError):
            CredentialResolver({}, directory).resolve_token()

        _write_files(directory, token, OWNER_PLACEHOLDER, repo)
        with pytest.raises(ConfigNotFoundError):
            CredentialResolver({}, directory).resolve_config()

        _write_files(directory, token, owner, REPO_PLACEHOLDER)
        with pytest.raises(ConfigNotFoundError):
            CredentialResolver({}, directory).resolve_config()


@given(valid_name(), valid_name())
@settings(max_examples=50)
def test_placeholders_rejected_from_environment_without_files(owner, repo):
    """Placeholder env values are never accepted, even when well-formed."""
    with tempfile.TemporaryDirectory() as tmp:
        resolver = CredentialResolver(
            {
                TOKEN_ENV_VAR: TOKEN_PLACEHOLDER,
                OWNER_ENV_VAR: OWNER_PLACEHOLDER,
                REPO_ENV_VAR: repo,
            },
            Path(tmp),
        )
        with pytest.raises(TokenNotFoundError):
            resolver.resolve_token()
        with pytest.raises(ConfigNotFoundError):
            resolver.resolve_config()

        resolver.environ = {OWNER_ENV_VAR: owner, REPO_ENV_VAR: REPO_PLACEHOLDER}
        with pytest.raises(ConfigNotFoundError):
            resolver.resolve_config()


@given(
    valid_token(), valid_name(), valid_name(),
    valid_token(), valid_name(), valid_name(),
)
@settings(max_examples=50)
def test_environment_takes_precedence_over_files(
    env_token, env_owner, env_repo, file_token, file_owner, file_repo
):
    with tempfile.TemporaryDirectory() as tmp:
        directory = Path(tmp)
        _write_files(directory, file_token, file_owner, file_repo)
        resolver = CredentialResolver(
            {
                TOKEN_ENV_VAR: env_token,
                OWNER_ENV_VAR: env_owner,
                REPO_ENV_VAR: env_repo,
            },
            directory,
        )

        assert resolver.resolve() == Credentials(env_token, env_owner, env_repo)


@given(valid_token(), valid_name(), valid_name(), whitespace(), whitespace())
@settings(max_examples=50)
def test_files_used_when_environment_absent(token, owner, repo, lead, trail):
    with tempfile.TemporaryDirectory() as tmp:
        directory = Path(tmp)
        _write_files(
            directory,
            lead + token + trail,
            lead + owner + trail,
            lead + repo + trail,
        )

        assert CredentialResolver({}, directory).resolve() == Credentials(token, owner, repo)


@given(valid_token(), valid_name(), valid_name())
@settings(max_examples=50)
def test_write_then_resolve_round_trip(token, owner, repo):
    with tempfile.TemporaryDirectory() as tmp:
        directory = Path(tmp) / ".clambake" / "credentials"
        written = Credentials(token, owner, repo)

        write_credentials(written, directory)

        assert CredentialResolver({}, directory).resolve() == written
