"""Unit tests for the error taxonomy and report rendering."""

import logging

import pytest

from clambake.github.errors import (
    REPORTS,
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
from clambake.github.transport import TransportError


def _transport_error() -> TransportError:
    return TransportError(
        message="GitHub API error: 502 Bad Gateway",
        status_code=502,
        response_body='{"message": "Server Error"}',
        request_url="https://api.github.com/repos/octocat/hello-world/issues/1",
    )


def _all_errors():
    return [
        TokenNotFoundError("GitHub token not found"),
        ConfigNotFoundError("GitHub config not found"),
        ApiError(_transport_error()),
        IoError(PermissionError(13, "Permission denied", "github_token")),
        FeatureNotImplementedError("Merge method 'octopus' is not supported"),
    ]


class TestTaxonomy:

    def test_every_kind_has_a_report(self):
        assert set(REPORTS) == set(ErrorKind)

    def test_one_subclass_per_kind(self):
        kinds = [type(error).kind for error in _all_errors()]
        assert sorted(kinds) == sorted(ErrorKind)

    def test_subclass_without_kind_is_rejected(self):
        with pytest.raises(TypeError):
            class UntaggedError(GitHubError):
                pass

    def test_all_are_exceptions(self):
        for error in _all_errors():
            assert isinstance(error, GitHubError)
            assert isinstance(error, Exception)


class TestRendering:

    @pytest.mark.parametrize("error", _all_errors(), ids=lambda e: e.kind.value)
    def test_report_has_symptom_and_remediation(self, error):
        report = REPORTS[error.kind]
        lines = str(error).splitlines()

        assert lines[0] == report.title
        assert set(lines[1]) == {"─"}
        assert len(lines[1]) == len(report.title)
        assert lines[2] == f"{report.glyph} {error.message}"
        assert lines[4] == f"🔧 {report.heading}:"
        assert any(line.startswith("   → ") for line in lines[5:])

    def test_str_matches_render(self):
        for error in _all_errors():
            assert str(error) == render_error(error)

    def test_token_report_mentions_login_and_env(self):
        text = str(TokenNotFoundError("missing"))
        assert "gh auth login" in text
        assert "CLAMBAKE_GITHUB_TOKEN" in text
        assert "https://github.com/settings/tokens" in text

    def test_config_report_mentions_env_and_init(self):
        text = str(ConfigNotFoundError("missing"))
        assert "GITHUB_OWNER" in text
        assert "clambake init" in text

    def test_api_report_mentions_rate_limit(self):
        assert "gh api rate_limit" in str(ApiError(_transport_error()))

    def test_io_report_mentions_permissions(self):
        text = str(IoError(OSError("boom")))
        assert "permissions" in text

    def test_not_implemented_report_mentions_workaround(self):
        assert "workaround" in str(FeatureNotImplementedError("later"))


class TestWrappedErrors:

    def test_api_error_keeps_transport_error_verbatim(self):
        transport_error = _transport_error()
        error = ApiError(transport_error)

        assert error.transport_error is transport_error
        assert error.__cause__ is transport_error
        assert error.status_code == 502
        assert str(transport_error) in str(error)
        assert "Server Error" in str(error)

    def test_io_error_keeps_os_error_verbatim(self):
        os_error = PermissionError(13, "Permission denied", "github_token")
        error = IoError(os_error)

        assert error.os_error is os_error
        assert error.__cause__ is os_error
        assert str(os_error) in str(error)


class TestLogError:

    def test_logs_full_report(self, caplog):
        logger = logging.getLogger("clambake.test")
        error = ConfigNotFoundError("GitHub config not found")

        with caplog.at_level(logging.ERROR, logger="clambake.test"):
            log_error(logger, error)

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.getMessage() == render_error(error)
        assert record.error_kind == "config_not_found"
