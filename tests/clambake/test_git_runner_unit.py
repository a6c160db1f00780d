"""Unit tests for the git runner.

Tests argument construction, exit code handling, timeout enforcement
and missing-binary recovery.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from clambake.runner.git import GitResult, GitRunner


def run_async(coro):
    return asyncio.run(coro)


@pytest.fixture
def runner():
    return GitRunner(git_path="git", timeout_seconds=5)


def _make_mock_process(returncode: int = 0, stdout: bytes = b"", stderr: bytes = b""):
    process = AsyncMock()
    process.returncode = returncode
    process.kill = MagicMock()
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    return process


class TestArguments:

    def test_create_remote_branch_pushes_refspec(self, runner):
        process = _make_mock_process()
        with patch("asyncio.create_subprocess_exec", return_value=process) as create:
            run_async(runner.create_remote_branch("origin", "agent001/1", "main"))

        args = create.call_args.args
        assert args == ("git", "push", "origin", "main:agent001/1")

    def test_delete_remote_branch(self, runner):
        process = _make_mock_process()
        with patch("asyncio.create_subprocess_exec", return_value=process) as create:
            run_async(runner.delete_remote_branch("origin", "agent001/1"))

        args = create.call_args.args
        assert args == ("git", "push", "origin", "--delete", "agent001/1")


class TestResults:

    def test_zero_exit_code_is_success(self, runner):
        process = _make_mock_process(returncode=0, stderr=b"To github.com:o/r.git\n")
        with patch("asyncio.create_subprocess_exec", return_value=process):
            result = run_async(runner.push("origin", "main:feature"))

        assert isinstance(result, GitResult)
        assert result.success is True
        assert result.exit_code == 0
        assert result.stderr == "To github.com:o/r.git"
        assert result.duration_seconds >= 0

    def test_nonzero_exit_code_is_failure(self, runner):
        process = _make_mock_process(
            returncode=128, stderr=b"error: src refspec main does not match any\n"
        )
        with patch("asyncio.create_subprocess_exec", return_value=process):
            result = run_async(runner.push("origin", "main:feature"))

        assert result.success is False
        assert result.exit_code == 128
        assert "does not match" in result.stderr

    def test_missing_binary_is_failure_not_exception(self):
        runner = GitRunner(git_path="/nonexistent/bin/git-missing")

        result = run_async(runner.push("origin", "main:feature"))

        assert result.success is False
        assert result.exit_code == -1
        assert "Failed to start git" in result.stderr

    def test_timeout_kills_process(self, runner):
        process = _make_mock_process()
        process.communicate = AsyncMock(side_effect=asyncio.TimeoutError)

        with patch("asyncio.create_subprocess_exec", return_value=process):
            result = run_async(runner.push("origin", "main:feature"))

        assert result.success is False
        assert result.exit_code == -1
        assert "timed out" in result.stderr
        process.kill.assert_called_once()

    def test_cancellation_kills_process_and_propagates(self, runner):
        process = _make_mock_process()
        process.returncode = None

        async def hang():
            await asyncio.Event().wait()

        process.communicate = AsyncMock(side_effect=hang)

        async def scenario():
            task = asyncio.create_task(runner.push("origin", "main:feature"))
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        with patch("asyncio.create_subprocess_exec", return_value=process):
            run_async(scenario())

        process.kill.assert_called_once()
        process.wait.assert_awaited_once()

    def test_cancellation_after_exit_does_not_kill(self, runner):
        process = _make_mock_process()
        process.communicate = AsyncMock(side_effect=asyncio.CancelledError)

        async def scenario():
            with pytest.raises(asyncio.CancelledError):
                await runner.push("origin", "main:feature")

        with patch("asyncio.create_subprocess_exec", return_value=process):
            run_async(scenario())

        process.kill.assert_not_called()
