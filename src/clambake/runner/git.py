"""Git CLI subprocess management.

Runs git as an async subprocess with timeout enforcement and structured
result capture. Used by the GitHub client for remote branch creation
and deletion, which are best-effort: a missing git binary, a timeout or
a non-zero exit is reported in the GitResult, never raised.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class GitResult:
    """Result of a git invocation.

    Attributes:
        success: True when git exited with code 0.
        exit_code: Process exit code (-1 for timeout/OS errors).
        stdout: Captured standard output.
        stderr: Captured standard error.
        duration_seconds: Wall-clock execution time.
    """

    success: bool
    exit_code: int
    stdout: str
    stderr: str
    duration_seconds: float


class GitRunner:
    """Manages git subprocess execution.

    Attributes:
        git_path: Executable name or path of git.
        timeout_seconds: Maximum execution time before the process is killed.
        cwd: Working directory for git; None uses the current directory.
    """

    def __init__(
        self,
        git_path: str = "git",
        timeout_seconds: int = 120,
        cwd: Optional[Union[str, Path]] = None,
    ):
        self.git_path = git_path
        self.timeout_seconds = timeout_seconds
        self.cwd = cwd

    async def run(self, *args: str) -> GitResult:
        """Execute git with the given arguments.

        Args:
            *args: Arguments passed to git (e.g. "push", "origin", "a:b").

        Returns:
            GitResult with exit code, captured output, and duration.
        """
        start_time = time.monotonic()
        process = None

        try:
            process = await self._start_process(args)
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.timeout_seconds,
            )
            exit_code = process.returncode or 0
        except asyncio.TimeoutError:
            return self._handle_timeout(process, args, start_time)
        except OSError as exc:
            return self._handle_os_error(exc, start_time)
        except asyncio.CancelledError:
            # Do not leave an orphaned git child behind the cancelled task
            if process is not None and process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()
            raise

        duration = time.monotonic() - start_time
        return self._build_result(
            args,
            exit_code,
            self._decode(stdout),
            self._decode(stderr),
            duration,
        )

    async def push(self, remote: str, refspec: str) -> GitResult:
        return await self.run("push", remote, refspec)

    async def create_remote_branch(
        self, remote: str, branch_name: str, from_branch: str
    ) -> GitResult:
        """Create `branch_name` on the remote from local `from_branch`."""
        return await self.push(remote, f"{from_branch}:{branch_name}")

    async def delete_remote_branch(self, remote: str, branch_name: str) -> GitResult:
        return await self.run("push", remote, "--delete", branch_name)

    async def _start_process(self, args: tuple) -> asyncio.subprocess.Process:
        """Launch the git subprocess.

        Raises:
            OSError: If the git executable cannot be found or started.
        """
        logger.info(
            "Starting git %s",
            " ".join(args),
            extra={"git_path": self.git_path, "timeout": self.timeout_seconds},
        )

        return await asyncio.create_subprocess_exec(
            self.git_path,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=self.cwd,
        )

    @staticmethod
    def _decode(data: Optional[bytes]) -> str:
        if not data:
            return ""
        return data.decode("utf-8", errors="replace").rstrip("\n")

    def _handle_timeout(
        self,
        process: Optional[asyncio.subprocess.Process],
        args: tuple,
        start_time: float,
    ) -> GitResult:
        """Kill the process and return a timeout failure result."""
        if process is not None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
        duration = time.monotonic() - start_time
        logger.error(
            "git %s timed out after %ds",
            " ".join(args),
            self.timeout_seconds,
        )
        return GitResult(
            success=False,
            exit_code=-1,
            stdout="",
            stderr=f"Process timed out after {self.timeout_seconds}s",
            duration_seconds=duration,
        )

    def _handle_os_error(self, exc: OSError, start_time: float) -> GitResult:
        """Return a failure result for OS-level errors (e.g., missing binary)."""
        duration = time.monotonic() - start_time
        logger.error("Failed to start git: %s", exc)
        return GitResult(
            success=False,
            exit_code=-1,
            stdout="",
            stderr=f"Failed to start git: {exc}",
            duration_seconds=duration,
        )

    def _build_result(
        self,
        args: tuple,
        exit_code: int,
        stdout: str,
        stderr: str,
        duration: float,
    ) -> GitResult:
        is_success = exit_code == 0

        for line in stderr.splitlines():
            logger.debug("git stderr: %s", line)

        if is_success:
            logger.info("git %s completed in %.1fs", " ".join(args), duration)
        else:
            logger.warning(
                "git %s failed with exit code %d in %.1fs",
                " ".join(args),
                exit_code,
                duration,
            )

        return GitResult(
            success=is_success,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            duration_seconds=duration,
        )
