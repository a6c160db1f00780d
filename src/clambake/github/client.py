"""Production GitHub client.

GitHubClient implements GitHubOps over the GitHub REST API:
- Credentials are resolved once at construction and never change; a
  missing or placeholder token/owner/repo aborts construction
- Issue assignment is retried with linear backoff (retry.py)
- Reads, labelling and pull request creation fail immediately as ApiError
- Branch creation/deletion go through git and, like merging, are
  best-effort: failures are logged and the call still returns

The client exclusively owns its transport; use it as an async context
manager or call close() when done.
"""

import asyncio
import logging
from typing import Any, Awaitable, List, Optional, TypeVar

from pydantic import ValidationError

from clambake.config import ClientSettings, get_settings
from clambake.github.credentials import CredentialResolver, Credentials
from clambake.github.errors import ApiError
from clambake.github.models import Issue, PullRequest
from clambake.github.ops import GitHubOps, resolve_merge_method
from clambake.github.retry import SleepFunc, with_retry
from clambake.github.transport import GitHubTransport, TransportError
from clambake.runner.git import GitRunner


logger = logging.getLogger(__name__)

T = TypeVar("T")


class GitHubClient(GitHubOps):
    """GitHub client bound to one repository.

    Example:
        >>> async with GitHubClient() as client:
        ...     issues = await client.fetch_issues()
        ...     await client.assign_issue(issues[0].number, "octocat")

    Raises (on construction):
        TokenNotFoundError: If no usable token can be resolved.
        ConfigNotFoundError: If no usable owner/repo can be resolved.
        IoError: If a credential file exists but cannot be read.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        credentials: Optional[Credentials] = None,
        resolver: Optional[CredentialResolver] = None,
        transport: Optional[GitHubTransport] = None,
        git: Optional[GitRunner] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize the client.

        Args:
            settings: Client settings; read from the environment if omitted.
            credentials: Pre-resolved credentials; resolved if omitted.
            resolver: Resolver used when credentials are omitted. Defaults
                      to the process environment and settings.credentials_dir.
            transport: GitHub API transport; built from the token if omitted.
            git: Runner used for branch operations.
            sleep: Coroutine used between retry attempts.
        """
        self._settings = settings or get_settings()

        if credentials is None:
            resolver = resolver or CredentialResolver(
                credentials_dir=self._settings.credentials_dir
            )
            credentials = resolver.resolve()
        self._credentials = credentials

        self._transport = transport or GitHubTransport(
            token=credentials.token,
            base_url=self._settings.api_base_url,
            timeout=self._settings.request_timeout,
        )
        self._git = git or GitRunner(
            git_path=self._settings.git_path,
            timeout_seconds=self._settings.git_timeout_seconds,
        )
        self._sleep = sleep

        logger.info(
            "GitHub client ready",
            extra={
                "owner": credentials.owner,
                "repo": credentials.repo,
                "api_base_url": self._settings.api_base_url,
            },
        )

    @property
    def owner(self) -> str:
        return self._credentials.owner

    @property
    def repo(self) -> str:
        return self._credentials.repo

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    async def close(self) -> None:
        """Close the transport and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _call(self, request: Awaitable[T]) -> T:
        """Await a transport call, surfacing failures as ApiError."""
        try:
            return await request
        except TransportError as e:
            raise ApiError(e) from e

    def _parse(self, model: Any, data: Any) -> Any:
        try:
            return model.from_github_response(data)
        except ValidationError as e:
            raise ApiError(
                TransportError(f"Unexpected GitHub API response for {model.__name__}: {e}")
            ) from e

    async def fetch_issues(self) -> List[Issue]:
        data = await self._call(self._transport.list_open_issues(self.owner, self.repo))
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise ApiError(
                TransportError(
                    f"Unexpected GitHub API response for issue list: {str(data)[:200]}"
                )
            )
        # The issues endpoint also lists pull requests
        return [
            self._parse(Issue, item) for item in data if "pull_request" not in item
        ]

    async def fetch_issue(self, issue_number: int) -> Issue:
        data = await self._call(
            self._transport.get_issue(self.owner, self.repo, issue_number)
        )
        return self._parse(Issue, data)

    async def assign_issue(self, issue_number: int, assignee: str) -> Issue:
        """Replace the issue's assignees with `assignee`.

        Transport failures are retried up to settings.retry_max_attempts
        times with delays of retry_base_delay * attempt.

        Raises:
            ApiError: If every attempt failed.
        """
        data = await with_retry(
            lambda: self._transport.update_issue_assignees(
                self.owner, self.repo, issue_number, [assignee]
            ),
            max_attempts=self._settings.retry_max_attempts,
            base_delay=self._settings.retry_base_delay,
            sleep=self._sleep,
            description=f"Assign issue #{issue_number}",
        )
        issue = self._parse(Issue, data)

        logger.info(
            "Issue assigned",
            extra={
                "owner": self.owner,
                "repo": self.repo,
                "issue_number": issue_number,
                "assignee": assignee,
            },
        )
        return issue

    async def add_label_to_issue(self, issue_number: int, label: str) -> None:
        await self._call(
            self._transport.add_labels(self.owner, self.repo, issue_number, [label])
        )
        logger.info(
            "Label added to issue",
            extra={
                "owner": self.owner,
                "repo": self.repo,
                "issue_number": issue_number,
                "label": label,
            },
        )

    async def create_branch(self, branch_name: str, from_branch: str) -> None:
        logger.info(
            "Creating branch '%s' from '%s'",
            branch_name,
            from_branch,
        )
        result = await self._git.create_remote_branch(
            self._settings.git_remote, branch_name, from_branch
        )
        if result.success:
            logger.info("Branch '%s' created", branch_name)
            return

        logger.warning(
            "Branch '%s' was not created; it may already exist or need manual creation",
            branch_name,
            extra={"exit_code": result.exit_code, "stderr": result.stderr[:500]},
        )

    async def delete_branch(self, branch_name: str) -> None:
        result = await self._git.delete_remote_branch(
            self._settings.git_remote, branch_name
        )
        if result.success:
            logger.info("Branch '%s' deleted", branch_name)
            return

        logger.warning(
            "Branch '%s' was not deleted; it may need manual removal",
            branch_name,
            extra={"exit_code": result.exit_code, "stderr": result.stderr[:500]},
        )

    async def create_pull_request(
        self,
        title: str,
        head_branch: str,
        base_branch: str,
        body: str,
    ) -> PullRequest:
        data = await self._call(
            self._transport.create_pull_request(
                self.owner, self.repo, title, head_branch, base_branch, body
            )
        )
        pr = self._parse(PullRequest, data)

        logger.info(
            "Created PR #%d: %s (%s)",
            pr.number,
            title,
            pr.html_url,
            extra={
                "owner": self.owner,
                "repo": self.repo,
                "pr_number": pr.number,
                "head": head_branch,
                "base": base_branch,
            },
        )
        return pr

    async def get_pull_request(self, pr_number: int) -> PullRequest:
        data = await self._call(
            self._transport.get_pull_request(self.owner, self.repo, pr_number)
        )
        return self._parse(PullRequest, data)

    async def merge_pull_request(
        self,
        pr_number: int,
        merge_method: Optional[str] = None,
    ) -> None:
        """Merge a pull request.

        Raises:
            FeatureNotImplementedError: If merge_method is not merge,
                squash or rebase.
        """
        method = resolve_merge_method(merge_method)
        try:
            await self._transport.merge_pull_request(
                self.owner, self.repo, pr_number, method
            )
        except TransportError as e:
            logger.warning(
                "PR #%d was not merged; it may need manual merging: %s",
                pr_number,
                e,
                extra={"pr_number": pr_number, "status_code": e.status_code},
            )
            return

        logger.info(
            "Merged PR #%d",
            pr_number,
            extra={"pr_number": pr_number, "merge_method": method},
        )
