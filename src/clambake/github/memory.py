"""In-memory GitHubOps implementation for tests.

InMemoryGitHub keeps issues, pull requests and branches in dictionaries
and honours the same contract as GitHubClient: the same retry policy on
assign_issue, the same error taxonomy, and the same best-effort
behaviour for branch and merge operations. Failures are injected per
operation with fail_next().
"""

import asyncio
import logging
from collections import defaultdict, deque
from typing import Deque, Dict, Iterable, List, Optional, Set, Tuple

from clambake.github.errors import ApiError
from clambake.github.models import BranchRef, Issue, IssueState, Label, PullRequest, User
from clambake.github.ops import GitHubOps, resolve_merge_method
from clambake.github.retry import DEFAULT_BASE_DELAY, DEFAULT_MAX_ATTEMPTS, SleepFunc, with_retry
from clambake.github.transport import TransportError


logger = logging.getLogger(__name__)


class InMemoryGitHub(GitHubOps):
    """A repository held in memory.

    Attributes:
        issues: Issues by number.
        pull_requests: Pull requests by number.
        branches: Names of existing remote branches.
        calls: (operation, args) for every operation invoked, in order.
        git_available: When False, branch operations behave as if git
                       were missing.
    """

    def __init__(
        self,
        owner: str = "octocat",
        repo: str = "hello-world",
        default_branch: str = "main",
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self._owner = owner
        self._repo = repo
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep

        self.issues: Dict[int, Issue] = {}
        self.pull_requests: Dict[int, PullRequest] = {}
        self.branches: Set[str] = {default_branch}
        self.calls: List[Tuple[str, tuple]] = []
        self.git_available = True
        self._failures: Dict[str, Deque[TransportError]] = defaultdict(deque)

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def repo(self) -> str:
        return self._repo

    # -------------------------------------------------------------------------
    # Seeding and failure injection
    # -------------------------------------------------------------------------
    def add_issue(
        self,
        title: str,
        body: Optional[str] = None,
        labels: Iterable[str] = (),
        assignees: Iterable[str] = (),
        number: Optional[int] = None,
    ) -> Issue:
        number = number or self._next_number()
        issue = Issue(
            number=number,
            title=title,
            body=body,
            labels=[Label(name=name) for name in labels],
            assignees=[User(login=login) for login in assignees],
            html_url=self._url("issues", number),
        )
        self.issues[number] = issue
        return issue

    def fail_next(
        self,
        operation: str,
        times: int = 1,
        status_code: int = 502,
    ) -> None:
        """Make the next `times` calls of `operation` fail at the transport."""
        for _ in range(times):
            self._failures[operation].append(
                TransportError(
                    message=f"GitHub API error: {status_code}",
                    status_code=status_code,
                    request_url=f"memory://{self._owner}/{self._repo}/{operation}",
                )
            )

    def _next_number(self) -> int:
        return max([0, *self.issues, *self.pull_requests]) + 1

    def _url(self, kind: str, number: int) -> str:
        return f"https://github.com/{self._owner}/{self._repo}/{kind}/{number}"

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, args))

    def _raise_injected(self, operation: str) -> None:
        if self._failures[operation]:
            raise self._failures[operation].popleft()

    def _not_found(self, kind: str, number: int) -> TransportError:
        return TransportError(
            message="GitHub API error: 404 Not Found",
            status_code=404,
            request_url=f"memory://{self._owner}/{self._repo}/{kind}/{number}",
        )

    def _check(self, operation: str) -> None:
        try:
            self._raise_injected(operation)
        except TransportError as e:
            raise ApiError(e) from e

    def _get_issue(self, issue_number: int) -> Issue:
        if issue_number not in self.issues:
            raise ApiError(self._not_found("issues", issue_number))
        return self.issues[issue_number]

    def _get_pr(self, pr_number: int) -> PullRequest:
        if pr_number not in self.pull_requests:
            raise ApiError(self._not_found("pulls", pr_number))
        return self.pull_requests[pr_number]

    # -------------------------------------------------------------------------
    # GitHubOps
    # -------------------------------------------------------------------------
    async def fetch_issues(self) -> List[Issue]:
        self._record("fetch_issues")
        self._check("fetch_issues")
        return [
            issue for _, issue in sorted(self.issues.items())
            if issue.state == IssueState.OPEN
        ]

    async def fetch_issue(self, issue_number: int) -> Issue:
        self._record("fetch_issue", issue_number)
        self._check("fetch_issue")
        return self._get_issue(issue_number)

    async def assign_issue(self, issue_number: int, assignee: str) -> Issue:
        async def attempt() -> Issue:
            self._record("assign_issue", issue_number, assignee)
            self._raise_injected("assign_issue")
            if issue_number not in self.issues:
                raise self._not_found("issues", issue_number)
            updated = self.issues[issue_number].model_copy(
                update={"assignees": [User(login=assignee)]}
            )
            self.issues[issue_number] = updated
            return updated

        return await with_retry(
            attempt,
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            sleep=self._sleep,
            description=f"Assign issue #{issue_number}",
        )

    async def add_label_to_issue(self, issue_number: int, label: str) -> None:
        self._record("add_label_to_issue", issue_number, label)
        self._check("add_label_to_issue")
        issue = self._get_issue(issue_number)
        if not issue.has_label(label):
            self.issues[issue_number] = issue.model_copy(
                update={"labels": [*issue.labels, Label(name=label)]}
            )

    async def create_branch(self, branch_name: str, from_branch: str) -> None:
        self._record("create_branch", branch_name, from_branch)
        try:
            self._raise_injected("create_branch")
        except TransportError as e:
            logger.warning("Branch '%s' was not created: %s", branch_name, e)
            return
        if not self.git_available or from_branch not in self.branches:
            logger.warning(
                "Branch '%s' was not created from '%s'",
                branch_name,
                from_branch,
            )
            return
        self.branches.add(branch_name)

    async def delete_branch(self, branch_name: str) -> None:
        self._record("delete_branch", branch_name)
        try:
            self._raise_injected("delete_branch")
        except TransportError as e:
            logger.warning("Branch '%s' was not deleted: %s", branch_name, e)
            return
        if not self.git_available or branch_name not in self.branches:
            logger.warning("Branch '%s' was not deleted", branch_name)
            return
        self.branches.discard(branch_name)

    async def create_pull_request(
        self,
        title: str,
        head_branch: str,
        base_branch: str,
        body: str,
    ) -> PullRequest:
        self._record("create_pull_request", title, head_branch, base_branch, body)
        self._check("create_pull_request")
        number = self._next_number()
        pr = PullRequest(
            number=number,
            title=title,
            body=body,
            head=BranchRef(ref=head_branch),
            base=BranchRef(ref=base_branch),
            html_url=self._url("pull", number),
        )
        self.pull_requests[number] = pr
        return pr

    async def get_pull_request(self, pr_number: int) -> PullRequest:
        self._record("get_pull_request", pr_number)
        self._check("get_pull_request")
        return self._get_pr(pr_number)

    async def merge_pull_request(
        self,
        pr_number: int,
        merge_method: Optional[str] = None,
    ) -> None:
        self._record("merge_pull_request", pr_number, merge_method)
        resolve_merge_method(merge_method)
        try:
            self._raise_injected("merge_pull_request")
        except TransportError as e:
            logger.warning("PR #%d was not merged: %s", pr_number, e)
            return
        if pr_number not in self.pull_requests:
            logger.warning("PR #%d was not merged: not found", pr_number)
            return
        self.pull_requests[pr_number] = self.pull_requests[pr_number].model_copy(
            update={"merged": True, "state": IssueState.CLOSED}
        )
