"""Capability interface for GitHub operations.

GitHubOps is the contract the clambake workflow programs against. It has
exactly two implementations:

- GitHubClient (client.py): the production client over the GitHub API
- InMemoryGitHub (memory.py): an in-memory double for tests

Every operation is a coroutine and raises a GitHubError subclass on
failure. create_branch, delete_branch and merge_pull_request are
best-effort: when the underlying mechanism is unavailable or fails they
log a warning and return normally so a multi-step workflow is not
blocked by an auxiliary step.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from clambake.github.errors import FeatureNotImplementedError
from clambake.github.models import Issue, PullRequest


MERGE_METHODS = ("merge", "squash", "rebase")
DEFAULT_MERGE_METHOD = "merge"


def resolve_merge_method(merge_method: Optional[str]) -> str:
    """Return the merge method to use, defaulting to a merge commit.

    Raises:
        FeatureNotImplementedError: If the method is not one GitHub supports.
    """
    if merge_method is None:
        return DEFAULT_MERGE_METHOD
    if merge_method not in MERGE_METHODS:
        raise FeatureNotImplementedError(
            f"Merge method '{merge_method}' is not supported "
            f"(expected one of: {', '.join(MERGE_METHODS)})"
        )
    return merge_method


class GitHubOps(ABC):
    """Issue, label, branch and pull request operations on one repository."""

    @property
    @abstractmethod
    def owner(self) -> str:
        """Repository owner (user or organization)."""

    @property
    @abstractmethod
    def repo(self) -> str:
        """Repository name."""

    @abstractmethod
    async def fetch_issues(self) -> List[Issue]:
        """Return the repository's open issues."""

    @abstractmethod
    async def fetch_issue(self, issue_number: int) -> Issue:
        ...

    @abstractmethod
    async def assign_issue(self, issue_number: int, assignee: str) -> Issue:
        """Assign an issue, retrying transient failures.

        Returns:
            The updated issue.
        """

    @abstractmethod
    async def add_label_to_issue(self, issue_number: int, label: str) -> None:
        ...

    @abstractmethod
    async def create_branch(self, branch_name: str, from_branch: str) -> None:
        """Create a remote branch from `from_branch`. Best-effort."""

    @abstractmethod
    async def delete_branch(self, branch_name: str) -> None:
        """Delete a remote branch. Best-effort."""

    @abstractmethod
    async def create_pull_request(
        self,
        title: str,
        head_branch: str,
        base_branch: str,
        body: str,
    ) -> PullRequest:
        ...

    @abstractmethod
    async def get_pull_request(self, pr_number: int) -> PullRequest:
        ...

    @abstractmethod
    async def merge_pull_request(
        self,
        pr_number: int,
        merge_method: Optional[str] = None,
    ) -> None:
        """Merge a pull request. Best-effort once the method is valid."""
