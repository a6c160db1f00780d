"""GitHub resource models returned by the client.

Issue and PullRequest carry the subset of the REST payload the clambake
workflow reads. Unknown payload fields are ignored, so a raw API response
validates directly with `Issue.from_github_response(data)`.

The models use Pydantic for validation, consistent with config.py.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class IssueState(str, Enum):
    """Issue and pull request states reported by GitHub."""

    OPEN = "open"
    CLOSED = "closed"


class User(BaseModel):
    model_config = ConfigDict(extra="ignore")

    login: str = Field(..., min_length=1)
    id: Optional[int] = None


class Label(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    color: Optional[str] = None


class Issue(BaseModel):
    """A GitHub issue.

    Attributes:
        number: The issue number within the repository.
        title: The issue title.
        body: The issue body; GitHub sends null for empty bodies.
        state: open or closed.
        labels: Labels attached to the issue.
        assignees: Users assigned to the issue.
        html_url: Browser URL of the issue.
    """

    model_config = ConfigDict(extra="ignore")

    number: int = Field(..., gt=0)
    title: str
    body: Optional[str] = None
    state: IssueState = IssueState.OPEN
    labels: List[Label] = Field(default_factory=list)
    assignees: List[User] = Field(default_factory=list)
    html_url: Optional[str] = None

    @classmethod
    def from_github_response(cls, data: Dict[str, Any]) -> "Issue":
        return cls.model_validate(data)

    @property
    def label_names(self) -> List[str]:
        return [label.name for label in self.labels]

    @property
    def assignee_logins(self) -> List[str]:
        return [user.login for user in self.assignees]

    def has_label(self, label_name: str) -> bool:
        """Check if the issue has a specific label (case-sensitive)."""
        return label_name in self.label_names


class BranchRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ref: str = Field(..., min_length=1)
    sha: Optional[str] = None


class PullRequest(BaseModel):
    """A GitHub pull request.

    Attributes:
        number: The pull request number within the repository.
        title: The pull request title.
        body: The pull request description.
        state: open or closed.
        head: Source branch reference.
        base: Target branch reference.
        merged: Whether the pull request has been merged.
        html_url: Browser URL of the pull request.
    """

    model_config = ConfigDict(extra="ignore")

    number: int = Field(..., gt=0)
    title: str
    body: Optional[str] = None
    state: IssueState = IssueState.OPEN
    head: BranchRef
    base: BranchRef
    merged: bool = False
    html_url: Optional[str] = None

    @classmethod
    def from_github_response(cls, data: Dict[str, Any]) -> "PullRequest":
        return cls.model_validate(data)
