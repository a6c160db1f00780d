"""Thin async transport over the GitHub REST API.

This module wraps an httpx.AsyncClient and exposes exactly the calls the
client facade depends on:
- list open issues, get an issue
- replace issue assignees, add labels
- create, get and merge pull requests

Every failure, whether an HTTP error status or a connection-level httpx
error, is raised as TransportError. The transport never retries; retry is
a policy decision made by the caller (see retry.py).
"""

import logging
from typing import Any, Dict, List, Optional

import httpx


logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when a GitHub API request fails.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code from the response, if one was received.
        response_body: Response body from GitHub API.
        request_url: The URL that was requested.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        request_url: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        self.request_url = request_url
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.request_url:
            parts.append(f"({self.request_url})")
        if self.response_body:
            parts.append(f"- {self.response_body[:500]}")
        return " ".join(parts)


class GitHubTransport:
    """Async GitHub REST transport bound to a single token.

    Attributes:
        token: GitHub personal access token.
        base_url: Base URL for GitHub API (default: https://api.github.com).
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the transport.

        Args:
            token: GitHub API token for authentication.
            base_url: Base URL for GitHub API. Use this to support
                      GitHub Enterprise Server endpoints.
            timeout: Request timeout in seconds.
            http_transport: Optional httpx transport, used by tests to
                            install an httpx.MockTransport.
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_transport = http_transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating it if necessary."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._default_headers(),
                timeout=self.timeout,
                transport=self._http_transport,
            )
        return self._client

    def _default_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "clambake/0.1",
        }

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json_data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH).
            path: API path (e.g., /repos/owner/repo/issues/1).
            json_data: Optional JSON body for the request.
            params: Optional query parameters.

        Returns:
            The HTTP response from GitHub.

        Raises:
            TransportError: On any error status or request failure.
        """
        logger.debug(
            "GitHub API request",
            extra={"method": method, "path": path},
        )
        try:
            response = await self.client.request(
                method=method,
                url=path,
                json=json_data,
                params=params,
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                message=f"GitHub API request timed out: {e}",
                request_url=f"{self.base_url}{path}",
            ) from e
        except httpx.RequestError as e:
            raise TransportError(
                message=f"GitHub API request failed: {e}",
                request_url=f"{self.base_url}{path}",
            ) from e

        if response.status_code >= 400:
            error_body = response.text
            logger.debug(
                "GitHub API error",
                extra={
                    "status_code": response.status_code,
                    "path": path,
                    "method": method,
                    "response_body": error_body[:500],
                },
            )
            raise TransportError(
                message=f"GitHub API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                response_body=error_body,
                request_url=str(response.url),
            )

        return response

    def _json(self, response: httpx.Response) -> Any:
        """Decode a JSON response body.

        Raises:
            TransportError: If the body is not JSON (e.g. a proxy login page).
        """
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                message=f"GitHub API returned a non-JSON response: {response.status_code}",
                status_code=response.status_code,
                response_body=response.text[:500],
                request_url=str(response.url),
            ) from e

    def _repo_path(self, owner: str, repo: str) -> str:
        return f"/repos/{owner}/{repo}"

    async def list_open_issues(self, owner: str, repo: str) -> List[Dict[str, Any]]:
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/issues",
            params={"state": "open"},
        )
        return self._json(response)

    async def get_issue(self, owner: str, repo: str, issue_number: int) -> Dict[str, Any]:
        response = await self._request(
            "GET", f"{self._repo_path(owner, repo)}/issues/{issue_number}"
        )
        return self._json(response)

    async def update_issue_assignees(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        assignees: List[str],
    ) -> Dict[str, Any]:
        """Replace the assignees of an issue.

        Returns:
            The updated issue data from GitHub API.
        """
        response = await self._request(
            "PATCH",
            f"{self._repo_path(owner, repo)}/issues/{issue_number}",
            json_data={"assignees": assignees},
        )
        return self._json(response)

    async def add_labels(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        labels: List[str],
    ) -> List[Dict[str, Any]]:
        """Add labels to an issue.

        Returns:
            List of all labels on the issue after adding.
        """
        response = await self._request(
            "POST",
            f"{self._repo_path(owner, repo)}/issues/{issue_number}/labels",
            json_data={"labels": labels},
        )
        return self._json(response)

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str,
    ) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            f"{self._repo_path(owner, repo)}/pulls",
            json_data={
                "title": title,
                "head": head,
                "base": base,
                "body": body,
            },
        )
        return self._json(response)

    async def get_pull_request(self, owner: str, repo: str, pr_number: int) -> Dict[str, Any]:
        response = await self._request(
            "GET", f"{self._repo_path(owner, repo)}/pulls/{pr_number}"
        )
        return self._json(response)

    async def merge_pull_request(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        merge_method: str,
    ) -> Dict[str, Any]:
        response = await self._request(
            "PUT",
            f"{self._repo_path(owner, repo)}/pulls/{pr_number}/merge",
            json_data={"merge_method": merge_method},
        )
        return self._json(response)
