"""GitHub API client wrapper for issue upserts.

This wraps PyGithub and a small REST session so that upsert logic never talks to the
transport directly and tests can swap the client for a double.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import requests
from github import Auth, Github, GithubException

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IssueSummary:
    """Minimal issue metadata read from search results and mutation responses."""

    number: int
    title: str


class TrackerError(Exception):
    """Raised when a call to the issue tracker fails (network, auth, not found, ...)."""

    def __init__(self, operation: str, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.operation} failed ({self.status}): {self.message}"
        return f"{self.operation} failed: {self.message}"


class IssueTrackerClient(ABC):
    """Operations the upserter needs from an issue tracker."""

    @abstractmethod
    def search_open_issues(self, repository: str, title_keyword: str) -> list[IssueSummary]:
        """Keyword search over open issue titles in one repository.

        The match is approximate; callers must filter for exact titles themselves.
        """

    @abstractmethod
    def update_issue_body(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> IssueSummary:
        """Replace the body of an existing issue."""

    @abstractmethod
    def create_issue(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        assignees: Sequence[str],
        labels: Sequence[str],
    ) -> IssueSummary:
        """Create a new issue."""


def _status_from_response(response: requests.Response | None) -> int | None:
    if response is None:
        return None
    return response.status_code


class GitHubClient(IssueTrackerClient):
    """PyGithub + REST implementation of :class:`IssueTrackerClient`."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        session: requests.Session | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._rest_base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "issue-upserter",
            }
        )

        if github_api is not None:
            self._github = github_api
            logger.debug("Using injected Github instance")
        else:
            self._github = Github(auth=Auth.Token(token), base_url=self._rest_base_url)

    def _search_url(self) -> str:
        return f"{self._rest_base_url}/search/issues"

    def _issues_url(self, *, owner: str, repo: str, issue_number: int) -> str:
        if issue_number <= 0:
            raise ValueError("issue_number must be a positive integer")
        return f"{self._rest_base_url}/repos/{owner}/{repo}/issues/{issue_number}"

    @staticmethod
    def build_search_query(repository: str, title_keyword: str) -> str:
        return f"is:open is:issue repo:{repository} in:title {title_keyword}"

    def search_open_issues(self, repository: str, title_keyword: str) -> list[IssueSummary]:
        query = self.build_search_query(repository, title_keyword)
        logger.debug("Searching issues", extra={"query": query})

        try:
            resp = self._session.get(self._search_url(), params={"q": query}, timeout=30)
            resp.raise_for_status()
            payload: Any = resp.json()
        except requests.RequestException as exc:
            raise TrackerError(
                "search",
                str(exc),
                status=_status_from_response(getattr(exc, "response", None)),
            ) from exc

        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            return []

        results: list[IssueSummary] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            number = item.get("number")
            if not isinstance(number, int) or number <= 0:
                continue
            title = item.get("title")
            if not isinstance(title, str):
                title = ""
            results.append(IssueSummary(number=number, title=title))
        return results

    def update_issue_body(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> IssueSummary:
        url = self._issues_url(owner=owner, repo=repo, issue_number=issue_number)

        try:
            resp = self._session.patch(url, json={"body": body}, timeout=30)
            resp.raise_for_status()
            data: Any = resp.json()
        except requests.RequestException as exc:
            raise TrackerError(
                "update",
                str(exc),
                status=_status_from_response(getattr(exc, "response", None)),
            ) from exc

        if not isinstance(data, dict):
            return IssueSummary(number=issue_number, title="")
        number = data.get("number")
        title = data.get("title")
        return IssueSummary(
            number=number if isinstance(number, int) else issue_number,
            title=title if isinstance(title, str) else "",
        )

    def create_issue(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        assignees: Sequence[str],
        labels: Sequence[str],
    ) -> IssueSummary:
        if not title.strip():
            raise ValueError("Issue title is required")

        try:
            repository = self._github.get_repo(f"{owner}/{repo}")
            issue = repository.create_issue(
                title=title,
                body=body,
                assignees=list(assignees),
                labels=list(labels),
            )
        except GithubException as exc:
            message = exc.data.get("message") if isinstance(exc.data, dict) else None
            raise TrackerError("create", str(message or exc), status=exc.status) from exc
        except requests.RequestException as exc:
            # PyGithub lets transport errors from its requests session through unwrapped.
            raise TrackerError(
                "create",
                str(exc),
                status=_status_from_response(getattr(exc, "response", None)),
            ) from exc

        return IssueSummary(number=issue.number, title=issue.title)

    def close(self) -> None:
        self._session.close()
        self._github.close()
