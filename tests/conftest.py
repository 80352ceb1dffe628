"""Test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

from issue_upserter.github.client import IssueSummary, IssueTrackerClient
from issue_upserter.upsert import RepositoryRef


@pytest.fixture
def repository() -> RepositoryRef:
    """Provide the target repository used across tests."""
    return RepositoryRef(owner="octo-org", repo="octo-repo")


@pytest.fixture
def tracker() -> Mock:
    """Provide a tracker double with no open issues and successful mutations."""
    mock = Mock(spec=IssueTrackerClient)
    mock.search_open_issues.return_value = []
    mock.update_issue_body.side_effect = lambda owner, repo, number, body: IssueSummary(
        number=number, title=""
    )
    mock.create_issue.return_value = IssueSummary(number=101, title="created")
    return mock


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate settings from the host environment and any local `.env`."""
    for name in ("GITHUB_TOKEN", "GITHUB_REPOSITORY", "GITHUB_API_URL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
