"""GitHub issue tracker integration."""

from issue_upserter.github.client import (
    GitHubClient,
    IssueSummary,
    IssueTrackerClient,
    TrackerError,
)

__all__ = ["GitHubClient", "IssueSummary", "IssueTrackerClient", "TrackerError"]
