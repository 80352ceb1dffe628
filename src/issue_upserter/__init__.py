"""Issue upserter.

Keeps one open GitHub issue per title: refreshes its body when it exists and creates
it (with assignees and labels) when it does not.
"""

__version__ = "0.1.0"

from issue_upserter.upsert import (
    IssueUpserter,
    RepositoryRef,
    UpsertAction,
    UpsertOutcome,
    UpsertRequest,
    UpsertResult,
    create_or_update_issue,
    upsert_issue,
)

__all__ = [
    "__version__",
    "IssueUpserter",
    "RepositoryRef",
    "UpsertAction",
    "UpsertOutcome",
    "UpsertRequest",
    "UpsertResult",
    "create_or_update_issue",
    "upsert_issue",
]
