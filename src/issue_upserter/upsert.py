"""Create-or-update of a GitHub issue keyed by its exact title.

The tracker's search is keyword based, so the upsert runs in two steps: search open
issues for the title, then pick the first candidate whose title is exactly equal.

A match only gets its body refreshed; labels and assignees are applied on creation
and never touched afterwards, so manual triage on an existing issue survives.

Concurrent upserts for a title that does not exist yet can both miss the search and
both create an issue. There is no locking or idempotency key; callers that need
stronger guarantees must serialise their invocations.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from issue_upserter.github.client import IssueSummary, IssueTrackerClient, TrackerError

logger = logging.getLogger(__name__)


def _clean(values: Iterable[str] | None) -> tuple[str, ...]:
    if values is None:
        return ()
    return tuple(v.strip() for v in values if v and v.strip())


@dataclass(frozen=True, slots=True)
class RepositoryRef:
    """Target repository, e.g. ``RepositoryRef("octo-org", "octo-repo")``."""

    owner: str
    repo: str

    def __post_init__(self) -> None:
        if not self.owner.strip() or not self.repo.strip():
            raise ValueError("Repository owner and name are required")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def parse(cls, value: str) -> RepositoryRef:
        """Parse an ``owner/repo`` string."""

        normalized = value.strip().rstrip("/")
        owner, sep, repo = normalized.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"Invalid repository {value!r}; expected 'owner/repo'")
        return cls(owner=owner, repo=repo)


@dataclass(frozen=True, slots=True)
class UpsertRequest:
    title: str
    body: str = ""
    assignees: tuple[str, ...] = field(default_factory=tuple)
    labels: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise ValueError("Issue title is required")
        # Frozen dataclass: normalise sequences through object.__setattr__.
        object.__setattr__(self, "assignees", _clean(self.assignees))
        object.__setattr__(self, "labels", _clean(self.labels))


class UpsertAction(str, Enum):
    UPDATED = "updated"
    CREATED = "created"


@dataclass(frozen=True, slots=True)
class UpsertOutcome:
    action: UpsertAction
    issue_number: int


@dataclass(frozen=True, slots=True)
class UpsertError:
    """A tracker failure captured as a value rather than raised."""

    operation: str
    message: str
    status: int | None = None

    @classmethod
    def from_tracker_error(cls, exc: TrackerError) -> UpsertError:
        return cls(operation=exc.operation, message=exc.message, status=exc.status)


@dataclass(frozen=True, slots=True)
class UpsertResult:
    """Either an :class:`UpsertOutcome` or an :class:`UpsertError`."""

    outcome: UpsertOutcome | None = None
    error: UpsertError | None = None

    def __post_init__(self) -> None:
        if (self.outcome is None) == (self.error is None):
            raise ValueError("UpsertResult needs exactly one of outcome or error")

    @property
    def ok(self) -> bool:
        return self.outcome is not None


def find_exact_title_match(candidates: Iterable[IssueSummary], title: str) -> IssueSummary | None:
    """Return the first candidate whose title equals ``title`` exactly."""

    for candidate in candidates:
        if candidate.title == title:
            return candidate
    return None


class IssueUpserter:
    """Update-if-exists-else-create for issues keyed by exact title."""

    def __init__(self, tracker: IssueTrackerClient) -> None:
        self._tracker = tracker

    def upsert(self, repository: RepositoryRef, request: UpsertRequest) -> UpsertResult:
        """Ensure an open issue titled ``request.title`` exists with ``request.body``.

        Tracker failures are logged and returned in the result; they are never raised.
        """

        try:
            outcome = self._upsert(repository, request)
        except TrackerError as exc:
            logger.error(
                "Failed to update or create issue",
                exc_info=True,
                extra={
                    "repo": repository.full_name,
                    "title": request.title,
                    "operation": exc.operation,
                    "status": exc.status,
                },
            )
            return UpsertResult(error=UpsertError.from_tracker_error(exc))
        return UpsertResult(outcome=outcome)

    def _upsert(self, repository: RepositoryRef, request: UpsertRequest) -> UpsertOutcome:
        logger.info(
            "Finding existing issue with matching title",
            extra={"repo": repository.full_name, "title": request.title},
        )
        candidates = self._tracker.search_open_issues(repository.full_name, request.title)
        existing = find_exact_title_match(candidates, request.title)

        if existing is not None:
            updated = self._tracker.update_issue_body(
                repository.owner, repository.repo, existing.number, request.body
            )
            logger.info(
                "Updated issue",
                extra={"repo": repository.full_name, "issue_number": updated.number},
            )
            return UpsertOutcome(action=UpsertAction.UPDATED, issue_number=updated.number)

        created = self._tracker.create_issue(
            repository.owner,
            repository.repo,
            request.title,
            request.body,
            request.assignees,
            request.labels,
        )
        logger.info(
            "Created issue",
            extra={"repo": repository.full_name, "issue_number": created.number},
        )
        return UpsertOutcome(action=UpsertAction.CREATED, issue_number=created.number)


def upsert_issue(
    tracker: IssueTrackerClient, repository: RepositoryRef, request: UpsertRequest
) -> UpsertResult:
    return IssueUpserter(tracker).upsert(repository, request)


def create_or_update_issue(
    *,
    tracker: IssueTrackerClient,
    context: RepositoryRef | str,
    title: str,
    body: str,
    assignees: Sequence[str] | None = None,
    labels: Sequence[str] | None = None,
) -> None:
    """Automation entry point; the outcome is only visible in the logs."""

    repository = context if isinstance(context, RepositoryRef) else RepositoryRef.parse(context)
    request = UpsertRequest(
        title=title,
        body=body,
        assignees=tuple(assignees or ()),
        labels=tuple(labels or ()),
    )
    upsert_issue(tracker, repository, request)
