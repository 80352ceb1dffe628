"""CLI entrypoint for the issue upserter."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from issue_upserter import __version__
from issue_upserter.config import UpserterSettings
from issue_upserter.github.client import GitHubClient
from issue_upserter.logging import configure_logging
from issue_upserter.upsert import IssueUpserter, RepositoryRef, UpsertRequest

logger = logging.getLogger(__name__)


def _parse_csv(value: str | None) -> list[str]:
    if value is None:
        return []
    return [p.strip() for p in value.split(",") if p.strip()]


def _read_body(args: argparse.Namespace) -> str:
    if args.body_file is None:
        return args.body
    if args.body_file == "-":
        return sys.stdin.read()
    return Path(args.body_file).read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issue-upserter",
        description="Create a GitHub issue, or refresh the body of the open issue with the same title",
    )
    parser.add_argument("--version", action="version", version=f"issue-upserter {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    upsert = subparsers.add_parser("upsert", help="Create or update an issue by exact title")
    upsert.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        default=None,
        help="Target repository in the form 'owner/repo' (defaults to GITHUB_REPOSITORY)",
    )
    upsert.add_argument("--title", required=True, help="Issue title (exact-match key)")
    body = upsert.add_mutually_exclusive_group()
    body.add_argument("--body", default="", help="Issue body")
    body.add_argument(
        "--body-file",
        default=None,
        help="Read the issue body from a file ('-' for stdin)",
    )
    upsert.add_argument(
        "--assignees",
        default=None,
        help="Comma-separated assignees, applied only when the issue is created",
    )
    upsert.add_argument(
        "--labels",
        default=None,
        help="Comma-separated labels, applied only when the issue is created",
    )
    upsert.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when the tracker call fails (default: log and exit 0)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = UpserterSettings()
    except ValidationError as e:
        # Logging isn't configured yet.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        repository = RepositoryRef.parse(args.repository or settings.github_repository or "")
        request = UpsertRequest(
            title=args.title,
            body=_read_body(args),
            assignees=tuple(_parse_csv(args.assignees)),
            labels=tuple(_parse_csv(args.labels)),
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    github = GitHubClient(token=settings.github_token, base_url=settings.github_base_url)
    try:
        result = IssueUpserter(github).upsert(repository, request)
    finally:
        github.close()

    if result.outcome is not None:
        print(f"{result.outcome.action.value.capitalize()} issue #{result.outcome.issue_number}")
        return 0

    if args.strict:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
