"""Configuration for the issue upserter.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Variable names follow the ones GitHub Actions exports to workflow steps, so the CLI
runs unchanged inside a workflow.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class UpserterSettings(BaseSettings):
    """Settings for the issue upserter CLI.

    Environment variables:
    - GITHUB_TOKEN
    - GITHUB_REPOSITORY (optional)
    - GITHUB_API_URL    (optional)
    - LOG_LEVEL         (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `UpserterSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    github_repository: str | None = Field(
        default=None,
        validation_alias="GITHUB_REPOSITORY",
        description="Default target repository in the form 'owner/repo'",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_API_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_github_auth(self) -> UpserterSettings:
        if not self.github_token.strip():
            raise ValueError("GITHUB_TOKEN is required")
        return self
