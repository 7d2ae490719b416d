"""Pull request context built from a GitHub webhook payload.

Inside GitHub Actions the triggering event is described by two environment
variables: GITHUB_EVENT_NAME (e.g. "pull_request_review") and
GITHUB_EVENT_PATH (a JSON file with the webhook payload).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from .errors import ConfigError


class Account(BaseModel):
    login: str


class Repository(BaseModel):
    name: str
    owner: Account


class PullRequestBase(BaseModel):
    repo: Repository


class PullRequest(BaseModel):
    number: int
    body: str | None = None
    base: PullRequestBase


class PullRequestEvent(BaseModel):
    """The subset of a pull_request / pull_request_review payload we read."""

    action: str = ""
    pull_request: PullRequest | None = None
    repository: Repository | None = None
    organization: Account | None = None


@dataclass(frozen=True)
class PullRequestContext:
    """Everything one run needs to know about the triggering event."""

    event_name: str
    action: str
    body: str = ""
    owner: str = ""
    repo: str = ""
    number: int = 0

    @classmethod
    def from_payload(cls, event_name: str, payload: dict[str, Any]) -> PullRequestContext:
        """Build a context from a webhook payload.

        Events without a pull request (push, issues, ...) produce a context
        with empty pull request fields; the orchestrator ignores them.

        Raises:
            ConfigError: If the payload does not have the expected shape.
        """
        try:
            event = PullRequestEvent.model_validate(payload)
        except ValidationError as e:
            raise ConfigError(f"Malformed {event_name or 'event'} payload: {e}") from e

        owner_account = event.organization or (event.repository.owner if event.repository else None)
        pull = event.pull_request
        if pull is None:
            return cls(
                event_name=event_name,
                action=event.action,
                owner=owner_account.login if owner_account else "",
                repo=event.repository.name if event.repository else "",
            )

        return cls(
            event_name=event_name,
            action=event.action,
            body=pull.body or "",
            owner=owner_account.login if owner_account else pull.base.repo.owner.login,
            repo=pull.base.repo.name,
            number=pull.number,
        )

    @classmethod
    def from_event_file(cls, event_name: str, path: Path) -> PullRequestContext:
        """Build a context from a JSON payload file."""
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read event payload {path}: {e}") from e
        return cls.from_payload(event_name, payload)

    @classmethod
    def from_env(
        cls,
        event_name: str | None = None,
        event_path: Path | None = None,
    ) -> PullRequestContext:
        """Build a context from the GitHub Actions runner environment.

        Explicit arguments take precedence over GITHUB_EVENT_NAME and
        GITHUB_EVENT_PATH.

        Raises:
            ConfigError: If the event name or payload path is unknown.
        """
        event_name = event_name or os.environ.get("GITHUB_EVENT_NAME", "")
        event_path = event_path or os.environ.get("GITHUB_EVENT_PATH", "")
        if not event_name or not event_path:
            raise ConfigError("GITHUB_EVENT_NAME and GITHUB_EVENT_PATH must be set")
        return cls.from_event_file(event_name, Path(event_path))
