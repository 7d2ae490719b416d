"""Run configuration.

Loads from ~/.prcards/config.yaml with environment variable overrides.
Inside GitHub Actions the action inputs arrive as INPUT_<NAME> variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .integrations.github.client import GITHUB_API_URL
from .integrations.trello.client import TRELLO_API_URL

DEFAULT_READY_LIST = "ready to deploy"

_TRUE_VALUES = {"true", "1", "yes", "on"}


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _env(*names: str) -> str | None:
    """Return the first non-empty environment variable among ``names``."""
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


@dataclass
class RunConfig:
    """Credentials and settings for one run."""

    trello_key: str = ""
    trello_token: str = ""
    github_token: str = ""
    add_pr_comment: bool = False  # accepted for compatibility, not acted on
    ready_list_name: str = DEFAULT_READY_LIST
    stop_on_non_link: bool = True
    trello_api_url: str = TRELLO_API_URL
    github_api_url: str = GITHUB_API_URL

    CONFIG_FILE: Path = field(
        default_factory=lambda: Path.home() / ".prcards" / "config.yaml",
        repr=False,
    )

    def missing(self) -> list[str]:
        """Names of required settings that are empty."""
        required = {"trello_key": self.trello_key, "trello_token": self.trello_token}
        return [name for name, value in required.items() if not value]

    def is_configured(self) -> bool:
        return not self.missing()

    @classmethod
    def load(cls, config_path: Path | None = None) -> RunConfig:
        """Load config from file and environment variables.

        Priority (highest wins):
          1. Environment variables (PRCARDS_*, then GitHub Actions INPUT_*)
          2. Config file (~/.prcards/config.yaml or custom path)
          3. Defaults

        Args:
            config_path: Optional path to a YAML config file.

        Returns:
            Populated RunConfig instance.
        """
        config = cls()
        file_path = config_path or config.CONFIG_FILE

        if file_path.exists():
            try:
                with open(file_path) as f:
                    data = yaml.safe_load(f) or {}

                config.trello_key = data.get("trello_key", config.trello_key)
                config.trello_token = data.get("trello_token", config.trello_token)
                config.github_token = data.get("github_token", config.github_token)
                config.add_pr_comment = _as_bool(data.get("add_pr_comment", config.add_pr_comment))
                config.ready_list_name = data.get("ready_list_name", config.ready_list_name)
                config.stop_on_non_link = _as_bool(
                    data.get("stop_on_non_link", config.stop_on_non_link)
                )
                config.trello_api_url = data.get("trello_api_url", config.trello_api_url)
                config.github_api_url = data.get("github_api_url", config.github_api_url)
            except (yaml.YAMLError, OSError, AttributeError):
                pass

        config.trello_key = _env("PRCARDS_TRELLO_KEY", "INPUT_TRELLO-KEY") or config.trello_key
        config.trello_token = (
            _env("PRCARDS_TRELLO_TOKEN", "INPUT_TRELLO-TOKEN") or config.trello_token
        )
        config.github_token = (
            _env("PRCARDS_GITHUB_TOKEN", "INPUT_REPO-TOKEN") or config.github_token
        )
        config.ready_list_name = (
            _env("PRCARDS_READY_LIST", "INPUT_READY-LIST") or config.ready_list_name
        )
        config.trello_api_url = _env("PRCARDS_TRELLO_API_URL") or config.trello_api_url
        config.github_api_url = (
            _env("PRCARDS_GITHUB_API_URL", "GITHUB_API_URL") or config.github_api_url
        )

        if env_comment := _env("PRCARDS_ADD_PR_COMMENT", "INPUT_ADD-PR-COMMENT"):
            config.add_pr_comment = _as_bool(env_comment)
        if env_stop := _env("PRCARDS_STOP_ON_NON_LINK"):
            config.stop_on_non_link = _as_bool(env_stop)

        return config
