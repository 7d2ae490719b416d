"""Exceptions raised by prcards."""

from __future__ import annotations


class PRCardsError(Exception):
    """Base class for prcards errors."""


class ConfigError(PRCardsError):
    """Raised when required configuration or the event payload is missing."""


class RemoteError(PRCardsError):
    """Raised when a Trello or GitHub API request fails."""

    def __init__(self, message: str, status_code: int = 0, detail: str = ""):
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class RemoteNotFound(RemoteError):
    """Raised when a remote lookup finds nothing (404, or no list with a given name)."""
