"""GitHub integration for pull request mergeability."""

from .client import GITHUB_API_URL, GitHubClient
from .models import MergeState

__all__ = [
    "GITHUB_API_URL",
    "GitHubClient",
    "MergeState",
]
