"""prcards: move Trello cards when a reviewed pull request is ready to merge.

A pull request description that starts with Trello card links:

    https://trello.com/c/abc123
    https://trello.com/c/def456

    Fixes the login redirect.

gets its cards moved to the "ready" list once a review is submitted and
GitHub reports the pull request as mergeable.

Usage:
    # GitHub Actions / CLI
    $ prcards run

    # Python API
    from prcards import Orchestrator, RunConfig
"""

try:
    from importlib.metadata import version as _get_version

    __version__ = _get_version("prcards")
except Exception:
    __version__ = "0.0.0-dev"


def __getattr__(name: str):
    """Lazy import for main classes."""
    if name == "Orchestrator":
        from .orchestrator import Orchestrator

        return Orchestrator
    if name == "RunConfig":
        from .config import RunConfig

        return RunConfig
    if name == "PullRequestContext":
        from .event import PullRequestContext

        return PullRequestContext
    if name == "extract_card_ids":
        from .links import extract_card_ids

        return extract_card_ids
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "Orchestrator",
    "PullRequestContext",
    "RunConfig",
    "extract_card_ids",
]
