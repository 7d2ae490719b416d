"""GitHub REST API client for pull request state."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...errors import RemoteError, RemoteNotFound
from .models import MergeState

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GitHubClient:
    """Async client for the GitHub REST API (v3).

    Uses a repository token for authentication.
    """

    def __init__(self, token: str = "", base_url: str = GITHUB_API_URL):
        headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(30.0),
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        """Fetch a single pull request.

        GET /repos/{owner}/{repo}/pulls/{number}
        """
        return await self._request("GET", f"/repos/{owner}/{repo}/pulls/{number}")

    async def fetch_merge_state(self, owner: str, repo: str, number: int) -> MergeState:
        """Read the live mergeable_state of a pull request.

        Always hits the API; GitHub computes this field lazily and it changes
        as checks and reviews complete.
        """
        pull = await self.get_pull_request(owner, repo, number)
        raw_state = pull.get("mergeable_state")
        state = MergeState.from_string(raw_state)
        logger.debug("%s/%s#%s mergeable_state=%r", owner, repo, number, raw_state)
        return state

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request to GitHub.

        Raises:
            RemoteNotFound: On 404.
            RemoteError: On other HTTP errors or connection failures.
        """
        try:
            response = await self._client.request(method, url, json=json, params=params)
            logger.debug("%s %s completed with status %s", method, url, response.status_code)

            if response.status_code >= 400:
                detail = ""
                try:
                    body = response.json()
                    detail = body.get("message", str(body))
                except Exception:
                    detail = response.text[:200]

                logger.error("%s %s errored with status %s: %s", method, url, response.status_code, detail)
                error_cls = RemoteNotFound if response.status_code == 404 else RemoteError
                raise error_cls(
                    f"GitHub {method} {url} returned {response.status_code}: {detail}",
                    status_code=response.status_code,
                    detail=detail,
                )

            if not response.content:
                return {}

            return response.json()

        except httpx.ConnectError as e:
            logger.error("%s %s errored: %s", method, url, e)
            raise RemoteError(f"Cannot connect to GitHub: {e}", detail=str(e)) from e
        except httpx.TimeoutException as e:
            logger.error("%s %s timed out", method, url)
            raise RemoteError(f"Request timed out: {method} {url}", detail=str(e)) from e
        except RemoteError:
            raise
        except Exception as e:
            raise RemoteError(f"Unexpected error: {e}", detail=str(e)) from e
