"""Trello REST API client for card lookups and moves.

Authenticates with an API key and token, sent as query parameters on every
request as Trello requires.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...errors import RemoteError, RemoteNotFound
from .models import BoardList, Card

logger = logging.getLogger(__name__)

TRELLO_API_URL = "https://api.trello.com/1"


class TrelloClient:
    """Async client for the Trello REST API.

    All methods raise RemoteNotFound on 404 and RemoteError on any other
    failure.
    """

    def __init__(self, key: str, token: str, base_url: str = TRELLO_API_URL):
        self.key = key
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(30.0),
        )

    async def __aenter__(self) -> TrelloClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # --- Cards ---

    async def get_card(self, card_id: str) -> Card:
        """Fetch a card.

        GET /1/cards/{id}

        Raises:
            RemoteNotFound: If the card does not exist.
        """
        data = await self._request("GET", f"/cards/{card_id}")
        return Card.from_api(data)

    async def move_card(self, card_id: str, list_id: str) -> None:
        """Move a card to another list.

        PUT /1/cards/{id} with {"idList": list_id}. Moving a card to the
        list it is already in is a no-op on Trello's side.
        """
        await self._request("PUT", f"/cards/{card_id}", json={"idList": list_id})

    # --- Lists ---

    async def get_lists(self, board_id: str) -> list[BoardList]:
        """Fetch all lists on a board.

        GET /1/boards/{id}/lists
        """
        data = await self._request("GET", f"/boards/{board_id}/lists")
        return [BoardList.from_api(item) for item in data]

    async def get_list_id_by_name(self, name: str, board_id: str) -> str | None:
        """Find a list on a board by exact, case-sensitive name.

        Lists are fetched fresh on every call.

        Returns:
            The id of the first list named ``name``, or None.
        """
        for board_list in await self.get_lists(board_id):
            if board_list.name == name:
                return board_list.id
        return None

    # --- Lifecycle ---

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # --- Internal ---

    async def _request(
        self,
        method: str,
        url: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an authenticated request to Trello.

        Returns parsed JSON response (dict or list).

        Raises:
            RemoteNotFound: On 404.
            RemoteError: On other HTTP errors or connection failures.
        """
        query = {**(params or {}), "key": self.key, "token": self.token}
        try:
            response = await self._client.request(method, url, json=json, params=query)
            logger.debug("%s %s completed with status %s", method, url, response.status_code)

            if response.status_code >= 400:
                detail = response.text[:200]
                logger.error("%s %s errored with status %s: %s", method, url, response.status_code, detail)
                error_cls = RemoteNotFound if response.status_code == 404 else RemoteError
                raise error_cls(
                    f"Trello {method} {url} returned {response.status_code}: {detail}",
                    status_code=response.status_code,
                    detail=detail,
                )

            if not response.content:
                return {}

            data = response.json()
            logger.debug("Response data: %r", data)
            return data

        except httpx.ConnectError as e:
            logger.error("%s %s errored: %s", method, url, e)
            raise RemoteError(f"Cannot connect to Trello: {e}", detail=str(e)) from e
        except httpx.TimeoutException as e:
            logger.error("%s %s timed out", method, url)
            raise RemoteError(f"Request timed out: {method} {url}", detail=str(e)) from e
        except RemoteError:
            raise
        except Exception as e:
            raise RemoteError(f"Unexpected error: {e}", detail=str(e)) from e
