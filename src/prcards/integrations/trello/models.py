"""Data models for the Trello integration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Card:
    """A Trello card, as returned by GET /1/cards/{id}."""

    id: str
    board_id: str
    list_id: str = ""
    name: str = ""
    url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Card:
        return cls(
            id=data["id"],
            board_id=data["idBoard"],
            list_id=data.get("idList", ""),
            name=data.get("name", ""),
            url=data.get("shortUrl", data.get("url", "")),
        )


@dataclass
class BoardList:
    """A list (column) on a Trello board."""

    id: str
    name: str
    closed: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> BoardList:
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            closed=bool(data.get("closed", False)),
        )
