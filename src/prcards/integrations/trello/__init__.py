"""Trello integration for card lookup and moves."""

from .client import TRELLO_API_URL, TrelloClient
from .models import BoardList, Card

__all__ = [
    "BoardList",
    "Card",
    "TRELLO_API_URL",
    "TrelloClient",
]
