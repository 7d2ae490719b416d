"""Card link extraction from pull request descriptions.

Card links are expected in a block at the top of the description, one link
per line, optionally separated by blank lines:

    https://trello.com/c/abc123

    https://trello.com/c/def456
    Fixes the login redirect.

The first line of prose ends the block.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# Browsers submit textareas with \r\n line breaks on every platform
BROWSER_EOL = "\r\n"

# A link must be alone on its line; surrounding whitespace is allowed.
# Blank lines match too, without a captured id. Whitespace includes
# non-breaking spaces pasted from rich text; ids are ASCII word characters.
LINK_LINE_RE = re.compile(r"[\s\ufeff]*(?:https://trello\.com/c/([A-Za-z0-9_]+))?[\s\ufeff]*")


def match_link_line(line: str) -> tuple[bool, str | None]:
    """Classify a single description line.

    Returns:
        (is_link_line, card_id). Blank lines are link lines with no id.
    """
    match = LINK_LINE_RE.fullmatch(line)
    if match is None:
        return False, None
    return True, match.group(1)


def extract_card_ids(body: str | None, stop_on_non_link: bool = True) -> list[str]:
    """Extract Trello card ids from a pull request description.

    Args:
        body: Description text. ``None`` (no description) yields no ids.
        stop_on_non_link: Stop at the first line that is neither blank nor a
            card link. When False, such lines are skipped and the whole
            description is scanned.

    Returns:
        Card ids in the order they appear. Duplicates are kept.
    """
    if not body:
        return []

    logger.debug("Scanning description: %r", body)

    card_ids: list[str] = []
    for line in body.split(BROWSER_EOL):
        is_link, card_id = match_link_line(line)
        if is_link:
            if card_id:
                logger.debug("Found card id %s", card_id)
                card_ids.append(card_id)
        elif stop_on_non_link:
            logger.debug("Non-link line reached, stopping search")
            break

    return card_ids
