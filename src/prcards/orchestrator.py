"""Move linked Trello cards once a reviewed pull request is ready to merge.

One run goes through:
  1. Filter: only a submitted pull request review is handled.
  2. Extract: card ids are read from the top of the description.
  3. Per card, in order: fetch the card, find the ready list on its board,
     fetch the pull request's live merge state, then move or skip.

Moves are started as tasks so the next card's lookups can proceed, and every
move is awaited before the run reports its outcome.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from .config import RunConfig
from .errors import RemoteNotFound
from .evaluator import Decision, decide
from .event import PullRequestContext
from .integrations.github.models import MergeState
from .integrations.trello.models import Card
from .links import extract_card_ids

logger = logging.getLogger(__name__)

SUPPORTED_EVENT = "pull_request_review"
SUPPORTED_ACTIONS = frozenset({"submitted"})


class BoardGateway(Protocol):
    async def get_card(self, card_id: str) -> Card: ...

    async def get_list_id_by_name(self, name: str, board_id: str) -> str | None: ...

    async def move_card(self, card_id: str, list_id: str) -> None: ...


class ReviewStateGateway(Protocol):
    async def fetch_merge_state(self, owner: str, repo: str, number: int) -> MergeState: ...


class RunState(str, Enum):
    START = "start"
    FILTERED = "filtered"
    EXTRACTED = "extracted"
    DONE = "done"
    FAILED = "failed"


class CardStatus(str, Enum):
    MOVED = "moved"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class CardOutcome:
    """What happened to one card reference."""

    card_id: str
    status: CardStatus
    merge_state: MergeState | None = None
    list_id: str | None = None
    error: BaseException | None = None


@dataclass
class RunResult:
    """Terminal outcome of one run."""

    state: RunState
    outcomes: list[CardOutcome] = field(default_factory=list)
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.state == RunState.DONE

    @property
    def moved(self) -> list[str]:
        return [o.card_id for o in self.outcomes if o.status == CardStatus.MOVED]

    @property
    def skipped(self) -> list[str]:
        return [o.card_id for o in self.outcomes if o.status == CardStatus.SKIPPED]


def is_supported_event(context: PullRequestContext) -> bool:
    return context.event_name == SUPPORTED_EVENT and context.action in SUPPORTED_ACTIONS


class Orchestrator:
    """Runs the filter -> extract -> per-card move pipeline for one event."""

    def __init__(
        self,
        config: RunConfig,
        trello: BoardGateway,
        github: ReviewStateGateway,
    ):
        self.config = config
        self.trello = trello
        self.github = github
        self.state = RunState.START

    async def run(self, context: PullRequestContext) -> RunResult:
        """Process one event. Never raises for remote failures; see RunResult."""
        self.state = RunState.START

        if not is_supported_event(context):
            logger.info(
                "Event %s.%s not supported, skipping",
                context.event_name,
                context.action,
            )
            return self._finish(RunState.DONE)
        self._transition(RunState.FILTERED)

        card_ids = extract_card_ids(context.body, stop_on_non_link=self.config.stop_on_non_link)
        if not card_ids:
            logger.info("No card links in pull request description, nothing to do")
            return self._finish(RunState.DONE)
        self._transition(RunState.EXTRACTED)
        logger.info("Found %d card reference(s): %s", len(card_ids), ", ".join(card_ids))

        outcomes: list[CardOutcome] = []
        moves: list[tuple[CardOutcome, asyncio.Task[None]]] = []
        failure: BaseException | None = None

        for card_id in card_ids:
            try:
                outcome = await self._process_card(context, card_id)
            except Exception as e:
                logger.error("Processing card %s failed: %s", card_id, e)
                outcomes.append(CardOutcome(card_id, CardStatus.ERROR, error=e))
                failure = e
                break

            outcomes.append(outcome)
            if outcome.status == CardStatus.MOVED:
                task = asyncio.create_task(
                    self.trello.move_card(card_id, outcome.list_id),
                    name=f"move-{card_id}",
                )
                moves.append((outcome, task))

        move_failure = await self._join_moves(moves)
        failure = failure or move_failure
        if failure is not None:
            return self._finish(RunState.FAILED, outcomes, failure)
        return self._finish(RunState.DONE, outcomes)

    async def _process_card(self, context: PullRequestContext, card_id: str) -> CardOutcome:
        """Look up one card and decide whether it moves. The move itself is left to run()."""
        card = await self.trello.get_card(card_id)
        list_name = self.config.ready_list_name
        list_id = await self.trello.get_list_id_by_name(list_name, card.board_id)
        if list_id is None:
            raise RemoteNotFound(f"No list named {list_name!r} on board {card.board_id}")

        merge_state = await self.github.fetch_merge_state(context.owner, context.repo, context.number)
        if decide(merge_state) == Decision.MOVE:
            logger.info("Moving card %s to %r (merge state %s)", card_id, list_name, merge_state.value)
            return CardOutcome(card_id, CardStatus.MOVED, merge_state=merge_state, list_id=list_id)

        logger.info("Not moving card %s, merge state is %s", card_id, merge_state.value)
        return CardOutcome(card_id, CardStatus.SKIPPED, merge_state=merge_state, list_id=list_id)

    async def _join_moves(
        self, moves: list[tuple[CardOutcome, asyncio.Task[None]]]
    ) -> BaseException | None:
        """Wait for every started move; mark failed ones. Returns the first failure."""
        if not moves:
            return None

        results = await asyncio.gather(*(task for _, task in moves), return_exceptions=True)
        first_error: BaseException | None = None
        for (outcome, _), result in zip(moves, results):
            if isinstance(result, BaseException):
                logger.error("Moving card %s failed: %s", outcome.card_id, result)
                outcome.status = CardStatus.ERROR
                outcome.error = result
                first_error = first_error or result
            else:
                logger.info("Moved card %s", outcome.card_id)
        return first_error

    def _transition(self, state: RunState) -> None:
        logger.debug("Run state %s -> %s", self.state.value, state.value)
        self.state = state

    def _finish(
        self,
        state: RunState,
        outcomes: list[CardOutcome] | None = None,
        error: BaseException | None = None,
    ) -> RunResult:
        self._transition(state)
        return RunResult(state=state, outcomes=outcomes or [], error=error)
