"""Tests for the merge state decision."""

from __future__ import annotations

import pytest

from prcards.evaluator import READY_STATES, Decision, decide
from prcards.integrations.github.models import MergeState


class TestDecide:
    @pytest.mark.parametrize("state", [MergeState.CLEAN, MergeState.UNSTABLE])
    def test_ready_states_move(self, state):
        assert decide(state) == Decision.MOVE

    @pytest.mark.parametrize(
        "state",
        [s for s in MergeState if s not in READY_STATES],
    )
    def test_other_states_skip(self, state):
        assert decide(state) == Decision.SKIP

    def test_raw_strings_are_parsed(self):
        assert decide("clean") == Decision.MOVE
        assert decide("blocked") == Decision.SKIP

    def test_unrecognised_value_skips(self):
        assert decide("mergeable-ish") == Decision.SKIP
        assert decide("") == Decision.SKIP
        assert decide(None) == Decision.SKIP


class TestMergeState:
    def test_from_string_matches_exactly(self):
        assert MergeState.from_string("clean") == MergeState.CLEAN
        assert MergeState.from_string("CLEAN") == MergeState.UNKNOWN

    def test_differently_cased_ready_states_skip(self):
        assert decide("CLEAN") == Decision.SKIP
        assert decide("Unstable") == Decision.SKIP

    def test_unknown_values(self):
        assert MergeState.from_string("something-new") == MergeState.UNKNOWN
        assert MergeState.from_string(None) == MergeState.UNKNOWN
