"""Tests for src/learning/qtable.py — value store, counts, greedy selection."""

from __future__ import annotations

import pytest

from src.learning.qtable import QTable
from src.learning.states import BlackjackAction, BlackjackState, CountingState, StateAction

HIT = BlackjackAction.HIT
STAND = BlackjackAction.STAND


@pytest.fixture
def state() -> BlackjackState:
    return BlackjackState(16, 10, False)


class TestDefaults:
    def test_unseen_value_is_default(self, state):
        assert QTable().get_value(StateAction(state, HIT)) == 0.0

    def test_custom_default(self, state):
        assert QTable(default_value=0.5).get_value(StateAction(state, HIT)) == 0.5

    def test_unseen_count_zero(self, state):
        assert QTable().get_count(StateAction(state, HIT)) == 0

    def test_empty_len(self):
        assert len(QTable()) == 0


class TestUpdateValue:
    def test_last_write_wins_and_counts(self, state):
        q = QTable()
        sa = StateAction(state, HIT)
        for value in (0.3, -0.7, 0.25, 1.0, -0.1):
            q.update_value(sa, value)
        assert q.get_count(sa) == 5
        assert q.get_value(sa) == -0.1

    def test_same_value_still_counts(self, state):
        q = QTable()
        sa = StateAction(state, STAND)
        q.update_value(sa, 0.0)
        q.update_value(sa, 0.0)
        assert q.get_count(sa) == 2

    def test_pairs_independent(self, state):
        q = QTable()
        q.update_value(StateAction(state, HIT), 0.4)
        assert q.get_value(StateAction(state, STAND)) == 0.0
        assert q.get_count(StateAction(state, STAND)) == 0

    def test_len_and_contains(self, state):
        q = QTable()
        q.update_value(StateAction(state, HIT), 0.4)
        q.update_value(StateAction(state, HIT), 0.2)
        assert len(q) == 1
        assert StateAction(state, HIT) in q
        assert StateAction(state, STAND) not in q


class TestGreedy:
    def test_unseen_state_none(self, state):
        assert QTable().select_greedy_action(state) is None

    def test_picks_highest(self, state):
        q = QTable()
        q.update_value(StateAction(state, HIT), -0.2)
        q.update_value(StateAction(state, STAND), -0.5)
        assert q.select_greedy_action(state) is HIT

    def test_only_recorded_actions_considered(self, state):
        q = QTable()
        q.update_value(StateAction(state, STAND), -0.9)
        assert q.select_greedy_action(state) is STAND

    def test_other_states_ignored(self, state):
        q = QTable()
        q.update_value(StateAction(BlackjackState(20, 10, False), STAND), 0.9)
        q.update_value(StateAction(state, HIT), -0.3)
        assert q.select_greedy_action(state) is HIT

    def test_action_values_copy(self, state):
        q = QTable()
        q.update_value(StateAction(state, HIT), 0.1)
        values = q.action_values(state)
        values[STAND] = 5.0
        assert q.action_values(state) == {HIT: 0.1}


class TestAllEntries:
    def test_sorted_descending(self):
        q = QTable()
        q.update_value(StateAction(BlackjackState(12, 2, False), HIT), -0.1)
        q.update_value(StateAction(BlackjackState(20, 6, False), STAND), 0.7)
        q.update_value(StateAction(BlackjackState(16, 10, False), HIT), -0.5)
        values = [value for _, value in q.all_entries()]
        assert values == [0.7, -0.1, -0.5]

    def test_entries_are_state_actions(self):
        q = QTable()
        sa = StateAction(BlackjackState(12, 2, False), HIT)
        q.update_value(sa, 0.3)
        assert q.all_entries() == [(sa, 0.3)]


class TestGenericKeys:
    def test_counting_states(self):
        q = QTable()
        low = CountingState(16, 10, False, -3)
        high = CountingState(16, 10, False, 3)
        q.update_value(StateAction(low, HIT), 0.2)
        q.update_value(StateAction(high, STAND), 0.2)
        assert q.select_greedy_action(low) is HIT
        assert q.select_greedy_action(high) is STAND

    def test_arbitrary_hashable_keys(self):
        q = QTable()
        q.update_value(StateAction(('grid', 3, 4), 'left'), 1.5)
        q.update_value(StateAction(('grid', 3, 4), 'right'), 2.5)
        assert q.select_greedy_action(('grid', 3, 4)) == 'right'
