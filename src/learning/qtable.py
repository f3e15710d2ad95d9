"""
Tabular state-action value store.

Values are held as state → {action: value}, so greedy selection for a state
only looks at that state's own actions. Visit counts are kept per
(state, action) pair and are advanced exclusively by update_value(): a value
write and its count increment always happen together, so every pair with a
value has a count and vice versa.
"""

from __future__ import annotations

from typing import Generic

from .states import A, S, StateAction


class QTable(Generic[S, A]):
    """Incrementally averaged action values with visit counts."""

    def __init__(self, default_value: float = 0.0) -> None:
        self.default_value = default_value
        self._values: dict[S, dict[A, float]] = {}
        self._counts: dict[StateAction[S, A], int] = {}

    def get_value(self, state_action: StateAction[S, A]) -> float:
        """Return the stored value, or the default for an unseen pair."""
        actions = self._values.get(state_action.state)
        if actions is None:
            return self.default_value
        return actions.get(state_action.action, self.default_value)

    def get_count(self, state_action: StateAction[S, A]) -> int:
        """Return how many times update_value() has been called for the pair."""
        return self._counts.get(state_action, 0)

    def update_value(self, state_action: StateAction[S, A], new_value: float) -> None:
        """Store *new_value* for the pair and record one more visit."""
        self._values.setdefault(state_action.state, {})[state_action.action] = new_value
        self._counts[state_action] = self._counts.get(state_action, 0) + 1

    def select_greedy_action(self, state: S) -> A | None:
        """Return the highest-valued recorded action for *state*.

        Ties go to whichever tied action the state's table yields first.
        Returns None if no action has been recorded for the state.
        """
        actions = self._values.get(state)
        if not actions:
            return None
        return max(actions, key=actions.__getitem__)

    def action_values(self, state: S) -> dict[A, float]:
        """Return a copy of the recorded {action: value} map for *state*."""
        return dict(self._values.get(state, {}))

    def all_entries(self) -> list[tuple[StateAction[S, A], float]]:
        """Return every (state_action, value) pair, highest value first."""
        entries = [
            (StateAction(state, action), value)
            for state, actions in self._values.items()
            for action, value in actions.items()
        ]
        entries.sort(key=lambda entry: entry[1], reverse=True)
        return entries

    def __len__(self) -> int:
        """Number of (state, action) pairs with a recorded value."""
        return len(self._counts)

    def __contains__(self, state_action: object) -> bool:
        return state_action in self._counts
