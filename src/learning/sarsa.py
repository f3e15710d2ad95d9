"""SARSA and SARSA-max (Q-learning) TD(0) control for blackjack.

Both algorithms update after every step instead of waiting for the end of
the round. For a step (s, a) → s' with decision total in 12–20:

    target = r + Q(s', a')          (r = 0 unless s' is terminal)
    Q(s, a) ← Q(s, a) + (target − Q(s, a)) / (N(s, a) + 1)

They differ only in a':
    SARSA       a' is the action the epsilon-greedy behaviour policy will
                actually take next (on-policy).
    Q-LEARNING  a' is the greedy action in s', whatever the behaviour policy
                then does (off-policy).

A terminal s' contributes Q(s', a') = 0, so the terminal reward enters the
table only through r. Forced-action steps (total < 12 or == 21) are played
and still chain into the next (s', a'), but are never updated.
"""

from __future__ import annotations

from collections import deque
from enum import Enum, auto

import numpy as np

from src.engine.deck import Deck
from src.engine.game_state import RoundState

from .monte_carlo import DeckFactory, StateFactory, apply_action
from .policies import Policy, is_decision_total, make_epsilon_greedy_policy, make_greedy_policy
from .qtable import QTable
from .states import BlackjackState, EpisodeOutcome, EpisodeResult, StateAction
from .trainer import EpisodeAlgorithm


class TdMode(Enum):
    SARSA = auto()
    Q_LEARNING = auto()  # a.k.a. SARSA-max


def run_td_episode(
    deck: Deck,
    q_table: QTable,
    episode_number: int,
    mode: TdMode,
    behaviour_policy: Policy,
    target_policy: Policy | None = None,
    *,
    state_factory: StateFactory = BlackjackState.from_round,
) -> tuple[EpisodeResult, float]:
    """Play one round, applying a TD(0) update after each eligible step.

    Args:
        deck:             Card source for the round.
        q_table:          Table read and updated in place.
        episode_number:   Index passed to the policies.
        mode:             SARSA or Q_LEARNING bootstrap target.
        behaviour_policy: Policy that chooses every action taken.
        target_policy:    Policy giving a' in Q_LEARNING mode; required there.
        state_factory:    Maps a RoundState to the learning state.

    Returns:
        (EpisodeResult, mean absolute TD error over the updated steps).
    """
    if mode is TdMode.Q_LEARNING and target_policy is None:
        raise ValueError("Q-learning needs a target_policy.")

    state_actions: deque = deque()
    round_state = RoundState.start(deck)
    state = state_factory(round_state)
    action = behaviour_policy(state, q_table, episode_number)
    sum_error = 0.0
    n_updates = 0

    while not round_state.finished:
        state_action = StateAction(state, action)
        state_actions.appendleft(state_action)
        next_round = apply_action(round_state, action, deck)

        if not next_round.finished:
            next_state = state_factory(next_round)
            next_action = behaviour_policy(next_state, q_table, episode_number)

        if is_decision_total(state.player_total):
            if next_round.finished:
                q_next = 0.0
            elif mode is TdMode.SARSA:
                q_next = q_table.get_value(StateAction(next_state, next_action))
            else:
                best = target_policy(next_state, q_table, episode_number)
                q_next = q_table.get_value(StateAction(next_state, best))

            q_value = q_table.get_value(state_action)
            step_size = 1.0 / (q_table.get_count(state_action) + 1)
            error = next_round.reward + q_next - q_value
            q_table.update_value(state_action, q_value + step_size * error)
            sum_error += abs(error)
            n_updates += 1

        if not next_round.finished:
            state, action = next_state, next_action
        round_state = next_round

    mean_error = sum_error / n_updates if n_updates else 0.0
    return EpisodeResult.from_round(round_state, state_actions), mean_error


def _make_td(
    mode: TdMode,
    policy: Policy | None,
    rng: np.random.Generator | None,
    deck_factory: DeckFactory | None,
) -> EpisodeAlgorithm:
    rng = rng if rng is not None else np.random.default_rng()
    behaviour = policy or make_epsilon_greedy_policy(rng=rng)
    target = make_greedy_policy(rng) if mode is TdMode.Q_LEARNING else None
    deck_factory = deck_factory or (lambda: Deck.shuffled(rng))

    def _run_episode(q_table: QTable, episode_number: int) -> EpisodeOutcome:
        result, mean_error = run_td_episode(
            deck_factory(), q_table, episode_number, mode, behaviour, target
        )
        return EpisodeOutcome(result.reward, mean_error)

    return _run_episode


def make_sarsa(
    policy: Policy | None = None,
    rng: np.random.Generator | None = None,
    deck_factory: DeckFactory | None = None,
) -> EpisodeAlgorithm:
    """Return an on-policy SARSA episode algorithm for the trainer."""
    return _make_td(TdMode.SARSA, policy, rng, deck_factory)


def make_q_learning(
    policy: Policy | None = None,
    rng: np.random.Generator | None = None,
    deck_factory: DeckFactory | None = None,
) -> EpisodeAlgorithm:
    """Return an off-policy SARSA-max (Q-learning) episode algorithm."""
    return _make_td(TdMode.Q_LEARNING, policy, rng, deck_factory)
