"""Every-visit Monte Carlo control for blackjack.

One episode is one full round. The behaviour policy (epsilon-greedy by
default) picks every action; only once the round is over is the return G
known, and every recorded pair with a decision total (12–20) is moved toward
it with a sample-average step:

    Q(s, a) ← Q(s, a) + (G − Q(s, a)) / (N(s, a) + 1)

Pairs outside 12–20 had their action forced by the policy shortcuts and are
never updated. There is no discounting and no intermediate reward, so G is
simply the terminal reward (+1 / −1 / 0).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable

import numpy as np

from src.engine.deck import Deck
from src.engine.game_state import RoundState

from .policies import Policy, is_decision_total, make_epsilon_greedy_policy
from .qtable import QTable
from .states import BlackjackAction, BlackjackState, EpisodeOutcome, EpisodeResult, StateAction
from .trainer import EpisodeAlgorithm

DeckFactory = Callable[[], Deck]
StateFactory = Callable[[RoundState], object]


def apply_action(round_state: RoundState, action: BlackjackAction, deck: Deck) -> RoundState:
    """Project a learning action onto the round state machine."""
    if action is BlackjackAction.HIT:
        return round_state.hit(deck)
    return round_state.stand(deck)


def play_episode(
    deck: Deck,
    q_table: QTable,
    episode_number: int,
    policy: Policy,
    *,
    initial_count: int = 0,
    state_factory: StateFactory = BlackjackState.from_round,
) -> EpisodeResult:
    """Play one round to completion, recording each (state, action) taken.

    The Q-table is only read (by the policy), never written.

    Args:
        deck:           Card source for the round.
        q_table:        Table the policy consults.
        episode_number: Index passed to the policy's epsilon schedule.
        policy:         Behaviour policy.
        initial_count:  Running count carried into the round.
        state_factory:  Maps a RoundState to the learning state.

    Returns:
        EpisodeResult with pairs ordered most recent first.
    """
    state_actions: deque = deque()
    round_state = RoundState.start(deck, initial_count)

    while not round_state.finished:
        state = state_factory(round_state)
        action = policy(state, q_table, episode_number)
        state_actions.appendleft(StateAction(state, action))
        round_state = apply_action(round_state, action, deck)

    return EpisodeResult.from_round(round_state, state_actions)


def update_from_episode(q_table: QTable, result: EpisodeResult) -> float:
    """Apply the sample-average update for every eligible pair in an episode.

    Returns:
        Mean absolute error (G − old value) over the updated pairs, or 0.0
        if no pair had a decision total.
    """
    g = float(result.reward)
    sum_error = 0.0
    n_updates = 0

    for state_action in result.state_actions:
        if not is_decision_total(state_action.state.player_total):
            continue
        old_value = q_table.get_value(state_action)
        count = q_table.get_count(state_action) + 1
        error = g - old_value
        q_table.update_value(state_action, old_value + error / count)
        sum_error += abs(error)
        n_updates += 1

    return sum_error / n_updates if n_updates else 0.0


def make_monte_carlo(
    policy: Policy | None = None,
    rng: np.random.Generator | None = None,
    deck_factory: DeckFactory | None = None,
) -> EpisodeAlgorithm:
    """Return a Monte Carlo episode algorithm for the trainer.

    Each call plays one episode on a freshly shuffled deck and updates the
    table in place.

    Args:
        policy:       Behaviour policy; defaults to epsilon-greedy with
                      exponential decay, sharing *rng*.
        rng:          Source of randomness for shuffling and exploration.
        deck_factory: Overrides deck creation (e.g. rigged decks in tests).
    """
    rng = rng if rng is not None else np.random.default_rng()
    policy = policy or make_epsilon_greedy_policy(rng=rng)
    deck_factory = deck_factory or (lambda: Deck.shuffled(rng))

    def _run_episode(q_table: QTable, episode_number: int) -> EpisodeOutcome:
        result = play_episode(deck_factory(), q_table, episode_number, policy)
        mean_error = update_from_episode(q_table, result)
        return EpisodeOutcome(result.reward, mean_error)

    return _run_episode
