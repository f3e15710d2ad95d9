"""
Exploration policies and epsilon schedules.

Every policy shares the same blackjack shortcuts before consulting anything:
    player_total < 12   → HIT    (no card can bust the hand)
    player_total == 21  → STAND  (no card can improve the hand)
Only totals 12–20 are genuine decisions.

Policies are callables built by factories, matching the signature

    policy(state, q_table, episode_number) -> BlackjackAction

so episode generators can swap them freely. Each factory takes the numpy
Generator it draws from; epsilon-greedy also takes a schedule mapping the
episode number to an exploration rate.
"""

from __future__ import annotations

import math
from collections.abc import Callable

import numpy as np

from .qtable import QTable
from .states import ACTIONS, BlackjackAction

# Decision range: below it HIT is forced, above it STAND is forced.
MIN_DECISION_TOTAL: int = 12
MAX_DECISION_TOTAL: int = 20

Policy = Callable[[object, QTable, int], BlackjackAction]
EpsilonSchedule = Callable[[int], float]


# ─── Epsilon schedules ────────────────────────────────────────────────────────

def constant_epsilon(epsilon: float = 0.1) -> EpsilonSchedule:
    """Explore with the same probability every episode."""
    if not 0.0 <= epsilon <= 1.0:
        raise ValueError(f"epsilon must be in [0, 1], got {epsilon}")

    def _schedule(episode: int) -> float:
        return epsilon

    return _schedule


def inverse_decay() -> EpsilonSchedule:
    """epsilon = 1 / (episode + 1); the first episode (0) always explores."""

    def _schedule(episode: int) -> float:
        return 1.0 / (episode + 1)

    return _schedule


def exponential_decay(scale: float = 10_000.0) -> EpsilonSchedule:
    """epsilon = exp(-episode / scale)."""
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")

    def _schedule(episode: int) -> float:
        return math.exp(-episode / scale)

    return _schedule


def staged_decay(switch_at: int = 1_000_000, epsilon: float = 0.1) -> EpsilonSchedule:
    """Constant *epsilon* before *switch_at*, inverse decay from then on."""
    before = constant_epsilon(epsilon)
    after = inverse_decay()

    def _schedule(episode: int) -> float:
        return before(episode) if episode < switch_at else after(episode)

    return _schedule


# Schedule factories by name, each called as factory(epsilon, scale, switch_at).
SCHEDULES: dict[str, Callable[[float, float, int], EpsilonSchedule]] = {
    'constant': lambda epsilon, scale, switch_at: constant_epsilon(epsilon),
    'inverse': lambda epsilon, scale, switch_at: inverse_decay(),
    'exponential': lambda epsilon, scale, switch_at: exponential_decay(scale),
    'staged': lambda epsilon, scale, switch_at: staged_decay(switch_at, epsilon),
}


# ─── Action helpers ───────────────────────────────────────────────────────────

def forced_action(player_total: int) -> BlackjackAction | None:
    """Return the action forced by the player's total, or None in 12–20.

    Examples:
        >>> forced_action(11)
        <BlackjackAction.HIT: 'hit'>
        >>> forced_action(21)
        <BlackjackAction.STAND: 'stand'>
        >>> forced_action(16) is None
        True
    """
    if player_total < MIN_DECISION_TOTAL:
        return BlackjackAction.HIT
    if player_total > MAX_DECISION_TOTAL:
        return BlackjackAction.STAND
    return None


def is_decision_total(player_total: int) -> bool:
    """True for totals where the action is learned rather than forced."""
    return MIN_DECISION_TOTAL <= player_total <= MAX_DECISION_TOTAL


def random_action(rng: np.random.Generator) -> BlackjackAction:
    """Pick HIT or STAND uniformly."""
    return ACTIONS[int(rng.integers(len(ACTIONS)))]


def _greedy_or_random(state, q_table: QTable, rng: np.random.Generator) -> BlackjackAction:
    action = q_table.select_greedy_action(state)
    return action if action is not None else random_action(rng)


# ─── Policy factories ─────────────────────────────────────────────────────────

def make_epsilon_greedy_policy(
    schedule: EpsilonSchedule | None = None,
    rng: np.random.Generator | None = None,
) -> Policy:
    """Return an epsilon-greedy policy.

    With probability schedule(episode_number) a uniformly random action is
    taken; otherwise the Q-table's greedy action, falling back to random for
    states never visited.

    Args:
        schedule: Epsilon schedule; defaults to exponential_decay().
        rng:      Source of randomness; defaults to a fresh Generator.
    """
    schedule = schedule or exponential_decay()
    rng = rng if rng is not None else np.random.default_rng()

    def _policy(state, q_table: QTable, episode_number: int) -> BlackjackAction:
        forced = forced_action(state.player_total)
        if forced is not None:
            return forced
        if rng.random() < schedule(episode_number):
            return random_action(rng)
        return _greedy_or_random(state, q_table, rng)

    return _policy


def make_greedy_policy(rng: np.random.Generator | None = None) -> Policy:
    """Return a policy that always follows the Q-table's greedy action.

    Used as the target policy of Q-learning and for evaluating a learned
    table. Unvisited states fall back to a random action.
    """
    rng = rng if rng is not None else np.random.default_rng()

    def _policy(state, q_table: QTable, episode_number: int) -> BlackjackAction:
        forced = forced_action(state.player_total)
        if forced is not None:
            return forced
        return _greedy_or_random(state, q_table, rng)

    return _policy


def make_random_policy(rng: np.random.Generator | None = None) -> Policy:
    """Return a policy that ignores the Q-table and picks uniformly."""
    rng = rng if rng is not None else np.random.default_rng()

    def _policy(state, q_table: QTable, episode_number: int) -> BlackjackAction:
        forced = forced_action(state.player_total)
        if forced is not None:
            return forced
        return random_action(rng)

    return _policy


def make_threshold_policy(stand_threshold: int = 17) -> Policy:
    """Return a fixed baseline: stand on stand_threshold or more, hit otherwise.

    Ignores the Q-table. Useful to check that a learned table beats naive play.
    """

    def _policy(state, q_table: QTable, episode_number: int) -> BlackjackAction:
        if state.player_total >= stand_threshold:
            return BlackjackAction.STAND
        return BlackjackAction.HIT

    return _policy
