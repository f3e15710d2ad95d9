"""
Monte Carlo evaluator for learned blackjack strategies.

Plays many rounds with a fixed policy (no learning, the table is only read)
and summarises per-round rewards into mean reward, standard deviation, a 95%
confidence interval, and win/loss/draw counts.

Primary use: check that a trained table plays better than a naive baseline
such as make_threshold_policy(17), and track how close it gets to basic
strategy (≈ -0.05 units/hand under these rules, with no doubling or splits).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from src.engine.deck import Deck
from src.learning.monte_carlo import play_episode
from src.learning.policies import Policy, make_greedy_policy, make_threshold_policy
from src.learning.qtable import QTable

# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass
class SimulationResult:
    """Aggregate statistics from an evaluation run.

    Attributes:
        n_hands:     Number of rounds played.
        mean_reward: Mean reward per round (positive = player ahead).
        std_reward:  Sample standard deviation of per-round rewards.
        ci_95_low:   Lower bound of the 95% confidence interval for mean_reward.
        ci_95_high:  Upper bound of the 95% confidence interval for mean_reward.
        n_wins:      Rounds won.
        n_losses:    Rounds lost.
        n_draws:     Rounds drawn.
        rewards:     Raw per-round rewards, or None unless requested.
    """

    n_hands: int
    mean_reward: float
    std_reward: float
    ci_95_low: float
    ci_95_high: float
    n_wins: int
    n_losses: int
    n_draws: int
    rewards: np.ndarray | None = None

    @property
    def win_rate(self) -> float:
        return self.n_wins / self.n_hands if self.n_hands else 0.0

    def __str__(self) -> str:
        sign = "+" if self.mean_reward >= 0 else ""
        return (
            f"Hands: {self.n_hands:,} | "
            f"Mean reward: {sign}{self.mean_reward:.4f} | "
            f"95% CI: [{self.ci_95_low:.4f}, {self.ci_95_high:.4f}] | "
            f"W/L/D: {self.n_wins}/{self.n_losses}/{self.n_draws}"
        )


# ─── Core simulation loop ─────────────────────────────────────────────────────


def simulate_policy(
    policy: Policy,
    q_table: QTable | None = None,
    n_hands: int = 100_000,
    rng: np.random.Generator | None = None,
    return_rewards: bool = False,
) -> SimulationResult:
    """Play n_hands rounds with *policy* and return aggregate statistics.

    Each round is dealt from a freshly shuffled deck.

    Args:
        policy:         Policy to evaluate.
        q_table:        Table the policy reads; an empty one if omitted.
        n_hands:        Number of rounds (must be >= 2 for a sample std).
        rng:            Source of randomness for shuffling.
        return_rewards: Attach the raw per-round reward array to the result.

    Returns:
        SimulationResult for the run.
    """
    if n_hands < 2:
        raise ValueError(f"n_hands must be >= 2, got {n_hands}")
    rng = rng if rng is not None else np.random.default_rng()
    q_table = q_table if q_table is not None else QTable()

    rewards = np.empty(n_hands, dtype=np.float64)
    for i in range(n_hands):
        result = play_episode(Deck.shuffled(rng), q_table, i, policy)
        rewards[i] = result.reward

    mean = float(np.mean(rewards))
    std = float(np.std(rewards, ddof=1))
    ci_margin = 1.96 * std / math.sqrt(n_hands)

    return SimulationResult(
        n_hands=n_hands,
        mean_reward=mean,
        std_reward=std,
        ci_95_low=mean - ci_margin,
        ci_95_high=mean + ci_margin,
        n_wins=int(np.sum(rewards > 0)),
        n_losses=int(np.sum(rewards < 0)),
        n_draws=int(np.sum(rewards == 0)),
        rewards=rewards if return_rewards else None,
    )


def evaluate_q_table(
    q_table: QTable,
    n_hands: int = 100_000,
    rng: np.random.Generator | None = None,
) -> SimulationResult:
    """Evaluate the greedy policy of a learned table."""
    rng = rng if rng is not None else np.random.default_rng()
    return simulate_policy(make_greedy_policy(rng), q_table, n_hands, rng)


def compare_to_baseline(
    q_table: QTable,
    n_hands: int = 100_000,
    stand_threshold: int = 17,
    seed: int | None = 42,
) -> dict[str, SimulationResult]:
    """Evaluate a learned table and a stand-on-threshold baseline.

    Both runs use generators seeded identically so they see the same decks
    for as long as their card consumption stays in step.

    Returns:
        {'learned': SimulationResult, 'baseline': SimulationResult}
    """
    learned = evaluate_q_table(q_table, n_hands, np.random.default_rng(seed))
    baseline = simulate_policy(
        make_threshold_policy(stand_threshold),
        n_hands=n_hands,
        rng=np.random.default_rng(seed),
    )
    return {'learned': learned, 'baseline': baseline}
