"""Monte Carlo control with Hi-Lo card counting.

Unlike the other learners, which deal every round from a new deck, this one
keeps dealing from the same deck so that the running count carries
information about the cards still to come:

    - The deck is replaced with a freshly shuffled one (and the count reset
      to 0) once fewer than `reshuffle_below` cards remain.
    - The running count at the end of each round seeds the next one.
    - The learning state is CountingState, which adds the clamped count to
      the player's view, so the table can learn count-dependent play.

Bet sizing is tracked but never learned: `money` accumulates each round's
reward scaled by the count at the start of that round whenever the count is
above 1, and the unscaled reward otherwise.
"""

from __future__ import annotations

import numpy as np

from src.engine.deck import Deck

from .monte_carlo import play_episode, update_from_episode
from .policies import Policy, make_epsilon_greedy_policy, staged_decay
from .qtable import QTable
from .states import CountingState, EpisodeOutcome

# Fewer cards than this cannot be relied on to finish a round.
RESHUFFLE_BELOW: int = 15


class CountingMonteCarlo:
    """Stateful episode algorithm: call it like the other learners."""

    def __init__(
        self,
        policy: Policy | None = None,
        rng: np.random.Generator | None = None,
        reshuffle_below: int = RESHUFFLE_BELOW,
        deck: Deck | None = None,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.policy = policy or make_epsilon_greedy_policy(staged_decay(), self.rng)
        self.reshuffle_below = reshuffle_below
        self.deck = deck if deck is not None else Deck.shuffled(self.rng)
        self.running_count = 0
        self.money = 0
        self.shuffles = 0

    def _ensure_cards(self) -> None:
        if self.deck.remaining_count() < self.reshuffle_below:
            self.deck = Deck.shuffled(self.rng)
            self.running_count = 0
            self.shuffles += 1

    def __call__(self, q_table: QTable, episode_number: int) -> EpisodeOutcome:
        self._ensure_cards()
        start_count = self.running_count
        result = play_episode(
            self.deck,
            q_table,
            episode_number,
            self.policy,
            initial_count=start_count,
            state_factory=CountingState.from_round,
        )
        mean_error = update_from_episode(q_table, result)

        self.running_count = result.final_round.running_count
        self.money += result.reward * start_count if start_count > 1 else result.reward
        return EpisodeOutcome(result.reward, mean_error)
