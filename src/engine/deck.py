"""
Deck creation, shuffling, and card dealing.

The deck holds a numpy int8 array of card ranks (1–10) and a dealing
position. Cards before the position have been dealt; cards from the
position onward are still available, and `draw()` always takes the next one.

Three constructors cover the three ways a deck is obtained:
    Deck.fresh()          canonical suit-major order
    Deck.shuffled(rng)    uniformly random permutation (Fisher–Yates)
    Deck.rigged(cards)    exact caller-supplied order, for deterministic tests

Randomness comes from an explicitly passed numpy Generator, never the
global numpy state.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from .cards import RANK_COUNTS, canonical_order


class EmptyDeckError(ValueError):
    """Raised when drawing from a deck that has no cards left."""


def create_deck() -> np.ndarray:
    """Create the 52 ranks of a fresh deck in canonical suit-major order.

    Returns:
        np.ndarray: int8 array of shape (52,).

    Examples:
        >>> deck = create_deck()
        >>> len(deck)
        52
        >>> int((deck == 10).sum())
        16
    """
    return np.array(canonical_order(), dtype=np.int8)


def shuffle_in_place(cards: np.ndarray, rng: np.random.Generator) -> None:
    """Shuffle an array in place with the Fisher–Yates algorithm.

    Walks from the last index down to 1, swapping each element with a
    uniformly chosen element at or below it. All swap targets are drawn
    from *rng* in one call.

    Args:
        cards: Mutable 1-D array, modified in place.
        rng:   Source of randomness.
    """
    n = len(cards)
    if n < 2:
        return
    # targets[k] is uniform in [0, i] for i = n-1, n-2, ..., 1
    targets = rng.integers(0, np.arange(n, 1, -1))
    for i, j in zip(range(n - 1, 0, -1), targets):
        cards[i], cards[j] = cards[j], cards[i]


@dataclass(eq=False)
class Deck:
    """An ordered source of cards with single-card draw."""

    cards: np.ndarray
    position: int = 0
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)

    @classmethod
    def fresh(cls, rng: np.random.Generator | None = None) -> Deck:
        """Return a full deck in canonical order."""
        return cls(create_deck(), rng=rng if rng is not None else np.random.default_rng())

    @classmethod
    def shuffled(cls, rng: np.random.Generator | None = None) -> Deck:
        """Return a full deck in uniformly random order."""
        deck = cls.fresh(rng)
        deck.shuffle()
        return deck

    @classmethod
    def rigged(cls, cards: Iterable[int]) -> Deck:
        """Return a deck that deals exactly *cards*, in order.

        Raises:
            ValueError: If any rank is outside 1–10.

        Examples:
            >>> deck = Deck.rigged([1, 10])
            >>> deck.draw(), deck.draw()
            (1, 10)
        """
        ranks = list(cards)
        for rank in ranks:
            if rank not in RANK_COUNTS:
                raise ValueError(f"Invalid card rank {rank!r}; expected 1–10.")
        return cls(np.array(ranks, dtype=np.int8))

    def draw(self) -> int:
        """Remove and return the next card.

        Raises:
            EmptyDeckError: If no cards remain.
        """
        if self.position >= len(self.cards):
            raise EmptyDeckError("Cannot deal from an empty deck.")
        card = int(self.cards[self.position])
        self.position += 1
        return card

    def shuffle(self) -> None:
        """Reshuffle the undealt cards in place."""
        shuffle_in_place(self.cards[self.position:], self.rng)

    def remaining_count(self) -> int:
        """Return how many cards are left to deal."""
        return len(self.cards) - self.position

    def remaining(self) -> tuple[int, ...]:
        """Return the undealt cards in dealing order."""
        return tuple(int(c) for c in self.cards[self.position:])

    def __len__(self) -> int:
        return self.remaining_count()
