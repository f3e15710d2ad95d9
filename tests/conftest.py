"""
Shared pytest fixtures for the blackjack RL tests.

Provides a rigged-deck builder that accepts human-readable card names, a
seeded numpy Generator, and FixedRng, a stand-in Generator whose draws are
scripted so policy branches can be forced without relying on a seed.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import pytest

from src.engine.cards import str_to_card
from src.engine.deck import Deck


def rigged(*cards: int | str) -> Deck:
    """Build a rigged deck from ranks or display names.

    Examples:
        >>> rigged('A', 'K', 5).remaining()
        (1, 10, 5)
    """
    return Deck.rigged(str_to_card(c) if isinstance(c, str) else c for c in cards)


class FixedRng:
    """Minimal Generator replacement returning scripted values.

    `random()` returns *uniform* every call. `integers()` cycles through
    *choices* (0 = HIT, 1 = STAND when picking an action).
    """

    def __init__(self, uniform: float = 0.5, choices: Iterable[int] = (0,)) -> None:
        self.uniform = uniform
        self.choices = list(choices)
        self.calls = 0

    def random(self) -> float:
        return self.uniform

    def integers(self, *args, **kwargs) -> int:
        value = self.choices[self.calls % len(self.choices)]
        self.calls += 1
        return value


@pytest.fixture
def rng() -> np.random.Generator:
    """A Generator with a fixed seed."""
    return np.random.default_rng(12345)


@pytest.fixture
def deck_of():
    """Expose the rigged() helper as a fixture for convenience."""
    return rigged
