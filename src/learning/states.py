"""
State and action types for tabular learning.

The Q-table is environment-agnostic: it only needs keys that are hashable,
comparable for equality, and printable for debugging. Immutable NamedTuples
and Enums give all of that for free, so any such type satisfies the State
and Action protocols below.

Two blackjack state variants are provided:

    BlackjackState   — (player_total, dealer_total, soft_ace)
                       what the player sees at a decision point
    CountingState    — BlackjackState plus a clamped Hi-Lo count bucket,
                       used by the card-counting learner

Both expose `player_total`, which is all the exploration policies need to
apply their forced-action rules.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Hashable
from enum import Enum
from typing import Generic, NamedTuple, Protocol, TypeVar

from src.engine.game_state import RoundState

# Running counts beyond ±COUNT_CLAMP share a bucket.
COUNT_CLAMP: int = 6


class State(Hashable, Protocol):
    """Anything usable as a Q-table state key."""

    def __eq__(self, other: object) -> bool: ...


class Action(Hashable, Protocol):
    """Anything usable as a Q-table action key."""

    def __eq__(self, other: object) -> bool: ...


S = TypeVar('S', bound=State)
A = TypeVar('A', bound=Action)


class BlackjackAction(Enum):
    HIT = 'hit'
    STAND = 'stand'


ACTIONS: tuple[BlackjackAction, ...] = (BlackjackAction.HIT, BlackjackAction.STAND)


class BlackjackState(NamedTuple):
    """Player's view of a round at a decision point.

    Attributes:
        player_total: Player hand total (4–21 at decision points).
        dealer_total: Value of the dealer's single upcard (2–11, ace = 11).
        soft_ace:     True if the player's total counts an ace as 11.

    Example:
        >>> BlackjackState(player_total=17, dealer_total=10, soft_ace=False)
        BlackjackState(player_total=17, dealer_total=10, soft_ace=False)
    """
    player_total: int
    dealer_total: int
    soft_ace: bool

    @classmethod
    def from_round(cls, round_state: RoundState) -> BlackjackState:
        return cls(round_state.player.total, round_state.dealer.total,
                   round_state.player.soft_ace)


class CountingState(NamedTuple):
    """BlackjackState extended with the table's Hi-Lo count.

    Attributes:
        player_total: Player hand total.
        dealer_total: Dealer upcard value (ace = 11).
        soft_ace:     True if the player's total counts an ace as 11.
        count_bucket: Running count clamped to [-COUNT_CLAMP, COUNT_CLAMP].
    """
    player_total: int
    dealer_total: int
    soft_ace: bool
    count_bucket: int

    @classmethod
    def from_round(cls, round_state: RoundState) -> CountingState:
        bucket = max(-COUNT_CLAMP, min(COUNT_CLAMP, round_state.running_count))
        return cls(round_state.player.total, round_state.dealer.total,
                   round_state.player.soft_ace, bucket)


class StateAction(NamedTuple, Generic[S, A]):
    """A (state, action) pair; equal iff both fields are equal."""
    state: S
    action: A


class EpisodeResult(NamedTuple):
    """Trace of one played episode.

    Attributes:
        state_actions: Pairs visited, most recent first.
        reward:        Terminal reward (+1 won, -1 lost, 0 draw).
        final_round:   Terminal RoundState.
    """
    state_actions: deque
    reward: int
    final_round: RoundState

    @classmethod
    def from_round(cls, round_state: RoundState, state_actions: deque) -> EpisodeResult:
        return cls(state_actions, round_state.reward, round_state)


class EpisodeOutcome(NamedTuple):
    """What an episode algorithm reports back to the trainer."""
    reward: int
    mean_error: float
