"""
Dealer policy, showdown settlement, and reward mapping.

Settlement priority (highest to lowest):
    1. Player bust (>21)   → LOST (decided when the player hits, before any dealer play)
    2. Dealer bust (>21)   → WON  (a bust dealer hand ranks below any live hand)
    3. Total comparison    → WON / DRAW / LOST

Reward convention (from the player's perspective):
    +1 = WON
    -1 = LOST
     0 = DRAW, or a round that is still PLAYING
"""

from __future__ import annotations

from enum import Enum, auto

from .hand import Hand, compare_hands

# Dealer draws while below this total and stands on anything at or above it
# (soft 17 included).
DEALER_STAND_TOTAL: int = 17


class Outcome(Enum):
    PLAYING = auto()
    WON = auto()
    LOST = auto()
    DRAW = auto()


REWARDS: dict[Outcome, int] = {
    Outcome.WON: 1,
    Outcome.LOST: -1,
    Outcome.DRAW: 0,
    Outcome.PLAYING: 0,
}


def dealer_should_hit(dealer: Hand) -> bool:
    """Return True if the fixed dealer policy draws another card.

    Examples:
        >>> dealer_should_hit(Hand(16, False))
        True
        >>> dealer_should_hit(Hand(17, True))
        False
    """
    return dealer.total < DEALER_STAND_TOTAL


def settle(player: Hand, dealer: Hand) -> Outcome:
    """Resolve a showdown between a standing player and the dealer's final hand.

    Args:
        player: Player's final hand. Must not be bust: a bust player has
                already lost and never reaches showdown.
        dealer: Dealer's final hand, possibly bust.

    Returns:
        WON, DRAW or LOST.

    Raises:
        UnorderableHandsError: If both hands are bust.
    """
    cmp = compare_hands(player, dealer)
    if cmp > 0:
        return Outcome.WON
    if cmp == 0:
        return Outcome.DRAW
    return Outcome.LOST


def reward(outcome: Outcome) -> int:
    """Return the scalar reward for an outcome.

    Examples:
        >>> reward(Outcome.WON)
        1
        >>> reward(Outcome.DRAW)
        0
    """
    return REWARDS[outcome]
