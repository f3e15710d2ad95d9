"""
Hand evaluation: running total with soft-ace accounting.

A hand is summarised by two values only:
    total     best total reached so far
    soft_ace  True while an ace is being counted as 11

Aces are resolved greedily as cards arrive: an ace counts 11 if that keeps
the total at or below 21. If a later card would push a soft hand over 21,
the ace is demoted to 1 (subtract 10) instead of busting.

Hands are immutable; `hit()` returns a new Hand. Ordering is bust-aware: a
busted hand ranks below every live hand, and two busted hands cannot be
ordered at all.
"""

from __future__ import annotations

from dataclasses import dataclass

from .cards import ACE, card_value


class UnorderableHandsError(ValueError):
    """Raised when comparing two busted hands."""


@dataclass(frozen=True)
class Hand:
    total: int = 0
    soft_ace: bool = False

    @classmethod
    def empty(cls) -> Hand:
        return cls()

    @classmethod
    def from_cards(cls, *cards: int) -> Hand:
        """Build a hand by hitting each card in order.

        Examples:
            >>> Hand.from_cards(1, 10)
            Hand(total=21, soft_ace=True)
            >>> Hand.from_cards(5, 6, 1)
            Hand(total=12, soft_ace=False)
        """
        hand = cls()
        for card in cards:
            hand = hand.hit(card)
        return hand

    def hit(self, card: int) -> Hand:
        """Return the hand after receiving *card*."""
        new_total = self.total + card_value(card)
        if card == ACE and new_total + 10 <= 21:
            return Hand(new_total + 10, True)
        if new_total > 21 and self.soft_ace:
            return Hand(new_total - 10, False)
        return Hand(new_total, self.soft_ace)

    def is_bust(self) -> bool:
        return self.total > 21

    def __lt__(self, other: Hand) -> bool:
        return compare_hands(self, other) < 0

    def __gt__(self, other: Hand) -> bool:
        return compare_hands(self, other) > 0

    def __le__(self, other: Hand) -> bool:
        return compare_hands(self, other) <= 0

    def __ge__(self, other: Hand) -> bool:
        return compare_hands(self, other) >= 0


def compare_hands(a: Hand, b: Hand) -> int:
    """Return -1, 0 or 1 as hand *a* ranks below, level with, or above *b*.

    A bust hand is always the minimum; live hands compare by total only.

    Raises:
        UnorderableHandsError: If both hands are bust.

    Examples:
        >>> compare_hands(Hand(23, False), Hand(20, False))
        -1
        >>> compare_hands(Hand(18, True), Hand(18, False))
        0
    """
    if a.is_bust() and b.is_bust():
        raise UnorderableHandsError(
            f"Cannot order two bust hands (totals {a.total} and {b.total})."
        )
    if a.is_bust():
        return -1
    if b.is_bust():
        return 1
    return (a.total > b.total) - (a.total < b.total)
