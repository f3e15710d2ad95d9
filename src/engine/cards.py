"""
Card constants, composition, and human-readable I/O helpers.

Card encoding (integer rank 1–10):
    1      = Ace (valued 1 or 11, resolved by the hand evaluator)
    2..9   = pip cards at face value
    10     = any ten-valued card (10, J, Q, K)

Suits are irrelevant to blackjack totals, so a card is just its rank. A
standard deck therefore holds four of each rank 1–9 and sixteen tens.
"""

from __future__ import annotations

ACE: int = 1
TEN: int = 10

RANKS: tuple[int, ...] = tuple(range(1, 11))
NUM_SUITS: int = 4

# Copies of each rank in one 52-card deck.
RANK_COUNTS: dict[int, int] = {rank: (16 if rank == TEN else 4) for rank in RANKS}

RANK_NAMES: dict[int, str] = {1: 'A', 2: '2', 3: '3', 4: '4', 5: '5', 6: '6',
                              7: '7', 8: '8', 9: '9', 10: 'T'}

# Hi-Lo contributions: low cards raise the count, tens and aces lower it.
HILO_LOW: frozenset[int] = frozenset({2, 3, 4, 5, 6})
HILO_NEUTRAL: frozenset[int] = frozenset({7, 8, 9})


def suit_ranks() -> list[int]:
    """Return the ranks of one suit in canonical order: A, 2..9, T, T, T, T.

    Examples:
        >>> suit_ranks()
        [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 10, 10, 10]
    """
    return list(range(1, 10)) + [TEN] * 4


def canonical_order() -> list[int]:
    """Return all 52 ranks in suit-major order (one full suit after another).

    Examples:
        >>> order = canonical_order()
        >>> len(order)
        52
        >>> order[:13] == suit_ranks()
        True
    """
    return suit_ranks() * NUM_SUITS


def card_value(card: int) -> int:
    """Return the hard point value of a card (Ace counts 1).

    Raises:
        ValueError: If the rank is outside 1–10.

    Examples:
        >>> card_value(1)
        1
        >>> card_value(10)
        10
    """
    if card not in RANK_COUNTS:
        raise ValueError(f"Invalid card rank {card!r}; expected 1–10.")
    return card


def hilo_value(card: int) -> int:
    """Return the Hi-Lo running-count contribution of a card.

    Examples:
        >>> hilo_value(5)
        1
        >>> hilo_value(8)
        0
        >>> hilo_value(1)
        -1
        >>> hilo_value(10)
        -1
    """
    if card in HILO_LOW:
        return 1
    if card in HILO_NEUTRAL:
        return 0
    return -1


def card_to_str(card: int) -> str:
    """Convert a rank to its one-character display name.

    Examples:
        >>> card_to_str(1)
        'A'
        >>> card_to_str(10)
        'T'
    """
    return RANK_NAMES[card]


def str_to_card(s: str) -> int:
    """Parse a display name back to a rank.

    Accepts 'A', '2'-'9', 'T', and also '10', 'J', 'Q', 'K' for ten-valued cards.

    Examples:
        >>> str_to_card('A')
        1
        >>> str_to_card('K')
        10
        >>> str_to_card('7')
        7
    """
    token = s.strip().upper()
    if token in ('10', 'J', 'Q', 'K', 'T'):
        return TEN
    if token == 'A':
        return ACE
    if token.isdigit() and 2 <= int(token) <= 9:
        return int(token)
    raise ValueError(f"Unrecognised card {s!r}.")


def hand_to_str(cards: tuple[int, ...]) -> str:
    """Convert a sequence of ranks to a space-separated display string.

    Examples:
        >>> hand_to_str((1, 10))
        'A T'
    """
    return ' '.join(card_to_str(c) for c in cards)
