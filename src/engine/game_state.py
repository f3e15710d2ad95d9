"""
Round state machine for one hand of blackjack.

Implements the hand flow:
    DEAL → PLAYING → (player HIT)* → STAND → DEALER DRAWS → SETTLEMENT
                          └─ player bust → LOST

Rules modelled here:
    - Deal order is player card 1, player card 2, dealer upcard. The dealer
      holds a single visible card while the player acts; the rest of the
      dealer's hand is drawn only once the player stands.
    - The dealer draws until reaching 17 or more (or busting).
    - A player bust ends the round immediately; the dealer does not play.
    - WON / LOST / DRAW are terminal. Hitting or standing on a terminal
      round raises InvalidTransitionError.
    - Every dealt card, whichever side receives it, updates the Hi-Lo
      running count.

RoundState is frozen: every transition returns a new value, so a sequence
of states can be kept and inspected without copying.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .cards import hand_to_str, hilo_value
from .deck import Deck
from .hand import Hand
from .rules import Outcome, dealer_should_hit, reward, settle


class InvalidTransitionError(RuntimeError):
    """Raised when hit() or stand() is called on a finished round."""


@dataclass(frozen=True)
class RoundState:
    """Immutable snapshot of a round in progress or finished."""

    outcome: Outcome
    player: Hand
    dealer: Hand
    running_count: int = 0
    player_cards: tuple[int, ...] = ()
    dealer_cards: tuple[int, ...] = ()

    @classmethod
    def start(cls, deck: Deck, initial_count: int = 0) -> RoundState:
        """Deal a new round: two cards to the player, then the dealer upcard.

        Args:
            deck:          Card source; three cards are drawn.
            initial_count: Running count carried over from earlier rounds
                           dealt from the same deck.
        """
        p1 = deck.draw()
        p2 = deck.draw()
        d1 = deck.draw()
        return cls(
            outcome=Outcome.PLAYING,
            player=Hand.from_cards(p1, p2),
            dealer=Hand.from_cards(d1),
            running_count=initial_count + hilo_value(p1) + hilo_value(p2) + hilo_value(d1),
            player_cards=(p1, p2),
            dealer_cards=(d1,),
        )

    # ── Transitions ──────────────────────────────────────────────────────────

    def hit(self, deck: Deck) -> RoundState:
        """Deal one card to the player; a bust ends the round as LOST."""
        self._require_playing('hit')
        card = deck.draw()
        player = self.player.hit(card)
        return replace(
            self,
            outcome=Outcome.LOST if player.is_bust() else Outcome.PLAYING,
            player=player,
            running_count=self.running_count + hilo_value(card),
            player_cards=self.player_cards + (card,),
        )

    def stand(self, deck: Deck) -> RoundState:
        """Play out the dealer's fixed policy and settle the round."""
        self._require_playing('stand')
        dealer = self.dealer
        count = self.running_count
        drawn: list[int] = []
        while dealer_should_hit(dealer):
            card = deck.draw()
            drawn.append(card)
            dealer = dealer.hit(card)
            count += hilo_value(card)
        return replace(
            self,
            outcome=settle(self.player, dealer),
            dealer=dealer,
            running_count=count,
            dealer_cards=self.dealer_cards + tuple(drawn),
        )

    def _require_playing(self, action: str) -> None:
        if self.outcome is not Outcome.PLAYING:
            raise InvalidTransitionError(
                f"Cannot {action}: round already finished ({self.outcome.name})."
            )

    # ── Queries ──────────────────────────────────────────────────────────────

    @property
    def finished(self) -> bool:
        return self.outcome is not Outcome.PLAYING

    @property
    def won(self) -> bool:
        return self.outcome is Outcome.WON

    @property
    def lost(self) -> bool:
        return self.outcome is Outcome.LOST

    @property
    def draw(self) -> bool:
        return self.outcome is Outcome.DRAW

    @property
    def reward(self) -> int:
        """+1 won, -1 lost, 0 draw (and 0 while still playing)."""
        return reward(self.outcome)

    def __str__(self) -> str:
        return (
            f"Player: {hand_to_str(self.player_cards)} "
            f"(total={self.player.total}{', soft' if self.player.soft_ace else ''}) | "
            f"Dealer: {hand_to_str(self.dealer_cards)} (total={self.dealer.total}) | "
            f"{self.outcome.name}"
        )
