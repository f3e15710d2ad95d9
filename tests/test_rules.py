"""Tests for src/engine/rules.py — dealer policy, settlement, and rewards."""

from __future__ import annotations

import pytest

from src.engine.hand import Hand, UnorderableHandsError
from src.engine.rules import DEALER_STAND_TOTAL, Outcome, dealer_should_hit, reward, settle


class TestDealerPolicy:
    @pytest.mark.parametrize("total", range(2, 17))
    def test_hits_below_17(self, total):
        assert dealer_should_hit(Hand(total, False))

    @pytest.mark.parametrize("total", range(17, 22))
    def test_stands_17_and_up(self, total):
        assert not dealer_should_hit(Hand(total, False))

    def test_stands_soft_17(self):
        assert not dealer_should_hit(Hand(17, True))

    def test_threshold_constant(self):
        assert DEALER_STAND_TOTAL == 17


class TestSettle:
    def test_higher_player_wins(self):
        assert settle(Hand(20, False), Hand(18, False)) is Outcome.WON

    def test_lower_player_loses(self):
        assert settle(Hand(17, False), Hand(19, False)) is Outcome.LOST

    def test_equal_totals_draw(self):
        assert settle(Hand(18, False), Hand(18, False)) is Outcome.DRAW

    def test_soft_and_hard_same_total_draw(self):
        assert settle(Hand(21, True), Hand(21, False)) is Outcome.DRAW

    def test_dealer_bust_player_wins(self):
        assert settle(Hand(12, False), Hand(22, False)) is Outcome.WON

    def test_both_bust_raises(self):
        with pytest.raises(UnorderableHandsError):
            settle(Hand(22, False), Hand(23, False))


class TestReward:
    def test_values(self):
        assert reward(Outcome.WON) == 1
        assert reward(Outcome.LOST) == -1
        assert reward(Outcome.DRAW) == 0
        assert reward(Outcome.PLAYING) == 0
