"""
Tests for src/analysis/strategy_report.py

Print functions are checked through capsys; table layout through
format_strategy_table().
"""

from __future__ import annotations

import pytest

from src.analysis.strategy_report import (
    format_strategy_table,
    print_q_values,
    print_snapshot,
    print_strategy,
    print_training_summary,
)
from src.learning.qtable import QTable
from src.learning.states import BlackjackAction, BlackjackState, CountingState, StateAction
from src.learning.trainer import TrainingConfig, TrainingResult, TrainingSnapshot, train

HIT = BlackjackAction.HIT
STAND = BlackjackAction.STAND


@pytest.fixture
def q_table() -> QTable:
    q = QTable()
    q.update_value(StateAction(BlackjackState(20, 10, False), STAND), 0.6)
    q.update_value(StateAction(BlackjackState(20, 10, False), HIT), -0.8)
    q.update_value(StateAction(BlackjackState(12, 7, False), HIT), -0.2)
    q.update_value(StateAction(BlackjackState(18, 11, True), HIT), -0.1)
    return q


class TestPrintSnapshot:
    def test_csv_line(self, capsys):
        print_snapshot(TrainingSnapshot(1000, 431, 482, 87, 0.8125))
        assert capsys.readouterr().out == '"1000","431","482","87","0.8125"\n'


class TestPrintQValues:
    def test_header_and_order(self, q_table, capsys):
        print_q_values(q_table.all_entries())
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Total state action values: 4"
        assert len(lines) == 5
        assert "+0.6000" in lines[1]
        assert "-0.8000" in lines[-1]

    def test_empty(self, capsys):
        print_q_values([])
        assert capsys.readouterr().out.strip() == "Total state action values: 0"


class TestFormatStrategyTable:
    def test_shape(self, q_table):
        lines = format_strategy_table(q_table, soft_ace=False).splitlines()
        # title, header, divider, 9 rows, divider
        assert len(lines) == 13
        assert lines[3].startswith('20 |')
        assert lines[11].startswith('12 |')

    def test_header_upcards(self, q_table):
        header = format_strategy_table(q_table, soft_ace=False).splitlines()[1]
        for label in ['2', '9', '10', 'A']:
            assert f' {label:>2} |' in header

    def test_cells(self, q_table):
        lines = format_strategy_table(q_table, soft_ace=False).splitlines()
        row_20 = lines[3].split('|')[1:-1]
        row_12 = lines[11].split('|')[1:-1]
        # Columns: 2..10 then A, so upcard d sits at index d - 2.
        assert row_20[8].strip() == 'S'
        assert row_12[5].strip() == 'H'
        assert row_20[0].strip() == '-'

    def test_soft_table_separate(self, q_table):
        lines = format_strategy_table(q_table, soft_ace=True).splitlines()
        assert lines[0] == "Soft ace: yes"
        row_18 = lines[5].split('|')[1:-1]
        assert row_18[9].strip() == 'H'
        assert lines[3].split('|')[1:-1][8].strip() == '-'

    def test_counting_table(self):
        q = QTable()
        q.update_value(StateAction(CountingState(16, 10, False, 2), STAND), 0.1)
        text = format_strategy_table(q, soft_ace=False, count_bucket=2)
        assert "Count: +2" in text
        assert ' S |' in text
        assert ' S |' not in format_strategy_table(q, soft_ace=False, count_bucket=0)


class TestPrintStrategy:
    def test_prints_both_tables(self, q_table, capsys):
        print_strategy(q_table)
        out = capsys.readouterr().out
        assert "Soft ace: no" in out
        assert "Soft ace: yes" in out
        assert out.index("Soft ace: no") < out.index("Soft ace: yes")


class TestPrintTrainingSummary:
    def test_contains_totals(self, capsys):
        result = TrainingResult(
            q_table=QTable(), n_episodes=1000, n_wins=430, n_losses=480, n_draws=90,
            mean_error=0.75, elapsed_seconds=1.5,
        )
        print_training_summary(result)
        out = capsys.readouterr().out
        assert "Training Summary" in out
        assert "1,000" in out
        assert "43.00%" in out
        assert "0.7500" in out

    def test_empty_run(self, capsys):
        result = train(lambda q, i: None, TrainingConfig(episodes=0))
        print_training_summary(result)
        assert "Episodes:     0" in capsys.readouterr().out
