"""Console reports for training runs and learned tables.

Four public functions print the data a training run produces:

    print_snapshot(snapshot)        — one periodic CSV line
    print_q_values(entries)         — every (state_action, value), best first
    print_strategy(q_table)         — learned HIT/STAND tables, hard and soft
    print_training_summary(result)  — totals, win rate, mean error, timing

format_strategy_table() returns the text of one strategy table so callers
(and tests) can use it without capturing stdout.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.learning.policies import MAX_DECISION_TOTAL, MIN_DECISION_TOTAL
from src.learning.qtable import QTable
from src.learning.states import BlackjackAction, BlackjackState, CountingState
from src.learning.trainer import TrainingResult, TrainingSnapshot

# Dealer upcard values shown as columns (11 = ace).
_DEALER_UPCARDS: list[int] = list(range(2, 12))
_PLAYER_TOTALS: list[int] = list(range(MAX_DECISION_TOTAL, MIN_DECISION_TOTAL - 1, -1))
_ACTION_SYMBOLS: dict[BlackjackAction, str] = {
    BlackjackAction.HIT: 'H',
    BlackjackAction.STAND: 'S',
}


def _upcard_label(dealer_total: int) -> str:
    return 'A' if dealer_total == 11 else str(dealer_total)


# ─── Public report functions ──────────────────────────────────────────────────

def print_snapshot(snapshot: TrainingSnapshot) -> None:
    """Print `"episode","wins","losses","draws","mean_error"`."""
    print(snapshot)


def print_q_values(entries: Iterable) -> None:
    """Print the number of learned values, then each pair on its own line.

    Args:
        entries: (state_action, value) pairs, e.g. QTable.all_entries().
    """
    entries = list(entries)
    print(f"Total state action values: {len(entries)}")
    for state_action, value in entries:
        state, action = state_action
        print(f"{state} {action.name:<5} {value:+.4f}")


def format_strategy_table(q_table: QTable, soft_ace: bool, count_bucket: int | None = None) -> str:
    """Render the greedy action for every decision state of one hand type.

    Rows are player totals 20 down to 12, columns dealer upcards 2..A.
    Unvisited states show '-'. Passing *count_bucket* reads a table
    trained on CountingState at that count.
    """
    header = '   |' + ''.join(f' {_upcard_label(d):>2} |' for d in _DEALER_UPCARDS)
    divider = '-' * len(header)
    title = f"Soft ace: {'yes' if soft_ace else 'no'}"
    if count_bucket is not None:
        title += f" | Count: {count_bucket:+d}"
    lines = [title, header, divider]
    for player in _PLAYER_TOTALS:
        cells = []
        for dealer in _DEALER_UPCARDS:
            if count_bucket is None:
                state = BlackjackState(player, dealer, soft_ace)
            else:
                state = CountingState(player, dealer, soft_ace, count_bucket)
            action = q_table.select_greedy_action(state)
            cells.append(f' {_ACTION_SYMBOLS.get(action, "-"):>2} |')
        lines.append(f'{player:>2} |' + ''.join(cells))
    lines.append(divider)
    return '\n'.join(lines)


def print_strategy(q_table: QTable, count_bucket: int | None = None) -> None:
    """Print the learned strategy for hard hands, then soft hands."""
    for soft_ace in (False, True):
        print()
        print(format_strategy_table(q_table, soft_ace, count_bucket))
    print()


def print_training_summary(result: TrainingResult) -> None:
    """Print aggregate statistics for a completed run."""
    n = result.n_episodes
    print("=" * 56)
    print("Training Summary")
    print("=" * 56)
    print(f"  Episodes:     {n:,}")
    if n:
        print(f"  Wins:         {result.n_wins:,}  ({result.n_wins / n:.2%})")
        print(f"  Losses:       {result.n_losses:,}  ({result.n_losses / n:.2%})")
        print(f"  Draws:        {result.n_draws:,}  ({result.n_draws / n:.2%})")
    print(f"  Mean error:   {result.mean_error:.4f}")
    print(f"  Q entries:    {len(result.q_table)}")
    print(f"  Elapsed:      {result.elapsed_seconds:.2f}s")
    print()
