"""Strategy heat maps for learned blackjack Q-tables.

Data builders return (hard, soft) NumPy matrices that can be inspected
directly or handed to the plot functions:

    build_policy_heatmap_data(q_table)  greedy action, 1.0 = HIT, 0.0 = STAND
    build_margin_heatmap_data(q_table)  Q(HIT) − Q(STAND), positive favours HIT

Plot functions:

    plot_strategy_heatmaps(hard, soft, title, ...)  hard and soft side by side
    plot_learned_strategy(q_table, ...)             build + plot in one call

Both builders use the same grid: rows are player totals 20 down to 12, columns
dealer upcards 2..10 then A. Cells the table has no answer for are NaN and
drawn grey.
"""

from __future__ import annotations

import matplotlib
import matplotlib.axes
import matplotlib.colors
import matplotlib.figure
import matplotlib.image
import matplotlib.pyplot as plt
import numpy as np

from src.learning.policies import MAX_DECISION_TOTAL, MIN_DECISION_TOTAL
from src.learning.qtable import QTable
from src.learning.states import BlackjackAction, BlackjackState

# ─── Grid layout ──────────────────────────────────────────────────────────────

_TOTALS: list[int] = list(range(MAX_DECISION_TOTAL, MIN_DECISION_TOTAL - 1, -1))
_UPCARDS: list[int] = list(range(2, 12))
_UPCARD_LABELS: list[str] = ["A" if d == 11 else str(d) for d in _UPCARDS]
_GRID_SHAPE: tuple[int, int] = (len(_TOTALS), len(_UPCARDS))

# Margins beyond ±1 are saturated in the continuous colour scale.
_MARGIN_LIMIT: float = 1.0
_UNVISITED: str = "lightgrey"


def _with_grey_nan(cmap: matplotlib.colors.Colormap) -> matplotlib.colors.Colormap:
    return cmap.with_extremes(bad=_UNVISITED)


_ACTION_CMAP = _with_grey_nan(matplotlib.colors.ListedColormap(["firebrick", "forestgreen"]))
_MARGIN_CMAP = _with_grey_nan(matplotlib.colormaps["RdYlGn"])


# ─── Data builders ────────────────────────────────────────────────────────────


def _fill_grid(q_table: QTable, soft_ace: bool, cell) -> np.ndarray:
    grid = np.full(_GRID_SHAPE, np.nan)
    for r, player in enumerate(_TOTALS):
        for c, dealer in enumerate(_UPCARDS):
            value = cell(q_table, BlackjackState(player, dealer, soft_ace))
            if value is not None:
                grid[r, c] = value
    return grid


def _greedy_cell(q_table: QTable, state: BlackjackState) -> float | None:
    action = q_table.select_greedy_action(state)
    if action is None:
        return None
    return 1.0 if action is BlackjackAction.HIT else 0.0


def _margin_cell(q_table: QTable, state: BlackjackState) -> float | None:
    values = q_table.action_values(state)
    if BlackjackAction.HIT not in values or BlackjackAction.STAND not in values:
        return None
    return values[BlackjackAction.HIT] - values[BlackjackAction.STAND]


def build_policy_heatmap_data(q_table: QTable) -> tuple[np.ndarray, np.ndarray]:
    """Return (hard, soft) greedy-action matrices of shape (9, 10).

    1.0 = HIT, 0.0 = STAND, NaN = state never updated.
    """
    return _fill_grid(q_table, False, _greedy_cell), _fill_grid(q_table, True, _greedy_cell)


def build_margin_heatmap_data(q_table: QTable) -> tuple[np.ndarray, np.ndarray]:
    """Return (hard, soft) Q(HIT) − Q(STAND) matrices of shape (9, 10).

    A cell stays NaN until both actions have been updated in that state, so
    a margin is never taken against the table's default value.
    """
    return _fill_grid(q_table, False, _margin_cell), _fill_grid(q_table, True, _margin_cell)


# ─── Drawing ──────────────────────────────────────────────────────────────────


def _draw_grid(ax: matplotlib.axes.Axes, grid: np.ndarray, binary: bool) -> matplotlib.image.AxesImage:
    if binary:
        cmap, vmin, vmax = _ACTION_CMAP, 0.0, 1.0
    else:
        cmap, vmin, vmax = _MARGIN_CMAP, -_MARGIN_LIMIT, _MARGIN_LIMIT
    image = ax.imshow(np.ma.masked_invalid(grid), cmap=cmap, vmin=vmin, vmax=vmax, aspect="auto")

    ax.set_xticks(range(len(_UPCARDS)), labels=_UPCARD_LABELS, fontsize=9)
    ax.set_yticks(range(len(_TOTALS)), labels=[str(t) for t in _TOTALS], fontsize=9)
    ax.set_xlabel("Dealer upcard", fontsize=9)
    ax.set_ylabel("Player total", fontsize=9)

    rows, cols = np.nonzero(~np.isnan(grid))
    for r, c in zip(rows, cols):
        value = grid[r, c]
        if binary:
            label, colour, size = ("H" if value >= 0.5 else "S"), "white", 9
        else:
            label, colour, size = f"{value:+.2f}", ("black" if abs(value) < 0.5 else "white"), 7
        ax.text(c, r, label, ha="center", va="center", fontsize=size,
                color=colour, fontweight="bold")
    return image


def plot_strategy_heatmaps(
    hard_data: np.ndarray,
    soft_data: np.ndarray,
    title: str,
    *,
    binary: bool = True,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Draw the hard and soft matrices side by side.

    Args:
        hard_data: (9, 10) matrix for hands without a soft ace.
        soft_data: (9, 10) matrix for soft hands.
        title:     Figure title.
        binary:    True for greedy-action matrices (red STAND, green HIT,
                   H/S labels); False for margin matrices (diverging scale,
                   numeric labels, one colour bar per panel).
        show:      Call plt.show() once drawn.
        save_path: Write the figure to this path (before showing).

    Returns:
        The matplotlib Figure.
    """
    fig, axes = plt.subplots(1, 2, figsize=(13, 5))
    fig.suptitle(title, fontsize=13, fontweight="bold")

    for ax, grid, name in zip(axes, (hard_data, soft_data), ("Hard totals", "Soft totals")):
        image = _draw_grid(ax, grid, binary)
        ax.set_title(name, fontsize=10)
        if not binary:
            fig.colorbar(image, ax=ax, label="Q(HIT) − Q(STAND)", fraction=0.046, pad=0.04)

    fig.tight_layout()
    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()
    return fig


def plot_learned_strategy(
    q_table: QTable,
    *,
    margin: bool = False,
    title: str | None = None,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Build and plot either the greedy strategy or the action margin."""
    if margin:
        hard, soft = build_margin_heatmap_data(q_table)
    else:
        hard, soft = build_policy_heatmap_data(q_table)
    if title is None:
        title = "Learned action margin" if margin else "Learned strategy (greedy)"
    return plot_strategy_heatmaps(
        hard, soft, title, binary=not margin, show=show, save_path=save_path
    )
