"""Tests for src/analysis/heat_maps.py — learned strategy heat maps.

Matrix builders are checked cell by cell against a hand-made table; plot
functions are checked for figure structure only. Rendering uses the Agg
backend, so no display is needed.
"""

from __future__ import annotations

import os
import warnings

import matplotlib

matplotlib.use("Agg")  # must precede any pyplot import

import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np
import pytest

from src.analysis.heat_maps import (
    _ACTION_CMAP,
    _MARGIN_CMAP,
    _with_grey_nan,
    build_margin_heatmap_data,
    build_policy_heatmap_data,
    plot_learned_strategy,
    plot_strategy_heatmaps,
)
from src.learning.qtable import QTable
from src.learning.states import BlackjackAction, BlackjackState, StateAction

HIT = BlackjackAction.HIT
STAND = BlackjackAction.STAND


@pytest.fixture
def q_table() -> QTable:
    q = QTable()
    # Hard 20 vs 10: STAND, both actions seen.
    q.update_value(StateAction(BlackjackState(20, 10, False), STAND), 0.55)
    q.update_value(StateAction(BlackjackState(20, 10, False), HIT), -0.85)
    # Hard 12 vs 7: HIT, only HIT seen.
    q.update_value(StateAction(BlackjackState(12, 7, False), HIT), -0.2)
    # Soft 18 vs A: HIT, both seen.
    q.update_value(StateAction(BlackjackState(18, 11, True), HIT), -0.1)
    q.update_value(StateAction(BlackjackState(18, 11, True), STAND), -0.2)
    return q


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


# ─── build_policy_heatmap_data ────────────────────────────────────────────────


class TestBuildPolicyHeatmapData:
    def test_shape(self, q_table):
        hard, soft = build_policy_heatmap_data(q_table)
        assert hard.shape == (9, 10)
        assert soft.shape == (9, 10)

    def test_values_binary_or_nan(self, q_table):
        hard, soft = build_policy_heatmap_data(q_table)
        for mat in (hard, soft):
            for val in mat.flat:
                if not np.isnan(val):
                    assert val in (0.0, 1.0)

    def test_known_cells(self, q_table):
        hard, soft = build_policy_heatmap_data(q_table)
        # Row 0 = total 20, row 8 = total 12; column = upcard - 2.
        assert hard[0, 8] == 0.0
        assert hard[8, 5] == 1.0
        assert soft[2, 9] == 1.0

    def test_unvisited_nan(self, q_table):
        hard, soft = build_policy_heatmap_data(q_table)
        assert np.isnan(hard[0, 0])
        assert np.isnan(soft[0, 8])
        assert np.count_nonzero(~np.isnan(hard)) == 2

    def test_empty_table_all_nan(self):
        hard, soft = build_policy_heatmap_data(QTable())
        assert np.isnan(hard).all()
        assert np.isnan(soft).all()


# ─── build_margin_heatmap_data ────────────────────────────────────────────────


class TestBuildMarginHeatmapData:
    def test_margin_value(self, q_table):
        hard, soft = build_margin_heatmap_data(q_table)
        assert hard[0, 8] == pytest.approx(-1.4)
        assert soft[2, 9] == pytest.approx(0.1)

    def test_needs_both_actions(self, q_table):
        hard, _ = build_margin_heatmap_data(q_table)
        assert np.isnan(hard[8, 5])

    def test_sign_matches_policy(self, q_table):
        policy_hard, policy_soft = build_policy_heatmap_data(q_table)
        margin_hard, margin_soft = build_margin_heatmap_data(q_table)
        for policy, margin in ((policy_hard, margin_hard), (policy_soft, margin_soft)):
            both = ~np.isnan(margin)
            assert np.all((margin[both] > 0) == (policy[both] == 1.0))


# ─── plot functions ───────────────────────────────────────────────────────────


class TestPlotStrategyHeatmaps:
    def test_returns_figure(self, q_table):
        hard, soft = build_policy_heatmap_data(q_table)
        fig = plot_strategy_heatmaps(hard, soft, "Test", show=False)
        assert isinstance(fig, matplotlib.figure.Figure)

    def test_two_axes_binary(self, q_table):
        hard, soft = build_policy_heatmap_data(q_table)
        fig = plot_strategy_heatmaps(hard, soft, "Test", show=False)
        assert len(fig.axes) == 2

    def test_continuous_adds_colorbars(self, q_table):
        hard, soft = build_margin_heatmap_data(q_table)
        fig = plot_strategy_heatmaps(hard, soft, "Margin", binary=False, show=False)
        assert len(fig.axes) == 4

    def test_tick_labels(self, q_table):
        hard, soft = build_policy_heatmap_data(q_table)
        fig = plot_strategy_heatmaps(hard, soft, "Test", show=False)
        fig.canvas.draw()
        labels = [t.get_text() for t in fig.axes[0].get_xticklabels()]
        assert labels[0] == "2"
        assert labels[-1] == "A"

    def test_save(self, q_table, tmp_path):
        hard, soft = build_policy_heatmap_data(q_table)
        path = str(tmp_path / "strategy.png")
        plot_strategy_heatmaps(hard, soft, "Saved", show=False, save_path=path)
        assert os.path.exists(path)
        assert os.path.getsize(path) > 0


class TestPlotLearnedStrategy:
    def test_default_title(self, q_table):
        fig = plot_learned_strategy(q_table, show=False)
        assert fig._suptitle.get_text() == "Learned strategy (greedy)"

    def test_margin_mode(self, q_table):
        fig = plot_learned_strategy(q_table, margin=True, title="M", show=False)
        assert fig._suptitle.get_text() == "M"
        assert len(fig.axes) == 4


# ─── colormaps ────────────────────────────────────────────────────────────────


class TestColormaps:
    @pytest.mark.parametrize("cmap", [_ACTION_CMAP, _MARGIN_CMAP])
    def test_nan_drawn_grey(self, cmap):
        assert cmap(np.nan) == pytest.approx(matplotlib.colors.to_rgba("lightgrey"))

    def test_bad_colour_set_without_warning(self):
        base = matplotlib.colormaps["viridis"]
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            cmap = _with_grey_nan(base)
        assert cmap is not base
        assert base(np.nan) != pytest.approx(matplotlib.colors.to_rgba("lightgrey"))
