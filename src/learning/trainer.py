"""Training loop shared by every episode algorithm.

An episode algorithm is any callable

    algorithm(q_table, episode_number) -> EpisodeOutcome(reward, mean_error)

that plays one episode and updates the table in place. The trainer owns the
table, runs the configured number of episodes, classifies each reward as a
win, loss or draw, and keeps a running mean of the per-episode error:

    avg ← avg + (error − avg) / episodes_so_far

Every `report_every` episodes it emits a TrainingSnapshot with that
interval's win/loss/draw counts and the cumulative mean error, then resets
the interval counters.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from .qtable import QTable
from .states import EpisodeOutcome

EpisodeAlgorithm = Callable[[QTable, int], EpisodeOutcome]
SnapshotCallback = Callable[['TrainingSnapshot'], None]


@dataclass
class TrainingConfig:
    """Configuration for one training run."""

    episodes: int = 500_000
    report_every: int = 1_000
    default_value: float = 0.0

    def __post_init__(self) -> None:
        if self.episodes < 0:
            raise ValueError(f"episodes must be >= 0, got {self.episodes}")
        if self.report_every <= 0:
            raise ValueError(f"report_every must be positive, got {self.report_every}")


@dataclass(frozen=True)
class TrainingSnapshot:
    """Interval statistics emitted periodically during training.

    Attributes:
        episode:    Number of episodes completed when the snapshot was taken.
        wins:       Wins since the previous snapshot.
        losses:     Losses since the previous snapshot.
        draws:      Draws since the previous snapshot.
        mean_error: Running mean of the per-episode error over the whole run.
    """

    episode: int
    wins: int
    losses: int
    draws: int
    mean_error: float

    def as_row(self) -> tuple[int, int, int, int, float]:
        return (self.episode, self.wins, self.losses, self.draws, self.mean_error)

    def __str__(self) -> str:
        return ','.join(f'"{value}"' for value in self.as_row())


@dataclass
class TrainingResult:
    """Aggregate output of a training run."""

    q_table: QTable
    snapshots: list[TrainingSnapshot] = field(default_factory=list)
    n_episodes: int = 0
    n_wins: int = 0
    n_losses: int = 0
    n_draws: int = 0
    mean_error: float = 0.0
    elapsed_seconds: float = 0.0

    @property
    def win_rate(self) -> float:
        return self.n_wins / self.n_episodes if self.n_episodes else 0.0

    def q_values(self) -> list:
        """Every learned (state_action, value) pair, highest value first."""
        return self.q_table.all_entries()


def train(
    algorithm: EpisodeAlgorithm,
    config: TrainingConfig | None = None,
    q_table: QTable | None = None,
    on_snapshot: SnapshotCallback | None = None,
) -> TrainingResult:
    """Run *algorithm* for config.episodes episodes and collect statistics.

    Args:
        algorithm:   Episode algorithm (Monte Carlo, SARSA, Q-learning, ...).
        config:      Run configuration; defaults to TrainingConfig().
        q_table:     Table to train; a new one with config.default_value is
                     created if omitted.
        on_snapshot: Called with each TrainingSnapshot as it is produced.

    Returns:
        TrainingResult holding the trained table and all snapshots.
    """
    config = config or TrainingConfig()
    if q_table is None:
        q_table = QTable(config.default_value)

    result = TrainingResult(q_table=q_table)
    wins = losses = draws = 0
    total_wins = total_losses = total_draws = 0
    avg_error = 0.0
    start = time.perf_counter()

    def _emit(episode: int) -> None:
        snapshot = TrainingSnapshot(episode, wins, losses, draws, avg_error)
        result.snapshots.append(snapshot)
        if on_snapshot is not None:
            on_snapshot(snapshot)

    for i in range(config.episodes):
        reward, error = algorithm(q_table, i)
        if reward > 0:
            wins += 1
            total_wins += 1
        elif reward < 0:
            losses += 1
            total_losses += 1
        else:
            draws += 1
            total_draws += 1

        avg_error += (error - avg_error) / (i + 1)

        if (i + 1) % config.report_every == 0:
            _emit(i + 1)
            wins = losses = draws = 0

    if config.episodes % config.report_every:
        _emit(config.episodes)

    result.n_episodes = config.episodes
    result.n_wins = total_wins
    result.n_losses = total_losses
    result.n_draws = total_draws
    result.mean_error = avg_error
    result.elapsed_seconds = time.perf_counter() - start
    return result
