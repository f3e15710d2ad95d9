"""Blackjack RL sandbox — command-line entry point.

Two sub-commands:
  train — run Monte Carlo, SARSA, Q-learning or card-counting Monte Carlo,
          printing a CSV line per reporting interval, then the learned
          values, the strategy tables and a summary
  play  — deal rounds on the console and read h/s from the keyboard

Run:
    python app.py train --algorithm sarsa --episodes 200000 --seed 7
    python app.py play
"""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

import numpy as np

from src.analysis.strategy_report import (
    print_q_values,
    print_snapshot,
    print_strategy,
    print_training_summary,
)
from src.engine.deck import Deck
from src.engine.game_state import RoundState
from src.learning.counting import CountingMonteCarlo
from src.learning.monte_carlo import make_monte_carlo
from src.learning.policies import (
    SCHEDULES,
    EpsilonSchedule,
    make_epsilon_greedy_policy,
    staged_decay,
)
from src.learning.sarsa import make_q_learning, make_sarsa
from src.learning.trainer import EpisodeAlgorithm, TrainingConfig, TrainingResult, train

ALGORITHMS: tuple[str, ...] = ('monte-carlo', 'sarsa', 'q-learning', 'counting')

_PROMPT = "Hit or stand? [h/s] "


# ─── Builders ─────────────────────────────────────────────────────────────────


def default_switch_at(episodes: int) -> int:
    """Episode where the staged schedule turns to inverse decay: a sixth of the run."""
    return max(1, episodes // 6)


def build_schedule(
    name: str,
    epsilon: float = 0.1,
    decay_scale: float = 10_000.0,
    switch_at: int = 1_000_000,
) -> EpsilonSchedule:
    """Return the epsilon schedule called *name* (see policies.SCHEDULES)."""
    try:
        factory = SCHEDULES[name]
    except KeyError:
        raise ValueError(f"Unknown schedule: {name}") from None
    return factory(epsilon, decay_scale, switch_at)


def evaluation_hands(text: str) -> int:
    """argparse type for --evaluate: a hand count of at least 2."""
    try:
        n_hands = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if n_hands < 2:
        raise argparse.ArgumentTypeError(f"need at least 2 hands, got {n_hands}")
    return n_hands


def build_algorithm(
    name: str,
    schedule: EpsilonSchedule | None = None,
    rng: np.random.Generator | None = None,
) -> EpisodeAlgorithm:
    """Return the episode algorithm called *name*.

    Every algorithm explores epsilon-greedily with *schedule*; when omitted,
    the counting variant uses staged decay and the others exponential decay.
    """
    rng = rng if rng is not None else np.random.default_rng()
    if name == 'counting':
        policy = make_epsilon_greedy_policy(schedule or staged_decay(), rng)
        return CountingMonteCarlo(policy, rng)

    policy = make_epsilon_greedy_policy(schedule, rng)
    if name == 'monte-carlo':
        return make_monte_carlo(policy, rng)
    if name == 'sarsa':
        return make_sarsa(policy, rng)
    if name == 'q-learning':
        return make_q_learning(policy, rng)
    raise ValueError(f"Unknown algorithm: {name}")


# ─── Interactive play ─────────────────────────────────────────────────────────


def read_action(input_stream: TextIO, output: TextIO) -> str:
    """Prompt until the player types h or s (any case, surrounding blanks ok).

    Raises:
        EOFError: If the input stream ends before a valid command.
    """
    while True:
        print(_PROMPT, end='', file=output, flush=True)
        line = input_stream.readline()
        if not line:
            raise EOFError("Input ended before a command was read.")
        command = line.strip().lower()
        if command in ('h', 's'):
            return command
        print(f"Unrecognised command {line.strip()!r}; type h or s.", file=output)


def play_interactive(deck: Deck, input_stream: TextIO, output: TextIO) -> RoundState:
    """Play one round on the console and return the finished RoundState."""
    round_state = RoundState.start(deck)
    while not round_state.finished:
        print(round_state, file=output)
        if read_action(input_stream, output) == 'h':
            round_state = round_state.hit(deck)
        else:
            round_state = round_state.stand(deck)

    print(round_state, file=output)
    messages = {1: "You win!", -1: "You lose.", 0: "Push."}
    print(messages[round_state.reward], file=output)
    return round_state


# ─── Sub-commands ─────────────────────────────────────────────────────────────


def cmd_train(args: argparse.Namespace) -> TrainingResult:
    rng = np.random.default_rng(args.seed)
    name = args.schedule or ('staged' if args.algorithm == 'counting' else 'exponential')
    switch_at = args.switch_at if args.switch_at is not None else default_switch_at(args.episodes)
    schedule = build_schedule(name, args.epsilon, args.decay_scale, switch_at)
    algorithm = build_algorithm(args.algorithm, schedule, rng)
    config = TrainingConfig(episodes=args.episodes, report_every=args.report_every)

    result = train(algorithm, config, on_snapshot=None if args.quiet else print_snapshot)

    if not args.quiet:
        print_q_values(result.q_values())
    if args.algorithm == 'counting':
        print_strategy(result.q_table, count_bucket=0)
        print(f"Money: {algorithm.money:+,}  Shuffles: {algorithm.shuffles:,}")
    else:
        print_strategy(result.q_table)
    print_training_summary(result)

    if args.heatmap:
        if args.algorithm == 'counting':
            print("Heat maps are drawn for count-free tables only; skipped.")
        else:
            import matplotlib

            matplotlib.use("Agg")
            from src.analysis.heat_maps import plot_learned_strategy

            plot_learned_strategy(result.q_table, show=False, save_path=args.heatmap)
            print(f"Heat map saved to {args.heatmap}")

    if args.evaluate:
        if args.algorithm == 'counting':
            print("Evaluation uses count-free states; skipped.")
        else:
            from src.analysis.simulator import compare_to_baseline

            comparison = compare_to_baseline(result.q_table, args.evaluate, seed=args.seed)
            print(f"Learned:  {comparison['learned']}")
            print(f"Baseline: {comparison['baseline']}")

    return result


def cmd_play(args: argparse.Namespace) -> None:
    rng = np.random.default_rng(args.seed)
    try:
        for _ in range(args.rounds):
            play_interactive(Deck.shuffled(rng), sys.stdin, sys.stdout)
            print()
    except EOFError:
        print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tabular reinforcement learning for blackjack")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_train = sub.add_parser("train", help="Train a Q-table")
    p_train.add_argument("--algorithm", choices=ALGORITHMS, default="monte-carlo")
    p_train.add_argument("--episodes", type=int, default=TrainingConfig.episodes)
    p_train.add_argument("--report-every", type=int, default=TrainingConfig.report_every,
                         help="Episodes between progress lines")
    p_train.add_argument("--schedule", choices=sorted(SCHEDULES), default=None,
                         help="Epsilon schedule (default depends on the algorithm)")
    p_train.add_argument("--epsilon", type=float, default=0.1,
                         help="Exploration rate for the constant and staged schedules")
    p_train.add_argument("--decay-scale", type=float, default=10_000.0,
                         help="Scale of the exponential schedule")
    p_train.add_argument("--switch-at", type=int, default=None,
                         help="Episode where the staged schedule switches to inverse decay "
                              "(default: a sixth of --episodes)")
    p_train.add_argument("--seed", type=int, default=None)
    p_train.add_argument("--heatmap", type=str, default=None,
                         help="Save the learned strategy heat map to this path")
    p_train.add_argument("--evaluate", type=evaluation_hands, default=0,
                         help="Evaluate the learned table over N hands against stand-on-17")
    p_train.add_argument("--quiet", action="store_true",
                         help="Suppress progress lines and the Q-value dump")
    p_train.set_defaults(func=cmd_train)

    p_play = sub.add_parser("play", help="Play blackjack on the console")
    p_play.add_argument("--rounds", type=int, default=1)
    p_play.add_argument("--seed", type=int, default=None)
    p_play.set_defaults(func=cmd_play)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    args.func(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
