"""Search benchmarks: leaf counts and timed runs of the black engine on fixed positions."""

from __future__ import annotations

import argparse
import csv
import sys
import time
from pathlib import Path
from typing import Optional, TextIO

from szachy.engine import Game

POSITIONS = {
    "Starting": "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1",
    "Sicilian": "rn2kb1r/pp3ppp/2p1pn2/q3Nb2/2BP2P1/2N5/PPP2P1P/R1BQK2R b KQkq - 0 8",
    "Middlegame": "1r3rk1/1pp2ppp/p7/2PPQ3/2n1P3/6P1/5PBP/3R2K1 b - - 0 26",
    "Endgame": "b4r2/p3R1PP/1p5k/2p4P/1P1p2n1/8/P7/6K1 b - - 0 48",
}

DEFAULT_LEAF_DEPTHS = (1, 3, 5, 7)
RESULTS_HEADER = ("Position", "Depth", "Run", "ExecutionTime_ms")


def _stream(out: Optional[TextIO]) -> TextIO:
    return sys.stdout if out is None else out


def _game_from_fen(fen: str) -> Game:
    game = Game()
    game.load_fen(fen)
    fields = fen.split()
    game.white_turn = len(fields) > 1 and fields[1] == "w"
    return game


def count_leaves(depth: int, fen: str, out: Optional[TextIO] = None) -> int:
    """Search the position for black at the given depth, play the move and report the leaf count."""
    out = _stream(out)
    game = _game_from_fen(fen)
    print(f"--- Liście na głębokości {depth} ---", file=out)
    game.leaves = 0
    move = game.best_move(depth)
    game.apply_ai_move(move)
    print(f"Głębokość: {depth} | ilość liści: {game.leaves}", file=out)
    print("---------------------------------", file=out)
    return game.leaves


def run_benchmark(
    depth: int,
    runs: int,
    directory: str | Path = ".",
    out: Optional[TextIO] = None,
) -> dict[str, float]:
    """Time the engine on each benchmark position and write per-run and average CSV files.

    Returns the average time in milliseconds for each position.
    """
    if runs < 1:
        raise ValueError("number of runs must be at least 1")
    out = _stream(out)
    directory = Path(directory)
    results_path = directory / f"szachy_test_depth_{depth}.csv"
    averages_path = directory / f"szachy_avg_depth_{depth}.csv"
    averages: dict[str, float] = {}

    with open(results_path, "w", newline="", encoding="utf-8") as results_file, open(
        averages_path, "w", newline="", encoding="utf-8"
    ) as averages_file:
        results = csv.writer(results_file, lineterminator="\n")
        averaged = csv.writer(averages_file, lineterminator="\n")
        results.writerow(RESULTS_HEADER)
        for name in sorted(POSITIONS):
            fen = POSITIONS[name]
            print(f"\n--- Testing Position: {name} ---", file=out)
            print(f"  Testing Depth: {depth} (x{runs} runs)... ", end="", file=out, flush=True)
            total_ms = 0
            for run in range(1, runs + 1):
                game = _game_from_fen(fen)
                started = time.perf_counter()
                move = game.best_move(depth)
                game.apply_ai_move(move)
                duration_ms = int((time.perf_counter() - started) * 1000)
                total_ms += duration_ms
                results.writerow(
                    (
                        name,
                        depth,
                        run,
                        duration_ms,
                        move.piece.figure,
                        move.start[0],
                        move.start[1],
                        move.end[0],
                        move.end[1],
                        move.value,
                    )
                )
                print(f"Run {run}: {duration_ms} ms", file=out)
            average = total_ms / runs
            averages[name] = average
            print(f"Done. Average Time: {average:g} ms", file=out)
            averaged.writerow((name, depth, f"{average:g}"))

    print("\nBenchmark complete. Results have been saved", file=out)
    print("Press Enter to continue...", file=out)
    return averages


def main(argv: Optional[list[str]] = None) -> int:
    """Count search leaves on the benchmark positions, or time the engine with --bench."""
    parser = argparse.ArgumentParser(prog="szachy-bench", description=main.__doc__)
    parser.add_argument(
        "--depths",
        type=int,
        nargs="+",
        default=list(DEFAULT_LEAF_DEPTHS),
        help="search depths for leaf counting",
    )
    parser.add_argument("--bench", type=int, metavar="DEPTH", help="run the timed benchmark")
    parser.add_argument("--runs", type=int, default=1, help="runs per position")
    parser.add_argument("--output-dir", default=".", help="directory for the CSV files")
    args = parser.parse_args(argv)

    if any(depth < 1 for depth in args.depths):
        parser.error("depths must be at least 1")

    if args.bench is not None:
        if args.bench < 1:
            parser.error("benchmark depth must be at least 1")
        if args.runs < 1:
            parser.error("runs must be at least 1")
        run_benchmark(args.bench, args.runs, args.output_dir)
        return 0

    print("TESTY")
    for name in sorted(POSITIONS):
        print(f"Testing position: {name}")
        for depth in args.depths:
            count_leaves(depth, POSITIONS[name])
    return 0


if __name__ == "__main__":
    sys.exit(main())