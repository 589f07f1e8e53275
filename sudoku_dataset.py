"""
Sudoku dataset generation utilities.

Generates batches of random 9x9 puzzles with a fixed amount of givens,
optionally solves them, and saves them under the `sudoku_dataset` directory.
"""

from __future__ import annotations

import argparse
import json
import os
import random
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from loguru import logger

from sudoku_board import SIZE, Level, SudokuError, new_from_puzzle
from sudoku_generator import new_from_level
from sudoku_solver import (
    LOG_LEVELS,
    STRATEGIES,
    ForwardScan,
    get_strategy,
    solve_with_strategy,
)

Entry = Dict[str, Union[str, int]]


@dataclass(frozen=True)
class GeneratorConfig:
    level: int = int(Level.Medium)
    count: int = 100
    seed: Optional[int] = None


def generate_dataset(
    config: GeneratorConfig,
    *,
    solve: bool = False,
    strategy: str = ForwardScan.name,
) -> Tuple[List[Entry], Dict[str, object]]:
    """
    Generate ``config.count`` puzzles from one seeded random source.

    With ``solve`` every puzzle is also solved; unsolvable puzzles keep an
    empty solution. Note that the search has no attempt cap.
    """
    rng = random.Random(config.seed)
    entries: List[Entry] = []
    unsolvable = 0
    start_time = time.time()

    progress_step = max(1, config.count // 20)

    for index in range(config.count):
        board = new_from_level(config.level, rng)
        entry: Entry = {"puzzle": board.puzzle, "level": board.level.name}

        if solve:
            solved = solve_with_strategy(board, get_strategy(strategy))
            if not solved:
                unsolvable += 1
                logger.warning("Puzzle {} is unsolvable: {}", index, board.puzzle)
            entry["solution"] = board.solution
            entry["backtracking"] = board.backtracking

        entries.append(entry)

        if (index + 1) % progress_step == 0 or index == config.count - 1:
            logger.info("[L{}] Generated {}/{} puzzles.", config.level, index + 1, config.count)

    elapsed = time.time() - start_time
    metadata: Dict[str, object] = {
        "givens": config.level,
        "seed": config.seed,
        "elapsed_seconds": round(elapsed, 2),
    }
    if solve:
        metadata["strategy"] = strategy
        metadata["unsolvable"] = unsolvable
    logger.info("[L{}] Dataset ready in {:.1f}s.", config.level, elapsed)

    return entries, metadata


def save_dataset(
    entries: List[Entry],
    output_dir: Path,
    level: int,
    metadata: Optional[Dict[str, object]] = None,
) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    dataset_path = output_dir / f"sudoku_{SIZE}x{SIZE}_L{level}.json"

    payload = {
        "size": SIZE,
        "count": len(entries),
        "generated_at": time.strftime("%Y-%m-%d %H:%M:%S"),
        "metadata": metadata or {},
        "puzzles": entries,
    }
    with dataset_path.open("w", encoding="utf-8") as fp:
        json.dump(payload, fp, ensure_ascii=False, indent=2)
        fp.write("\n")

    return dataset_path


def load_dataset(dataset_path: Path) -> List[Entry]:
    """Read a dataset file and validate every puzzle string in it."""
    dataset_path = dataset_path.resolve()
    if not dataset_path.exists():
        raise FileNotFoundError(f"Dataset file not found: {dataset_path}")

    with dataset_path.open("r", encoding="utf-8") as fp:
        payload = json.load(fp)

    puzzles = payload.get("puzzles")
    if not isinstance(puzzles, list):
        raise ValueError("Dataset payload missing 'puzzles' list.")

    for index, entry in enumerate(puzzles):
        puzzle = entry.get("puzzle") if isinstance(entry, dict) else None
        if not isinstance(puzzle, str):
            raise ValueError(f"Entry {index} missing 'puzzle' string.")
        try:
            new_from_puzzle(puzzle)
        except SudokuError as exc:
            raise ValueError(f"Entry {index} holds an invalid puzzle: {exc}") from exc

    return puzzles


def find_duplicates(entries: List[Entry]) -> List[Tuple[int, int]]:
    seen: Dict[str, int] = {}
    duplicates: List[Tuple[int, int]] = []

    for index, entry in enumerate(entries):
        key = str(entry["puzzle"])
        if key in seen:
            duplicates.append((seen[key], index))
        else:
            seen[key] = index

    return duplicates


def check_dataset_duplicates(dataset_path: Path) -> List[Tuple[int, int]]:
    duplicates = find_duplicates(load_dataset(dataset_path))

    if duplicates:
        print(f"✗ Found {len(duplicates)} duplicate puzzle(s) in {dataset_path}:")
        for first_index, dup_index in duplicates:
            print(f"  - Duplicate puzzle at indices {first_index} and {dup_index}")
    else:
        print(f"✓ No duplicate puzzles found in {dataset_path}.")

    return duplicates


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate random 9x9 Sudoku datasets."
    )
    parser.add_argument(
        "--count",
        type=int,
        default=100,
        help="Number of puzzles to generate (default: 100).",
    )
    parser.add_argument(
        "--level",
        type=int,
        default=int(Level.Medium),
        help="Amount of givens per puzzle, 17-80 (default: 30).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=2024,
        help="Random seed for puzzle generation.",
    )
    parser.add_argument(
        "--solve",
        action="store_true",
        help="Solve every generated puzzle and store its solution.",
    )
    parser.add_argument(
        "--strategy",
        choices=list(STRATEGIES.keys()),
        default=ForwardScan.name,
        help="Traversal strategy used with --solve (default: forward).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(__file__).resolve().parent / "sudoku_dataset",
        help="Directory to store generated datasets.",
    )
    parser.add_argument(
        "--check-file",
        type=Path,
        default=None,
        help="Check the specified dataset file for duplicate puzzles.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.getenv("SUDOKU_LOG_LEVEL", "INFO").upper(),
        help="Loguru level for progress output on stderr (default: INFO).",
    )
    args = parser.parse_args(argv)
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level: {args.log_level}")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level)

    if args.check_file:
        return 1 if check_dataset_duplicates(args.check_file) else 0

    if args.count <= 0:
        logger.info("Skipping generation (count <= 0).")
        return 0

    config = GeneratorConfig(level=args.level, count=args.count, seed=args.seed)
    logger.info(
        "Starting generation of {} puzzles (givens={}, seed={}).",
        config.count,
        config.level,
        config.seed,
    )
    try:
        entries, metadata = generate_dataset(config, solve=args.solve, strategy=args.strategy)
    except SudokuError as exc:
        logger.error("Cannot generate dataset: {}", exc)
        return 2

    metadata.update({"requested_count": config.count, "actual_count": len(entries)})
    path = save_dataset(entries, args.output_dir.resolve(), config.level, metadata=metadata)
    print(f"Dataset saved to {path}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
