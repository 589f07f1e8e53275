import random

import pytest
from loguru import logger

from sudoku_board import SIZE

EASY_PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)

EASY_SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)

HARD_PUZZLE = "800000000003600000070090200050007000000045700000100030001000068008500010090000400"

SPARSE_PUZZLE = "000070065000050000001000000800000000007000050002000000000100002070800049000200070"

# r1c9 has no candidate left: 1-8 in its row, 9 in its column
DEAD_END_PUZZLE = "123456780" + "000000009" + "0" * 63


def units(digits):
    rows = [digits[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]
    cols = [digits[c::SIZE] for c in range(SIZE)]
    boxes = [
        "".join(
            digits[r * SIZE + c]
            for r in range(br, br + 3)
            for c in range(bc, bc + 3)
        )
        for br in range(0, SIZE, 3)
        for bc in range(0, SIZE, 3)
    ]
    return rows + cols + boxes


def assert_valid_solution(solution, puzzle):
    assert len(solution) == 81
    assert "0" not in solution
    for unit in units(solution):
        assert sorted(unit) == list("123456789")
    for given, digit in zip(puzzle, solution):
        if given != "0":
            assert given == digit


def assert_consistent(puzzle):
    assert len(puzzle) == 81
    assert puzzle.isdigit()
    for unit in units(puzzle):
        filled = [d for d in unit if d != "0"]
        assert len(filled) == len(set(filled))


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    # CLI entry points bind sinks to the captured streams
    logger.remove()


@pytest.fixture
def rng():
    return random.Random(42)
