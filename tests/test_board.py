import pytest

from sudoku_board import (
    Board,
    InvalidDigitError,
    InvalidPuzzleLengthError,
    Level,
    SudokuError,
    board_to_text,
    find_conflict,
    level_for_givens,
    new_from_puzzle,
    render,
)

from conftest import EASY_PUZZLE, HARD_PUZZLE


def test_new_from_puzzle_parses_cells():
    board = new_from_puzzle(EASY_PUZZLE)

    assert len(board.cells) == 81
    assert board.puzzle == EASY_PUZZLE
    assert board.to_digits() == EASY_PUZZLE
    assert board.cell(1, 1).digit == 5 and board.cell(1, 1).given
    assert board.cell(1, 3).digit == 0 and not board.cell(1, 3).given
    assert board.count_givens() == 30
    assert board.level is Level.Medium
    assert not board.solved
    assert board.solution == ""


def test_cells_cover_every_coordinate_once():
    board = Board()
    coordinates = [(cell.row, cell.column) for cell in board.cells]

    assert coordinates == [(r, c) for r in range(1, 10) for c in range(1, 10)]
    assert [cell.index for cell in board.cells] == list(range(81))


@pytest.mark.parametrize("puzzle", ["", "0" * 20, "0" * 80, "0" * 82])
def test_new_from_puzzle_rejects_bad_length(puzzle):
    with pytest.raises(InvalidPuzzleLengthError):
        new_from_puzzle(puzzle)


def test_new_from_puzzle_rejects_non_digit():
    puzzle = "BAD_" + HARD_PUZZLE[4:]
    with pytest.raises(InvalidDigitError):
        new_from_puzzle(puzzle)


def test_malformed_string_fails_construction():
    with pytest.raises(SudokuError):
        new_from_puzzle("this is not a sudoku")


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        new_from_puzzle("x" * 81)


@pytest.mark.parametrize(
    "count, level",
    [
        (17, Level.Diabolic),
        (18, Level.Extreme),
        (20, Level.Expert),
        (24, Level.VeryHard),
        (28, Level.Hard),
        (30, Level.Medium),
        (32, Level.Easy),
        (36, Level.VeryEasy),
        (0, Level.Unknown),
        (21, Level.Unknown),
        (40, Level.Unknown),
        (81, Level.Unknown),
    ],
)
def test_level_for_givens(count, level):
    assert level_for_givens(count) is level


def test_hard_puzzle_level_is_unknown():
    assert new_from_puzzle(HARD_PUZZLE).level is Level.Unknown


def test_unit_queries():
    board = new_from_puzzle(EASY_PUZZLE)

    assert [c.digit for c in board.row_cells(1)] == [5, 3, 0, 0, 7, 0, 0, 0, 0]
    assert [c.digit for c in board.column_cells(1)] == [5, 6, 0, 8, 4, 7, 0, 0, 0]
    assert [c.digit for c in board.box_cells(5, 5)] == [0, 6, 0, 8, 0, 3, 0, 2, 0]
    assert board.box_cells(4, 6) == board.box_cells(6, 4)
    assert {(c.row, c.column) for c in board.box_cells(9, 7)} == {
        (r, c) for r in (7, 8, 9) for c in (7, 8, 9)
    }


def test_is_legal_checks_row_column_and_box():
    board = new_from_puzzle(EASY_PUZZLE)

    assert not board.is_legal(1, 4, 3)  # row
    assert not board.is_legal(1, 4, 8)  # column
    assert not board.is_legal(1, 4, 9)  # box
    assert [d for d in range(1, 10) if board.is_legal(1, 4, d)] == [2, 6]
    assert board.in_row(1, 7)
    assert board.in_column(1, 4)
    assert board.in_box(2, 2, 9)
    assert not board.in_box(2, 2, 4)


def test_is_legal_has_no_side_effects():
    board = new_from_puzzle(EASY_PUZZLE)

    def snapshot():
        return [
            board.is_legal(cell.row, cell.column, digit)
            for cell in board.cells
            for digit in range(1, 10)
        ]

    first = snapshot()
    cell = board.cell(1, 3)
    cell.digit = 4
    assert snapshot() != first
    cell.digit = 0

    assert snapshot() == first
    assert snapshot() == first
    assert board.to_digits() == EASY_PUZZLE


def test_find_conflict():
    assert find_conflict(new_from_puzzle(EASY_PUZZLE)) is None

    conflict = find_conflict(new_from_puzzle("55" + "0" * 79))
    assert conflict is not None
    assert (conflict.row, conflict.column) == (1, 1)


def test_board_to_text_layout():
    board = new_from_puzzle(EASY_PUZZLE)
    text = board_to_text(board)
    assert render(board) == text
    lines = text.splitlines()

    assert text.endswith("|\n-------------------------------\n\n")
    assert len(lines) == 14
    assert lines[0] == "-" * 31
    assert lines[1] == "| 5  3  . | .  7  . | .  .  . |"
    assert lines[4] == "-" * 31
    assert lines[5] == "| 8  .  . | .  6  . | .  .  3 |"
    assert lines[8] == "-" * 31
    assert lines[11] == "| .  .  . | .  8  . | .  7  9 |"
    assert lines[12] == "-" * 31
    assert lines[13] == ""
    assert all(len(line) == 31 for line in lines[:13])
