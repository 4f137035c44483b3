from datetime import date

import pytest

from gstrong import bingo_core
from gstrong.bingo_core import (
    CELL_COUNT,
    CELL_TASKS,
    FREE_CELL,
    WINNING_LINES,
    BingoBoard,
    check_lines,
    week_start,
)


def test_line_table():
    assert len(WINNING_LINES) == 12
    assert WINNING_LINES[0] == (0, 1, 2, 3, 4)
    assert WINNING_LINES[5] == (0, 5, 10, 15, 20)
    assert WINNING_LINES[10] == (0, 6, 12, 18, 24)
    assert WINNING_LINES[11] == (4, 8, 12, 16, 20)
    assert all(len(line) == 5 for line in WINNING_LINES)


def test_free_cell_is_row_two_first_column():
    assert FREE_CELL == 10
    assert CELL_TASKS[FREE_CELL] == 'FREE'
    assert len(CELL_TASKS) == CELL_COUNT


def test_single_row_completes_only_that_line():
    assert check_lines({0, 1, 2, 3, 4}, set()) == {0}


def test_credited_line_is_not_returned_again():
    assert check_lines({0, 1, 2, 3, 4}, {0}) == set()


def test_partial_line_is_not_complete():
    assert check_lines({0, 1, 2, 3}, set()) == set()


def test_corner_closes_row_and_diagonal_together():
    board = BingoBoard(completed_cells={1, 2, 3, 4, 6, 12, 18, 24})
    result = board.toggle(0)
    assert result.completed
    assert result.new_lines == [0, 10]
    assert board.completed_lines == {0, 10}


def test_free_cell_toggle_is_noop(monkeypatch):
    calls = []
    monkeypatch.setattr(bingo_core, 'check_lines', lambda *a: calls.append(a) or set())

    board = BingoBoard()
    before = set(board.completed_cells)
    result = board.toggle(FREE_CELL)

    assert not result.changed
    assert board.completed_cells == before
    assert FREE_CELL in board.completed_cells
    assert calls == []


def test_free_cell_always_present():
    board = BingoBoard(completed_cells=[])
    assert board.is_complete(FREE_CELL)
    assert board.completed_count == 1


def test_uncomplete_does_not_check_lines_or_retract(monkeypatch):
    board = BingoBoard(completed_cells={0, 1, 2, 3})
    assert board.toggle(4).new_lines == [0]

    calls = []
    monkeypatch.setattr(bingo_core, 'check_lines', lambda *a: calls.append(a) or set())
    result = board.toggle(4)

    assert result.changed and not result.completed
    assert 4 not in board.completed_cells
    assert board.completed_lines == {0}
    assert calls == []


def test_recompleting_a_credited_line_pays_nothing_new():
    board = BingoBoard(completed_cells={0, 1, 2, 3})
    board.toggle(4)
    board.toggle(4)
    assert board.toggle(4).new_lines == []


def test_full_card_flag_fires_once():
    credited = {i for i, line in enumerate(WINNING_LINES) if 24 not in line}
    board = BingoBoard(completed_cells=set(range(CELL_COUNT)) - {24}, completed_lines=credited)
    result = board.toggle(24)
    assert result.full_card
    assert set(result.new_lines) == {4, 9, 10}

    board.toggle(24)
    assert not board.toggle(24).full_card


def test_out_of_range_index():
    board = BingoBoard()
    with pytest.raises(IndexError):
        board.toggle(25)
    with pytest.raises(IndexError):
        board.toggle(-1)


def test_to_dict_shape():
    data = BingoBoard(completed_cells={3}).to_dict()
    assert len(data['cells']) == 25
    assert data['completed_count'] == 2
    assert data['progress_percent'] == 8
    assert data['cells'][10]['is_free'] is True
    assert data['cells'][3]['completed'] is True


def test_week_start_is_monday():
    assert week_start(date(2026, 10, 19)) == date(2026, 10, 19)
    assert week_start(date(2026, 10, 25)) == date(2026, 10, 19)
