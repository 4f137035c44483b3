# gstrong/bingo_core.py
from datetime import date, datetime, timedelta
from typing import Iterable, List, NamedTuple, Optional, Set

GRID_SIZE = 5
CELL_COUNT = GRID_SIZE * GRID_SIZE

FREE_TASK = "FREE"

# Weekly card, row-major. Cell index = row * 5 + col.
BINGO_TASKS = [
    ["10 Push-ups", "20 Squats", "30s Plank", "15 Lunges", "10 Burpees"],
    ["20 Crunches", "15 Jump Jacks", "Stretch 5min", "10 Pull-ups", "30s Wall Sit"],
    [FREE_TASK, "20 High Knees", "15 Dips", "10 Leg Raises", "25 Mountain Climbers"],
    ["15 Bicep Curls", "20 Shoulder Press", "30s Side Plank", "10 Deadlifts", "15 Rows"],
    ["20 Tricep Extensions", "10 Box Jumps", "15 Russian Twists", "20 Calf Raises", "30s Hollow Hold"],
]

CELL_TASKS = tuple(task for row in BINGO_TASKS for task in row)
FREE_CELL = CELL_TASKS.index(FREE_TASK)


def _build_lines():
    rows = [tuple(r * GRID_SIZE + c for c in range(GRID_SIZE)) for r in range(GRID_SIZE)]
    cols = [tuple(r * GRID_SIZE + c for r in range(GRID_SIZE)) for c in range(GRID_SIZE)]
    diag = tuple(i * GRID_SIZE + i for i in range(GRID_SIZE))
    anti = tuple(i * GRID_SIZE + (GRID_SIZE - 1 - i) for i in range(GRID_SIZE))
    return tuple(rows + cols + [diag, anti])


# 0-4 rows, 5-9 columns, 10 main diagonal, 11 anti-diagonal
WINNING_LINES = _build_lines()


def week_start(today: Optional[date] = None) -> date:
    """Cards run Monday to Sunday; a card is keyed by its Monday."""
    today = today or datetime.utcnow().date()
    return today - timedelta(days=today.weekday())


def check_lines(completed_cells: Iterable[int], already_completed_lines: Iterable[int]) -> Set[int]:
    """
    Returns the line indices that are fully marked in `completed_cells` and
    not yet in `already_completed_lines`. Pure, no side effects.
    """
    done = set(completed_cells)
    credited = set(already_completed_lines)
    return {
        idx
        for idx, line in enumerate(WINNING_LINES)
        if idx not in credited and all(cell in done for cell in line)
    }


class ToggleResult(NamedTuple):
    cell: int
    changed: bool
    completed: bool
    new_lines: List[int]
    full_card: bool


class BingoBoard:
    """
    Card state for one user/week. The free cell is always complete and a
    credited line stays credited even if one of its cells is unmarked later.
    """

    def __init__(self, completed_cells=None, completed_lines=None, full_card_awarded=False):
        self.completed_cells = set(completed_cells or ())
        self.completed_cells.add(FREE_CELL)
        self.completed_lines = set(completed_lines or ())
        self.full_card_awarded = bool(full_card_awarded)

    @property
    def completed_count(self) -> int:
        return len(self.completed_cells)

    @property
    def progress_percent(self) -> int:
        return round(self.completed_count * 100 / CELL_COUNT)

    def is_complete(self, index: int) -> bool:
        return index in self.completed_cells

    def toggle(self, index: int) -> ToggleResult:
        index = int(index)
        if index < 0 or index >= CELL_COUNT:
            raise IndexError(f"cell index {index} outside 0..{CELL_COUNT - 1}")

        if index == FREE_CELL:
            return ToggleResult(index, False, True, [], False)

        if index in self.completed_cells:
            self.completed_cells.discard(index)
            return ToggleResult(index, True, False, [], False)

        self.completed_cells.add(index)
        new_lines = check_lines(self.completed_cells, self.completed_lines)
        self.completed_lines |= new_lines

        full_card = False
        if len(self.completed_cells) == CELL_COUNT and not self.full_card_awarded:
            self.full_card_awarded = True
            full_card = True

        return ToggleResult(index, True, True, sorted(new_lines), full_card)

    def to_dict(self):
        return {
            "cells": [
                {
                    "index": i,
                    "task": task,
                    "completed": i in self.completed_cells,
                    "is_free": i == FREE_CELL,
                }
                for i, task in enumerate(CELL_TASKS)
            ],
            "completed_count": self.completed_count,
            "total_cells": CELL_COUNT,
            "progress_percent": self.progress_percent,
            "completed_lines": sorted(self.completed_lines),
            "full_card_awarded": self.full_card_awarded,
        }
