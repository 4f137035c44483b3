# gstrong/stats_core.py
from typing import Dict

XP_PER_LEVEL = 600

# Points paid out by the app for each action.
POINTS = {
    "BINGO_SQUARE": 10,
    "BINGO_LINE": 50,
    "BINGO_FULL_CARD": 200,
    "SAVE_WORKOUT": 20,
}

COUNTERS = ("workouts_completed", "bingo_squares_completed")


def _check_xp(xp: int) -> int:
    xp = int(xp)
    if xp < 0:
        raise ValueError(f"xp must be non-negative, got {xp}")
    return xp


def compute_level(xp: int) -> int:
    """Level 1 covers 0-599 xp, level 2 covers 600-1199, and so on."""
    return _check_xp(xp) // XP_PER_LEVEL + 1


def xp_for_next_level(xp: int) -> int:
    xp = _check_xp(xp)
    return compute_level(xp) * XP_PER_LEVEL - xp


def xp_progress_in_level(xp: int) -> int:
    return _check_xp(xp) % XP_PER_LEVEL


def level_summary(xp: int) -> Dict[str, int]:
    """
    Everything the client needs to draw the level bar:
      {
        "level": 3,
        "xp": 1300,
        "xp_in_level": 100,
        "xp_to_next_level": 500,
        "xp_per_level": 600,
        "progress_percent": 17
      }
    """
    xp = _check_xp(xp)
    in_level = xp_progress_in_level(xp)
    return {
        "level": compute_level(xp),
        "xp": xp,
        "xp_in_level": in_level,
        "xp_to_next_level": xp_for_next_level(xp),
        "xp_per_level": XP_PER_LEVEL,
        "progress_percent": round(in_level * 100 / XP_PER_LEVEL),
    }
