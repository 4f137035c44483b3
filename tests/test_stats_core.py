import pytest

from gstrong.stats_core import (
    XP_PER_LEVEL,
    compute_level,
    level_summary,
    xp_for_next_level,
    xp_progress_in_level,
)


def test_progress_and_remaining_always_sum_to_one_level():
    for xp in range(0, 5 * XP_PER_LEVEL + 1):
        assert xp_progress_in_level(xp) + xp_for_next_level(xp) == XP_PER_LEVEL


def test_helper_ranges():
    for xp in (0, 1, 599, 600, 601, 1199, 1200, 123456):
        assert 1 <= xp_for_next_level(xp) <= 600
        assert 0 <= xp_progress_in_level(xp) <= 599


def test_level_boundaries():
    assert compute_level(0) == 1
    assert compute_level(599) == 1
    assert compute_level(600) == 2
    assert compute_level(1199) == 2
    assert compute_level(1200) == 3


def test_exact_boundary_needs_full_level():
    assert xp_for_next_level(600) == 600
    assert xp_progress_in_level(600) == 0


def test_level_summary():
    summary = level_summary(1300)
    assert summary == {
        'level': 3,
        'xp': 1300,
        'xp_in_level': 100,
        'xp_to_next_level': 500,
        'xp_per_level': 600,
        'progress_percent': 17,
    }


def test_negative_xp_rejected():
    with pytest.raises(ValueError):
        compute_level(-1)
    with pytest.raises(ValueError):
        xp_for_next_level(-5)
