# gstrong/ledger.py
import logging
from typing import Any, Dict, Optional

from .notifications import level_up
from .stats_core import COUNTERS, compute_level
from .stats_store import SqlStatsStore, StatsError, StatsStore

logger = logging.getLogger(__name__)


def _store(store: Optional[StatsStore]) -> StatsStore:
    return store if store is not None else SqlStatsStore()


def award_points(user_id, amount: int, store: Optional[StatsStore] = None) -> Optional[Dict[str, Any]]:
    """
    Add `amount` to the user's points and xp and resync level.

    Returns the new stats snapshot, or None if the store failed (the failure
    is logged and nothing is written). Crossing a level boundary records a
    level-up notification.
    """
    amount = int(amount)
    if amount <= 0:
        raise ValueError(f"amount must be positive, got {amount}")

    try:
        stats = _store(store).increment(user_id, {"points": amount, "xp": amount})
    except StatsError as e:
        logger.error("Failed to award %s points to user %s: %s", amount, user_id, e)
        return None

    logger.info(
        "Awarded %s points to user %s (points=%s xp=%s level=%s)",
        amount, user_id, stats["points"], stats["xp"], stats["level"],
    )
    if stats["level"] > compute_level(max(stats["xp"] - amount, 0)):
        level_up(user_id, stats["level"])
    return stats


def increment_counter(user_id, counter_name: str, store: Optional[StatsStore] = None) -> Optional[Dict[str, Any]]:
    if counter_name not in COUNTERS:
        raise ValueError(f"unknown counter {counter_name!r}")

    try:
        stats = _store(store).increment(user_id, {counter_name: 1})
    except StatsError as e:
        logger.error("Failed to increment %s for user %s: %s", counter_name, user_id, e)
        return None

    return stats


def increment_workouts_completed(user_id, store: Optional[StatsStore] = None):
    return increment_counter(user_id, "workouts_completed", store)


def increment_bingo_squares(user_id, store: Optional[StatsStore] = None):
    return increment_counter(user_id, "bingo_squares_completed", store)


def get_user_stats(user_id, store: Optional[StatsStore] = None) -> Optional[Dict[str, Any]]:
    try:
        return _store(store).get(user_id)
    except StatsError as e:
        logger.error("Failed to get user stats for %s: %s", user_id, e)
        return None
