# gstrong/achievements.py
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from . import db
from .bingo_core import week_start
from .ledger import award_points, get_user_stats
from .models.achievement import UserAchievement
from .models.bingo import BingoCard
from .models.workout import Workout
from .notifications import achievement_unlocked

logger = logging.getLogger(__name__)

CATEGORIES = ["Weekly", "Lifetime", "Special"]

CATEGORY_COLORS = {
    "Weekly": "#3b82f6",
    "Lifetime": "#a855f7",
    "Special": "#f59e0b",
}

# condition_type -> what `condition_value` is compared against.
#   workouts_completed / strength_workouts / total_points / achievements_unlocked: a count
#   bingo_full_card: squares marked on this week's card, out of 25
#   workout_before_hour / workout_after_hour: the hour a workout was completed
#   streak_days / shares / weekly_goal_weeks: not tracked yet, always locked
ACHIEVEMENTS: List[Dict[str, Any]] = [
    {
        "code": "early_bird",
        "icon": "📅",
        "title": "Early Bird",
        "desc": "Complete a workout before 8 AM",
        "category": "Special",
        "points": 50,
        "condition_type": "workout_before_hour",
        "condition_value": 8,
        "detail": "You woke up early and crushed a workout before 8 AM. Keep up the early morning grind!",
    },
    {
        "code": "streak_master",
        "icon": "🔥",
        "title": "Streak Master",
        "desc": "Maintain a 7-day workout streak",
        "category": "Weekly",
        "points": 100,
        "condition_type": "streak_days",
        "condition_value": 7,
        "detail": "Work out every day for 7 days in a row to unlock this achievement.",
    },
    {
        "code": "bingo_champion",
        "icon": "🎯",
        "title": "Bingo Champion",
        "desc": "Complete a full Bingo card",
        "category": "Weekly",
        "points": 150,
        "condition_type": "bingo_full_card",
        "condition_value": 25,
        "detail": "Complete all 25 tasks on a weekly bingo card to earn this badge.",
    },
    {
        "code": "muscle_machine",
        "icon": "💪",
        "title": "Muscle Machine",
        "desc": "Complete 50 strength workouts",
        "category": "Lifetime",
        "points": 200,
        "condition_type": "strength_workouts",
        "condition_value": 50,
        "detail": "Log 50 strength-based workouts to prove you are a Muscle Machine.",
    },
    {
        "code": "first_step",
        "icon": "⭐",
        "title": "First Step",
        "desc": "Complete your first workout",
        "category": "Special",
        "points": 20,
        "condition_type": "workouts_completed",
        "condition_value": 1,
        "detail": "Every journey begins with a single step. You completed your very first workout!",
    },
    {
        "code": "social_butterfly",
        "icon": "🦋",
        "title": "Social Butterfly",
        "desc": "Share your progress 10 times",
        "category": "Special",
        "points": 75,
        "condition_type": "shares",
        "condition_value": 10,
        "detail": "Share your fitness progress with friends and the community 10 times.",
    },
    {
        "code": "high_voltage",
        "icon": "⚡",
        "title": "High Voltage",
        "desc": "Earn 1000 total points",
        "category": "Lifetime",
        "points": 250,
        "condition_type": "total_points",
        "condition_value": 1000,
        "detail": "Accumulate 1000 total points across all your workouts and achievements.",
    },
    {
        "code": "perfect_week",
        "icon": "🏆",
        "title": "Perfect Week",
        "desc": "Reach your weekly goal 4 weeks in a row",
        "category": "Weekly",
        "points": 300,
        "condition_type": "weekly_goal_weeks",
        "condition_value": 4,
        "detail": "Hit your weekly workout goal four consecutive weeks in a row.",
    },
    {
        "code": "night_owl",
        "icon": "🦉",
        "title": "Night Owl",
        "desc": "Complete a workout after 9 PM",
        "category": "Special",
        "points": 50,
        "condition_type": "workout_after_hour",
        "condition_value": 21,
        "detail": "Burn the midnight oil and complete a workout after 9 PM.",
    },
    {
        "code": "fitness_legend",
        "icon": "👑",
        "title": "Fitness Legend",
        "desc": "Unlock 50 achievements",
        "category": "Lifetime",
        "points": 500,
        "condition_type": "achievements_unlocked",
        "condition_value": 50,
        "detail": "Become a true legend by unlocking 50 achievements across the app.",
    },
]

ACHIEVEMENTS_BY_CODE = {a["code"]: a for a in ACHIEVEMENTS}

_COUNT_CONDITIONS = {
    "workouts_completed": "workouts_completed",
    "total_points": "points",
    "strength_workouts": "strength_workouts",
    "bingo_full_card": "bingo_cells",
    "achievements_unlocked": "achievements_unlocked",
}


def _progress(ach: Dict[str, Any], ctx: Dict[str, Any]) -> int:
    ctype = ach["condition_type"]
    target = int(ach["condition_value"])

    if ctype in _COUNT_CONDITIONS:
        value = int(ctx.get(_COUNT_CONDITIONS[ctype]) or 0)
        return min(value, target)

    hour = ctx.get("workout_hour")
    if hour is None:
        return 0
    if ctype == "workout_before_hour":
        return 1 if hour < target else 0
    if ctype == "workout_after_hour":
        return 1 if hour >= target else 0

    # untracked condition
    return 0


def _target(ach: Dict[str, Any]) -> int:
    if ach["condition_type"] in _COUNT_CONDITIONS:
        return int(ach["condition_value"])
    return 1


def is_met(ach: Dict[str, Any], ctx: Dict[str, Any]) -> bool:
    return _progress(ach, ctx) >= _target(ach)


def describe(ach: Dict[str, Any], ctx: Dict[str, Any], unlocked_at: Optional[datetime] = None) -> Dict[str, Any]:
    data = {k: v for k, v in ach.items() if k not in ("condition_type", "condition_value")}
    data["id"] = ach["code"]
    data["unlocked"] = unlocked_at is not None
    data["unlocked_at"] = unlocked_at.isoformat() if unlocked_at else None
    data["progress"] = _target(ach) if unlocked_at else _progress(ach, ctx)
    data["total"] = _target(ach)
    return data


def unlocked_for(user_id) -> Dict[str, datetime]:
    rows = UserAchievement.query.filter_by(user_id=user_id).all()
    return {ua.code: ua.unlocked_at for ua in rows}


def user_facts(user_id) -> Dict[str, Any]:
    """Counts the conditions need that are not kept in user_stats."""
    card = BingoCard.query.filter_by(user_id=user_id, week_start=week_start()).first()
    strength_workouts = Workout.query.filter(
        Workout.user_id == user_id,
        Workout.type == "strength",
        Workout.completed_at.isnot(None),
    ).count()
    return {
        "bingo_cells": card.to_board().completed_count if card else 0,
        "strength_workouts": strength_workouts,
    }


def build_context(stats: Dict[str, Any], unlocked_count: int, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    ctx = dict(stats)
    ctx["achievements_unlocked"] = unlocked_count
    ctx.update(extra or {})
    return ctx


def check_and_unlock(user_id, extra: Optional[Dict[str, Any]] = None, store=None) -> List[Dict[str, Any]]:
    """
    Unlock every achievement the user now qualifies for and pay its points
    once. `extra` carries facts about the triggering event, e.g.
    {"workout_hour": 6}; it overrides what `user_facts` reads from the db.

    Unlocking pays points, which can qualify the user for more achievements,
    so this loops until nothing new unlocks.
    """
    stats = get_user_stats(user_id, store)
    if stats is None:
        return []

    facts = user_facts(user_id)
    facts.update(extra or {})

    unlocked = set(unlocked_for(user_id))
    newly: List[Dict[str, Any]] = []

    while True:
        ctx = build_context(stats, len(unlocked), facts)
        due = [a for a in ACHIEVEMENTS if a["code"] not in unlocked and is_met(a, ctx)]
        if not due:
            break

        for ach in due:
            ua = UserAchievement(user_id=user_id, code=ach["code"], unlocked_at=datetime.utcnow())
            try:
                db.session.add(ua)
                db.session.commit()
            except IntegrityError:
                # unlocked by a concurrent request
                db.session.rollback()
                unlocked.add(ach["code"])
                continue

            unlocked.add(ach["code"])
            logger.info("User %s unlocked achievement %s", user_id, ach["code"])
            newly.append(describe(ach, ctx, ua.unlocked_at))
            achievement_unlocked(user_id, ach)

            snapshot = award_points(user_id, ach["points"], store)
            if snapshot is not None:
                stats = snapshot

    return newly
