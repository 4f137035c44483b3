# gstrong/notifications.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from . import db
from .models.notification import NOTIFICATION_TYPES, Notification

logger = logging.getLogger(__name__)


def notify(user_id, kind: str, title: str, message: str) -> Optional[Dict[str, Any]]:
    """
    Record one feed entry and commit it. A failed write is logged and
    returns None; the event that triggered it has already been saved.
    """
    if kind not in NOTIFICATION_TYPES:
        raise ValueError(f"unknown notification type {kind!r}")

    note = Notification(user_id=user_id, type=kind, title=title, message=message)
    try:
        db.session.add(note)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Failed to record %s notification for user %s: %s", kind, user_id, e)
        return None

    return note.to_dict()


def achievement_unlocked(user_id, ach: Dict[str, Any]):
    return notify(
        user_id,
        "achievement",
        "New Achievement Unlocked!",
        f'You earned the "{ach["title"]}" badge. +{ach["points"]} points',
    )


def level_up(user_id, level: int):
    return notify(user_id, "level", "Level Up!", f"Congratulations! You've reached Level {level}.")


def bingo_line(user_id, line: int):
    return notify(
        user_id,
        "bingo",
        "Bingo Line Complete!",
        f"You completed line {line + 1}. Keep going for a full house.",
    )


def bingo_full_card(user_id):
    return notify(
        user_id,
        "bingo",
        "Bingo Card Complete!",
        "Full house! You completed every square on your bingo card this week.",
    )


def workout_completed(user_id, name: str):
    return notify(user_id, "workout", "Workout Complete", f'"{name}" is in the books. Nice work!')
