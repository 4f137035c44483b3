# gstrong/stats_store.py
"""
Data access for the `user_stats` row.

The ledger only talks to a `StatsStore`; `SqlStatsStore` is the real one,
backed by the app's SQLAlchemy session.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from . import db
from .models.user_stats import UserStats
from .stats_core import compute_level

STAT_FIELDS = ("points", "xp", "level", "workouts_completed", "bingo_squares_completed")


class StatsError(Exception):
    """Base class for stats store failures."""


class StatsNotFound(StatsError):
    def __init__(self, user_id):
        super().__init__(f"no user_stats row for user {user_id}")
        self.user_id = user_id


class StatsStoreError(StatsError):
    """Connectivity / permission / integrity problem in the backing store."""


class StatsStore(ABC):
    @abstractmethod
    def get(self, user_id) -> Dict[str, Any]:
        """Current stats snapshot. Raises StatsNotFound."""

    @abstractmethod
    def update(self, user_id, fields: Dict[str, int]) -> Dict[str, Any]:
        """Partial overwrite of the named fields."""

    @abstractmethod
    def increment(self, user_id, deltas: Dict[str, int]) -> Dict[str, Any]:
        """Add each delta to its column as one atomic step, return the new snapshot."""


def _check_fields(fields: Dict[str, int]) -> None:
    unknown = set(fields) - set(STAT_FIELDS)
    if unknown:
        raise ValueError(f"unknown stats fields: {sorted(unknown)}")
    if "level" in fields:
        raise ValueError("level is derived from xp and cannot be written directly")


class SqlStatsStore(StatsStore):
    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def get(self, user_id) -> Dict[str, Any]:
        try:
            row = self.session.execute(
                select(UserStats).where(UserStats.id == user_id)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StatsStoreError(str(e)) from e

        if row is None:
            raise StatsNotFound(user_id)
        return row.to_dict()

    def update(self, user_id, fields: Dict[str, int]) -> Dict[str, Any]:
        _check_fields(fields)
        values = {k: int(v) for k, v in fields.items()}
        if "xp" in values:
            values["level"] = compute_level(values["xp"])
        values["updated_at"] = datetime.utcnow()

        try:
            result = self.session.execute(
                update(UserStats)
                .where(UserStats.id == user_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.session.rollback()
                raise StatsNotFound(user_id)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StatsStoreError(str(e)) from e

        return self.get(user_id)

    def increment(self, user_id, deltas: Dict[str, int]) -> Dict[str, Any]:
        _check_fields(deltas)
        values = {
            name: getattr(UserStats, name) + int(delta)
            for name, delta in deltas.items()
        }
        values["updated_at"] = datetime.utcnow()

        try:
            result = self.session.execute(
                update(UserStats)
                .where(UserStats.id == user_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.session.rollback()
                raise StatsNotFound(user_id)

            # the row stays locked by the update above until commit, so the
            # xp read here is the value this call produced
            if "xp" in deltas:
                new_xp = self.session.execute(
                    select(UserStats.xp).where(UserStats.id == user_id)
                ).scalar_one()
                self.session.execute(
                    update(UserStats)
                    .where(UserStats.id == user_id)
                    .values(level=compute_level(new_xp))
                    .execution_options(synchronize_session=False)
                )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StatsStoreError(str(e)) from e

        # drop cached ORM rows so callers see the committed values
        self.session.expire_all()
        return self.get(user_id)
