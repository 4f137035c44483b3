# gstrong/models/user_stats.py
from datetime import datetime
from .. import db


class UserStats(db.Model):
    __tablename__ = "user_stats"

    # one row per user, keyed by the user's id
    id = db.Column(db.Integer, db.ForeignKey("users.id"), primary_key=True)
    points = db.Column(db.Integer, default=0, nullable=False)
    xp = db.Column(db.Integer, default=0, nullable=False)
    level = db.Column(db.Integer, default=1, nullable=False)
    workouts_completed = db.Column(db.Integer, default=0, nullable=False)
    bingo_squares_completed = db.Column(db.Integer, default=0, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", backref=db.backref("stats", uselist=False))

    def to_dict(self):
        return {
            "id": self.id,
            "points": int(self.points or 0),
            "xp": int(self.xp or 0),
            "level": int(self.level or 1),
            "workouts_completed": int(self.workouts_completed or 0),
            "bingo_squares_completed": int(self.bingo_squares_completed or 0),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
