# gstrong/models/workout.py
from datetime import datetime
from .. import db

WORKOUT_TYPES = ["strength", "hypertrophy", "cardio", "circuit"]


class Workout(db.Model):
    __tablename__ = "workouts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    type = db.Column(db.String(20), nullable=False, default="strength")

    # [{"name": "Bench Press", "muscle_group": "Chest", "sets": 3, "reps": 10, "weight": "60kg"}, ...]
    exercises = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    completed_at = db.Column(db.DateTime)

    user = db.relationship("User", backref="workouts")

    @property
    def total_sets(self) -> int:
        total = 0
        for ex in self.exercises or []:
            try:
                total += int(ex.get("sets") or 0)
            except (TypeError, ValueError):
                continue
        return total

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "exercises": list(self.exercises or []),
            "total_sets": self.total_sets,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
