# gstrong/models/user.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from .. import db

EXPERIENCE_LEVELS = ["Beginner", "Intermediate", "Advanced", "Elite"]
PRIMARY_GOALS = ["Weight Loss", "Muscle Gain", "Endurance", "Flexibility", "General Fitness"]

DEFAULT_PREFERENCES = {
    # email
    "weekly_progress": True,
    "achievement_unlocked": True,
    "workout_reminders": False,
    "product_updates": True,
    # app
    "push_notifications": True,
    "sound_effects": True,
    "haptic_feedback": True,
}


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    username = db.Column(db.String(50), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    display_name = db.Column(db.String(100))
    bio = db.Column(db.String(255))

    height_cm = db.Column(db.Numeric(5, 2))
    weight_kg = db.Column(db.Numeric(5, 2))
    experience_level = db.Column(db.String(20))
    primary_goal = db.Column(db.String(30))

    preferences = db.Column(db.JSON)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def get_preferences(self) -> dict:
        prefs = dict(DEFAULT_PREFERENCES)
        prefs.update(self.preferences or {})
        return prefs

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "display_name": self.display_name,
            "bio": self.bio,
            "height_cm": float(self.height_cm) if self.height_cm is not None else None,
            "weight_kg": float(self.weight_kg) if self.weight_kg is not None else None,
            "experience_level": self.experience_level,
            "primary_goal": self.primary_goal,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
