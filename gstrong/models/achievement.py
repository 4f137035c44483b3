# gstrong/models/achievement.py
from datetime import datetime
from .. import db


class UserAchievement(db.Model):
    __tablename__ = "user_achievements"
    __table_args__ = (
        db.UniqueConstraint("user_id", "code", name="uq_user_achievement"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    # matches a code in gstrong.achievements.ACHIEVEMENTS
    code = db.Column(db.String(50), nullable=False)
    unlocked_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow
    )

    user = db.relationship("User", backref="user_achievements")
