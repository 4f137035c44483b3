# gstrong/routes/profile_routes.py
from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from .. import db
from ..models.user import (
    DEFAULT_PREFERENCES,
    EXPERIENCE_LEVELS,
    PRIMARY_GOALS,
    User,
)
from .auth_routes import MIN_PASSWORD_LENGTH

profile_bp = Blueprint("profile", __name__)


def _current_user():
    return db.session.get(User, int(get_jwt_identity()))


def _positive_float(value):
    value = float(value)
    if value <= 0:
        raise ValueError("must be positive")
    return value


@profile_bp.route("", methods=["GET"])
@jwt_required()
def get_profile():
    user = _current_user()
    if not user:
        return jsonify({"message": "user not found"}), 404
    return jsonify({"user": user.to_dict()}), 200


@profile_bp.route("", methods=["PUT"])
@jwt_required()
def update_profile():
    user = _current_user()
    if not user:
        return jsonify({"message": "user not found"}), 404

    data = request.get_json(silent=True) or {}

    display_name = data.get("display_name")
    email = data.get("email")
    bio = data.get("bio")
    experience_level = data.get("experience_level")
    primary_goal = data.get("primary_goal")

    for field in ("display_name", "email", "bio"):
        if data.get(field) is not None and not isinstance(data[field], str):
            return jsonify({"message": f"{field} must be a string"}), 400

    if display_name is not None:
        display_name = display_name.strip()
        if not display_name:
            return jsonify({"message": "display_name cannot be empty"}), 400
        user.display_name = display_name

    if email is not None:
        email = email.strip().lower()
        if "@" not in email:
            return jsonify({"message": "invalid email"}), 400
        taken = User.query.filter(User.email == email, User.id != user.id).first()
        if taken:
            return jsonify({"message": "email already in use"}), 400
        user.email = email

    if bio is not None:
        user.bio = bio.strip()[:255]

    for field in ("height_cm", "weight_kg"):
        if data.get(field) is not None:
            try:
                setattr(user, field, _positive_float(data[field]))
            except (TypeError, ValueError):
                return jsonify({"message": f"invalid {field}"}), 400

    if experience_level is not None:
        if experience_level not in EXPERIENCE_LEVELS:
            return jsonify({"message": "invalid experience_level"}), 400
        user.experience_level = experience_level

    if primary_goal is not None:
        if primary_goal not in PRIMARY_GOALS:
            return jsonify({"message": "invalid primary_goal"}), 400
        user.primary_goal = primary_goal

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Profile update error: {e}")
        return jsonify({"message": "Failed to update profile"}), 500

    return jsonify({"user": user.to_dict()}), 200


@profile_bp.route("/password", methods=["PUT"])
@jwt_required()
def change_password():
    user = _current_user()
    if not user:
        return jsonify({"message": "user not found"}), 404

    data = request.get_json(silent=True) or {}
    current_password = data.get("current_password") or ""
    new_password = data.get("new_password") or ""
    confirm_password = data.get("confirm_password")

    if not all(isinstance(v, str) for v in (current_password, new_password)):
        return jsonify({"message": "passwords must be strings"}), 400

    if not user.check_password(current_password):
        return jsonify({"message": "current password is incorrect"}), 400

    if len(new_password) < MIN_PASSWORD_LENGTH:
        return jsonify({"message": f"password must be at least {MIN_PASSWORD_LENGTH} characters"}), 400

    if confirm_password is not None and confirm_password != new_password:
        return jsonify({"message": "passwords do not match"}), 400

    if new_password == current_password:
        return jsonify({"message": "new password must differ from the current one"}), 400

    try:
        user.set_password(new_password)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Password change error: {e}")
        return jsonify({"message": "Failed to update password"}), 500

    current_app.logger.info(f"[profile/password] changed for user_id={user.id}")

    return jsonify({"message": "Password updated"}), 200


@profile_bp.route("/preferences", methods=["GET"])
@jwt_required()
def get_preferences():
    user = _current_user()
    if not user:
        return jsonify({"message": "user not found"}), 404
    return jsonify({"preferences": user.get_preferences()}), 200


@profile_bp.route("/preferences", methods=["PUT"])
@jwt_required()
def update_preferences():
    user = _current_user()
    if not user:
        return jsonify({"message": "user not found"}), 404

    data = request.get_json(silent=True) or {}

    unknown = sorted(set(data) - set(DEFAULT_PREFERENCES))
    if unknown:
        return jsonify({"message": f"unknown preferences: {', '.join(unknown)}"}), 400

    if any(not isinstance(v, bool) for v in data.values()):
        return jsonify({"message": "preference values must be true or false"}), 400

    try:
        prefs = user.get_preferences()
        prefs.update(data)
        user.preferences = prefs
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Preferences update error: {e}")
        return jsonify({"message": "Failed to update preferences"}), 500

    return jsonify({"preferences": user.get_preferences()}), 200
