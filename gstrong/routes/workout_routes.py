# gstrong/routes/workout_routes.py

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from .. import db
from ..achievements import check_and_unlock
from ..ledger import award_points, get_user_stats, increment_workouts_completed
from ..models.workout import WORKOUT_TYPES, Workout
from ..notifications import workout_completed
from ..stats_core import POINTS

workouts_bp = Blueprint("workouts", __name__)


# ------------------------------
# Helpers
# ------------------------------
def _safe_int_or_none(v: Any) -> Optional[int]:
    if v is None or v == "":
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def _clean_exercises(raw: Any) -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    """
    Normalises the builder payload. Returns (exercises, error_message).
    """
    if not isinstance(raw, list) or not raw:
        return None, "at least one exercise is required"

    cleaned = []
    for i, ex in enumerate(raw):
        if not isinstance(ex, dict):
            return None, f"exercise #{i + 1} is invalid"

        name = (ex.get("name") or "").strip()
        if not name:
            return None, f"exercise #{i + 1} needs a name"

        sets = _safe_int_or_none(ex.get("sets"))
        reps = _safe_int_or_none(ex.get("reps"))
        if (sets is not None and sets < 0) or (reps is not None and reps < 0):
            return None, f"exercise #{i + 1} has negative sets or reps"

        cleaned.append(
            {
                "name": name,
                "muscle_group": (ex.get("muscle_group") or ex.get("muscleGroup") or "").strip(),
                "sets": sets,
                "reps": reps,
                "weight": str(ex.get("weight") or "").strip(),
            }
        )
    return cleaned, None


def _own_workout(user_id: int, workout_id: int) -> Optional[Workout]:
    return Workout.query.filter_by(id=workout_id, user_id=user_id).first()


# ------------------------------
# GET /api/workouts
# ------------------------------
@workouts_bp.route("", methods=["GET"])
@jwt_required()
def list_workouts():
    user_id = int(get_jwt_identity())
    rows: List[Workout] = (
        Workout.query.filter_by(user_id=user_id)
        .order_by(Workout.created_at.desc(), Workout.id.desc())
        .all()
    )
    return jsonify({"workouts": [w.to_dict() for w in rows]}), 200


# ------------------------------
# POST /api/workouts
# ------------------------------
@workouts_bp.route("", methods=["POST"])
@jwt_required()
def save_workout():
    """
    Expected body:
    {
      "name": "Push Day",
      "type": "strength",
      "exercises": [
        {"name": "Bench Press", "muscle_group": "Chest", "sets": 3, "reps": 10, "weight": "60kg"}
      ]
    }
    """
    user_id = int(get_jwt_identity())
    data = request.get_json(silent=True) or {}

    name = (data.get("name") or "").strip()
    if not name:
        return jsonify({"message": "name is required"}), 400

    workout_type = (data.get("type") or "strength").strip().lower()
    if workout_type not in WORKOUT_TYPES:
        return jsonify({"message": f"type must be one of {', '.join(WORKOUT_TYPES)}"}), 400

    exercises, error = _clean_exercises(data.get("exercises"))
    if error:
        return jsonify({"message": error}), 400

    try:
        workout = Workout(
            user_id=user_id,
            name=name,
            type=workout_type,
            exercises=exercises,
            created_at=datetime.utcnow(),
        )
        db.session.add(workout)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Save workout error: {e}")
        return jsonify({"message": "Failed to save workout"}), 500

    stats = award_points(user_id, POINTS["SAVE_WORKOUT"])

    return jsonify(
        {
            "workout": workout.to_dict(),
            "points_awarded": POINTS["SAVE_WORKOUT"] if stats else 0,
            "stats": stats,
        }
    ), 201


# ------------------------------
# DELETE /api/workouts/<id>
# ------------------------------
@workouts_bp.route("/<int:workout_id>", methods=["DELETE"])
@jwt_required()
def delete_workout(workout_id: int):
    user_id = int(get_jwt_identity())
    workout = _own_workout(user_id, workout_id)
    if not workout:
        return jsonify({"message": "workout not found"}), 404

    try:
        db.session.delete(workout)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Delete workout error: {e}")
        return jsonify({"message": "Failed to delete workout"}), 500

    return jsonify({"message": "Workout deleted", "id": workout_id}), 200


# ------------------------------
# POST /api/workouts/<id>/complete
# ------------------------------
@workouts_bp.route("/<int:workout_id>/complete", methods=["POST"])
@jwt_required()
def complete_workout(workout_id: int):
    """
    Optional body: { "local_hour": 6 }  (hour on the user's clock, 0-23)
    """
    user_id = int(get_jwt_identity())
    data = request.get_json(silent=True) or {}

    workout = _own_workout(user_id, workout_id)
    if not workout:
        return jsonify({"message": "workout not found"}), 404

    # Idempotency: already completed -> do not count again
    if workout.completed_at is not None:
        return jsonify(
            {
                "message": "Workout already completed",
                "workout": workout.to_dict(),
                "stats": get_user_stats(user_id),
                "unlocked_achievements": [],
            }
        ), 200

    local_hour = _safe_int_or_none(data.get("local_hour"))
    if local_hour is not None and not 0 <= local_hour <= 23:
        return jsonify({"message": "local_hour must be between 0 and 23"}), 400

    try:
        workout.completed_at = datetime.utcnow()
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Complete workout error: {e}")
        return jsonify({"message": "Failed to complete workout"}), 500

    if local_hour is None:
        local_hour = workout.completed_at.hour

    increment_workouts_completed(user_id)
    workout_completed(user_id, workout.name)
    unlocked_now = check_and_unlock(user_id, {"workout_hour": local_hour})

    return jsonify(
        {
            "message": "Workout completed",
            "workout": workout.to_dict(),
            "stats": get_user_stats(user_id),
            "unlocked_achievements": unlocked_now,
        }
    ), 200
