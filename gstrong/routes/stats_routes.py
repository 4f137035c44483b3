# gstrong/routes/stats_routes.py
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from ..ledger import get_user_stats
from ..stats_core import POINTS, level_summary

stats_bp = Blueprint("stats", __name__)


@stats_bp.route("", methods=["GET"])
@jwt_required()
def my_stats():
    """
    Returns:
    {
      "stats": { "points": 450, "xp": 450, "level": 1, "workouts_completed": 8, ... },
      "level": { "level": 1, "xp_in_level": 450, "xp_to_next_level": 150, ... },
      "point_values": { "BINGO_SQUARE": 10, ... }
    }
    """
    user_id = int(get_jwt_identity())
    stats = get_user_stats(user_id)
    if stats is None:
        return jsonify({"message": "stats not found"}), 404

    return jsonify(
        {
            "stats": stats,
            "level": level_summary(stats["xp"]),
            "point_values": POINTS,
        }
    ), 200
