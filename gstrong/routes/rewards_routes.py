# gstrong/routes/rewards_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from .. import db
from ..achievements import (
    ACHIEVEMENTS,
    CATEGORIES,
    CATEGORY_COLORS,
    build_context,
    describe,
    unlocked_for,
    user_facts,
)
from ..ledger import get_user_stats
from ..models.user import User
from ..stats_core import level_summary

rewards_bp = Blueprint("rewards", __name__)


@rewards_bp.route("/overview", methods=["GET"])
@jwt_required()
def rewards_overview():
    """
    Optional query: ?category=Weekly|Lifetime|Special

    Returns:
    {
      "user": { ... user.to_dict() ... },
      "summary": {
        "total_points": 70,
        "level": 1,
        "xp_to_next_level": 530,
        "unlocked_achievements_count": 2,
        "total_achievements_count": 10,
        "achievement_points": 70,
        "overall_progress_percent": 20
      },
      "categories": ["Weekly", "Lifetime", "Special"],
      "category_colors": { "Weekly": "#3b82f6", ... },
      "unlocked": [ { "id": "first_step", "progress": 1, "total": 1, ... } ],
      "locked": [ { "id": "high_voltage", "progress": 70, "total": 1000, ... } ]
    }
    """
    user_id = int(get_jwt_identity())
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"message": "user not found"}), 404

    stats = get_user_stats(user_id)
    if stats is None:
        return jsonify({"message": "stats not found"}), 404

    category = request.args.get("category")
    if category and category != "All" and category not in CATEGORIES:
        return jsonify({"message": "invalid category"}), 400

    unlocked_map = unlocked_for(user_id)
    ctx = build_context(stats, len(unlocked_map), user_facts(user_id))

    unlocked = []
    locked = []
    for ach in ACHIEVEMENTS:
        if category and category != "All" and ach["category"] != category:
            continue
        unlocked_at = unlocked_map.get(ach["code"])
        if unlocked_at is not None:
            unlocked.append(describe(ach, ctx, unlocked_at))
        else:
            locked.append(describe(ach, ctx))

    unlocked.sort(key=lambda a: a["unlocked_at"], reverse=True)

    earned = [a for a in ACHIEVEMENTS if a["code"] in unlocked_map]
    level = level_summary(stats["xp"])

    summary = {
        "total_points": int(stats["points"]),
        "level": level["level"],
        "xp_in_level": level["xp_in_level"],
        "xp_to_next_level": level["xp_to_next_level"],
        "unlocked_achievements_count": len(earned),
        "total_achievements_count": len(ACHIEVEMENTS),
        "achievement_points": sum(a["points"] for a in earned),
        "overall_progress_percent": round(len(earned) * 100 / len(ACHIEVEMENTS)),
    }

    return (
        jsonify(
            {
                "user": user.to_dict(),
                "summary": summary,
                "categories": CATEGORIES,
                "category_colors": CATEGORY_COLORS,
                "unlocked": unlocked,
                "locked": locked,
            }
        ),
        200,
    )
