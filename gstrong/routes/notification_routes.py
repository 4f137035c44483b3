# gstrong/routes/notification_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from .. import db
from ..models.notification import Notification

notifications_bp = Blueprint("notifications", __name__)

# tab name -> notification types shown under it
TABS = {
    "All": None,
    "Achievements": ("achievement", "level"),
    "Workouts": ("workout",),
    "Bingo": ("bingo",),
}


def _own_notification(user_id: int, notification_id: int):
    return Notification.query.filter_by(id=notification_id, user_id=user_id).first()


# ------------------------------
# GET /api/notifications?tab=All|Achievements|Workouts|Bingo
# ------------------------------
@notifications_bp.route("", methods=["GET"])
@jwt_required()
def list_notifications():
    """
    Newest first. `unread_count` and `achievement_count` always cover the
    whole feed, not just the selected tab.
    """
    user_id = int(get_jwt_identity())

    tab = request.args.get("tab") or "All"
    if tab not in TABS:
        return jsonify({"message": f"invalid tab, expected one of {', '.join(TABS)}"}), 400

    rows = (
        Notification.query.filter_by(user_id=user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )

    types = TABS[tab]
    shown = [n for n in rows if types is None or n.type in types]

    return jsonify(
        {
            "notifications": [n.to_dict() for n in shown],
            "unread_count": sum(1 for n in rows if not n.read),
            "achievement_count": sum(1 for n in rows if n.type in TABS["Achievements"]),
            "tabs": list(TABS),
        }
    ), 200


# ------------------------------
# POST /api/notifications/<id>/read
# ------------------------------
@notifications_bp.route("/<int:notification_id>/read", methods=["POST"])
@jwt_required()
def mark_read(notification_id: int):
    user_id = int(get_jwt_identity())
    note = _own_notification(user_id, notification_id)
    if not note:
        return jsonify({"message": "notification not found"}), 404

    try:
        note.read = True
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Mark notification read error: {e}")
        return jsonify({"message": "Failed to update notification"}), 500

    return jsonify({"notification": note.to_dict()}), 200


# ------------------------------
# POST /api/notifications/read-all
# ------------------------------
@notifications_bp.route("/read-all", methods=["POST"])
@jwt_required()
def mark_all_read():
    user_id = int(get_jwt_identity())
    try:
        updated = (
            Notification.query.filter_by(user_id=user_id, read=False)
            .update({"read": True}, synchronize_session=False)
        )
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Mark all notifications read error: {e}")
        return jsonify({"message": "Failed to update notifications"}), 500

    return jsonify({"message": "All notifications marked as read", "updated": updated}), 200


# ------------------------------
# DELETE /api/notifications/<id>
# ------------------------------
@notifications_bp.route("/<int:notification_id>", methods=["DELETE"])
@jwt_required()
def delete_notification(notification_id: int):
    user_id = int(get_jwt_identity())
    note = _own_notification(user_id, notification_id)
    if not note:
        return jsonify({"message": "notification not found"}), 404

    try:
        db.session.delete(note)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Delete notification error: {e}")
        return jsonify({"message": "Failed to delete notification"}), 500

    return jsonify({"message": "Notification deleted", "id": notification_id}), 200


# ------------------------------
# DELETE /api/notifications
# ------------------------------
@notifications_bp.route("", methods=["DELETE"])
@jwt_required()
def delete_all_notifications():
    user_id = int(get_jwt_identity())
    try:
        deleted = Notification.query.filter_by(user_id=user_id).delete(synchronize_session=False)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Delete notifications error: {e}")
        return jsonify({"message": "Failed to delete notifications"}), 500

    return jsonify({"message": "Notifications cleared", "deleted": deleted}), 200
