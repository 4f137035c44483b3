# gstrong/routes/bingo_routes.py
from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from .. import db
from ..achievements import check_and_unlock
from ..bingo_core import WINNING_LINES, week_start
from ..ledger import award_points, get_user_stats, increment_bingo_squares
from ..models.bingo import BingoCard
from ..notifications import bingo_full_card, bingo_line
from ..stats_core import POINTS

bingo_bp = Blueprint("bingo", __name__)

# a toggle re-reads the card and tries again when another request wrote it first
TOGGLE_ATTEMPTS = 3


def _find_card(user_id: int, monday, for_update: bool = False):
    query = BingoCard.query.filter_by(user_id=user_id, week_start=monday)
    if for_update:
        query = query.with_for_update()
    return query.first()


def _get_or_create_card(user_id: int, for_update: bool = False) -> BingoCard:
    monday = week_start()
    card = _find_card(user_id, monday, for_update)
    if card is not None:
        return card

    card = BingoCard(user_id=user_id, week_start=monday)
    card.apply_board(card.to_board())
    card.awarded_cells = []
    try:
        db.session.add(card)
        db.session.commit()
    except IntegrityError:
        # a concurrent first load created this week's card
        db.session.rollback()
        current_app.logger.info(f"[bingo] card for user_id={user_id} created concurrently, reloading")
        return _find_card(user_id, monday, for_update)

    if for_update:
        return _find_card(user_id, monday, for_update)
    return card


def _toggle(user_id: int, index: int):
    """
    One attempt: load the card (locked where the backend supports it), toggle
    and commit. Returns (card, board, result, pay_square). Raises IndexError
    for a bad cell and StaleDataError when the card changed under us.
    """
    card = _get_or_create_card(user_id, for_update=True)
    board = card.to_board()
    result = board.toggle(index)

    pay_square = False
    if result.changed:
        card.apply_board(board)
        awarded = set(card.awarded_cells or [])
        if result.completed and index not in awarded:
            awarded.add(index)
            card.awarded_cells = sorted(awarded)
            pay_square = True
    db.session.commit()
    return card, board, result, pay_square


# ------------------------------
# GET /api/bingo
# ------------------------------
@bingo_bp.route("", methods=["GET"])
@jwt_required()
def current_card():
    user_id = int(get_jwt_identity())
    try:
        card = _get_or_create_card(user_id)
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Bingo card load error: {e}")
        return jsonify({"message": "Failed to load bingo card"}), 500

    return jsonify(
        {
            "card": card.to_dict(),
            "lines": [list(line) for line in WINNING_LINES],
            "rewards": {
                "square": POINTS["BINGO_SQUARE"],
                "line": POINTS["BINGO_LINE"],
                "full_card": POINTS["BINGO_FULL_CARD"],
            },
        }
    ), 200


# ------------------------------
# POST /api/bingo/cells/<index>/toggle
# ------------------------------
@bingo_bp.route("/cells/<int:index>/toggle", methods=["POST"])
@jwt_required()
def toggle_cell(index: int):
    """
    Marks / unmarks one cell and pays out:
      - BINGO_SQUARE the first time a cell is marked on this card
      - BINGO_LINE once per newly completed line
      - BINGO_FULL_CARD the first time all 25 cells are marked

    Unmarking never takes points back and never un-credits a line.
    """
    user_id = int(get_jwt_identity())

    attempt = 0
    while True:
        attempt += 1
        try:
            card, board, result, pay_square = _toggle(user_id, index)
            break
        except IndexError as e:
            db.session.rollback()
            return jsonify({"message": str(e)}), 400
        except StaleDataError:
            db.session.rollback()
            current_app.logger.info(f"[bingo] card changed during toggle, user_id={user_id} attempt={attempt}")
            if attempt >= TOGGLE_ATTEMPTS:
                return jsonify({"message": "Bingo card is busy, try again"}), 409
        except Exception as e:
            db.session.rollback()
            current_app.logger.exception(f"Bingo toggle error: {e}")
            return jsonify({"message": "Failed to update bingo card"}), 500

    # Card state is saved; point awards below are best-effort and logged on failure.
    awards: List[Dict[str, Any]] = []
    if pay_square:
        award_points(user_id, POINTS["BINGO_SQUARE"])
        increment_bingo_squares(user_id)
        awards.append({"reason": "square", "cell": index, "points": POINTS["BINGO_SQUARE"]})

    for line in result.new_lines:
        award_points(user_id, POINTS["BINGO_LINE"])
        awards.append({"reason": "line", "line": line, "points": POINTS["BINGO_LINE"]})
        bingo_line(user_id, line)

    if result.full_card:
        award_points(user_id, POINTS["BINGO_FULL_CARD"])
        awards.append({"reason": "full_card", "points": POINTS["BINGO_FULL_CARD"]})
        bingo_full_card(user_id)

    unlocked_now = []
    if result.completed and result.changed:
        unlocked_now = check_and_unlock(user_id)

    return jsonify(
        {
            "card": card.to_dict(),
            "toggle": {
                "cell": result.cell,
                "changed": result.changed,
                "completed": result.completed,
                "new_lines": result.new_lines,
                "full_card": result.full_card,
            },
            "awards": awards,
            "points_awarded": sum(a["points"] for a in awards),
            "stats": get_user_stats(user_id),
            "unlocked_achievements": unlocked_now,
        }
    ), 200
