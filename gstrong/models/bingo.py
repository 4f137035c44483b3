# gstrong/models/bingo.py
from datetime import datetime
from .. import db
from ..bingo_core import BingoBoard


class BingoCard(db.Model):
    """
    Persisted weekly card. `awarded_cells` remembers which squares already
    paid out so unmarking and re-marking a cell pays nothing extra.

    `version` is bumped on every write; a flush against a card someone else
    changed since it was loaded raises StaleDataError instead of overwriting.
    """

    __tablename__ = "bingo_cards"
    __table_args__ = (
        db.UniqueConstraint("user_id", "week_start", name="uq_bingo_card_user_week"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    week_start = db.Column(db.Date, nullable=False)

    completed_cells = db.Column(db.JSON, nullable=False, default=list)
    completed_lines = db.Column(db.JSON, nullable=False, default=list)
    awarded_cells = db.Column(db.JSON, nullable=False, default=list)
    full_card_awarded = db.Column(db.Boolean, nullable=False, default=False)
    version = db.Column(db.Integer, nullable=False)

    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user = db.relationship("User", backref="bingo_cards")

    __mapper_args__ = {"version_id_col": version}

    def to_board(self) -> BingoBoard:
        return BingoBoard(
            completed_cells=self.completed_cells or [],
            completed_lines=self.completed_lines or [],
            full_card_awarded=self.full_card_awarded,
        )

    def apply_board(self, board: BingoBoard) -> None:
        # JSON columns only notice reassignment, not in-place mutation
        self.completed_cells = sorted(board.completed_cells)
        self.completed_lines = sorted(board.completed_lines)
        self.full_card_awarded = board.full_card_awarded

    def to_dict(self):
        data = self.to_board().to_dict()
        data["week_start"] = self.week_start.isoformat()
        return data
