from __future__ import annotations

from ..extensions import db
from lottodesk.time_utils import to_iso_date, to_utc_z

TXN_PLAY = "play"
TXN_PAYMENT = "payment"
TXN_WIN = "win"
TRANSACTION_TYPES = (TXN_PLAY, TXN_PAYMENT, TXN_WIN)


class Player(db.Model):
    """Credit ("udhari") customer."""
    __tablename__ = "players"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": to_utc_z(self.created_at),
        }


class PlayerTransaction(db.Model):
    """
    Immutable player credit event.

    amount_cents is always stored non-negative; the sign comes from
    transaction_type (play adds to what the player owes, payment and win
    subtract). Rows with an unknown type are legacy plays.
    """
    __tablename__ = "player_transactions"
    __table_args__ = (
        db.Index("ix_player_transactions_player_date", "player_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey("players.id"), nullable=False, index=True)
    transaction_type = db.Column(db.String(16), nullable=True)
    amount_cents = db.Column(db.Integer, nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    note = db.Column(db.Text, nullable=True)
    game_details = db.Column(db.Text, nullable=True)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    player = db.relationship("Player", backref=db.backref("transactions", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "player_id": self.player_id,
            "transaction_type": self.transaction_type,
            "amount_cents": self.amount_cents,
            "date": to_iso_date(self.date),
            "note": self.note,
            "game_details": self.game_details,
            "created_by_user_id": self.created_by_user_id,
            "created_at": to_utc_z(self.created_at),
        }
