from __future__ import annotations

from ..extensions import db
from lottodesk.time_utils import to_iso_date, to_utc_z

BOX_CATEGORIES = ("regular", "high", "seasonal")


class Box(db.Model):
    """
    Physical slot holding one roll of scratch tickets.

    DESIGN: box_number is the 1..80 label shown on the counter; it is optional
    but unique when set. Ticket value is stored in cents.
    """
    __tablename__ = "boxes"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    box_number = db.Column(db.Integer, nullable=True, unique=True)
    name = db.Column(db.String(128), nullable=False)
    ticket_value_cents = db.Column(db.Integer, nullable=False)
    category = db.Column(db.String(16), nullable=False, default="regular")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "box_number": self.box_number,
            "name": self.name,
            "ticket_value_cents": self.ticket_value_cents,
            "category": self.category,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class ActivatedBook(db.Model):
    """
    A fresh roll of tickets loaded into a box on a given date.

    Tickets are numbered from start_ticket_number, so the last ticket is
    start + count - 1. Several rows may exist for one box over time; the
    newest row for (box, date) is the one entries link to.
    """
    __tablename__ = "activated_books"
    __table_args__ = (
        db.Index("ix_activated_books_box_date", "box_id", "activated_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    box_id = db.Column(db.Integer, db.ForeignKey("boxes.id"), nullable=False, index=True)
    activated_date = db.Column(db.Date, nullable=False, index=True)
    start_ticket_number = db.Column(db.Integer, nullable=False, default=0)
    ticket_count = db.Column(db.Integer, nullable=False)
    note = db.Column(db.Text, nullable=True)
    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    box = db.relationship("Box", backref=db.backref("activated_books", lazy=True))

    @property
    def end_ticket_number(self) -> int:
        return self.start_ticket_number + self.ticket_count - 1

    def to_dict(self, include_box: bool = False) -> dict:
        data = {
            "id": self.id,
            "box_id": self.box_id,
            "activated_date": to_iso_date(self.activated_date),
            "start_ticket_number": self.start_ticket_number,
            "ticket_count": self.ticket_count,
            "end_ticket_number": self.end_ticket_number,
            "note": self.note,
            "created_by_user_id": self.created_by_user_id,
            "created_at": to_utc_z(self.created_at),
        }
        if include_box:
            data["box"] = self.box.to_dict() if self.box else None
        return data
