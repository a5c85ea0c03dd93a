from __future__ import annotations

from ..extensions import db
from lottodesk.time_utils import to_iso_date, to_utc_z

SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"
SEVERITY_CRITICAL = "critical"


class DailyBoxEntry(db.Model):
    """
    Reconciliation record for one box on one calendar date.

    DESIGN:
    - One row per (date, box); saves upsert on that pair
    - open_number / close_number are NULL when there was no ticket in the box,
      which is not the same thing as a reading of 0
    - sold_count / sold_amount_cents are recomputed on every save
    """
    __tablename__ = "daily_box_entries"
    __table_args__ = (
        db.UniqueConstraint("date", "box_id", name="uq_daily_box_entries_date_box"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    box_id = db.Column(db.Integer, db.ForeignKey("boxes.id"), nullable=False, index=True)

    open_number = db.Column(db.Integer, nullable=True)
    close_number = db.Column(db.Integer, nullable=True)
    new_box_start_number = db.Column(db.Integer, nullable=True)
    activated_book_id = db.Column(db.Integer, db.ForeignKey("activated_books.id"), nullable=True)

    sold_count = db.Column(db.Integer, nullable=False, default=0)
    sold_amount_cents = db.Column(db.Integer, nullable=False, default=0)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    box = db.relationship("Box", backref=db.backref("daily_entries", lazy=True))
    activated_book = db.relationship("ActivatedBook", backref=db.backref("daily_entries", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": to_iso_date(self.date),
            "box_id": self.box_id,
            "open_number": self.open_number,
            "close_number": self.close_number,
            "new_box_start_number": self.new_box_start_number,
            "activated_book_id": self.activated_book_id,
            "sold_count": self.sold_count,
            "sold_amount_cents": self.sold_amount_cents,
            "created_by_user_id": self.created_by_user_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
            "box": self.box.to_dict() if self.box else None,
            "activated_book": self.activated_book.to_dict() if self.activated_book else None,
        }


class DailyEntrySubmission(db.Model):
    """
    Marks a date as submitted by staff.

    LIFECYCLE: Open (no row) -> Submitted (row exists). There is no unsubmit;
    once the row exists only administrators may change that date's entries.
    """
    __tablename__ = "daily_entry_submissions"

    date = db.Column(db.Date, primary_key=True)
    submitted_at = db.Column(db.DateTime(timezone=True), nullable=False)
    submitted_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    def to_dict(self) -> dict:
        return {
            "date": to_iso_date(self.date),
            "submitted_at": to_utc_z(self.submitted_at),
            "submitted_by_user_id": self.submitted_by_user_id,
        }


class ContinuityLog(db.Model):
    """
    Append-only log of opening numbers that did not match the previous close.

    Written by the continuity checker after entries are saved; never updated.
    """
    __tablename__ = "ticket_continuity_logs"
    __table_args__ = (
        db.Index("ix_continuity_logs_date_box", "date", "box_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    box_id = db.Column(db.Integer, db.ForeignKey("boxes.id"), nullable=False)
    prev_close = db.Column(db.Integer, nullable=False)
    today_open = db.Column(db.Integer, nullable=False)
    difference = db.Column(db.Integer, nullable=False)
    severity = db.Column(db.String(16), nullable=False, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    box = db.relationship("Box")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": to_iso_date(self.date),
            "box_id": self.box_id,
            "prev_close": self.prev_close,
            "today_open": self.today_open,
            "difference": self.difference,
            "severity": self.severity,
            "created_at": to_utc_z(self.created_at),
            "box": self.box.to_dict() if self.box else None,
        }
