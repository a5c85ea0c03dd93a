# Overview: Service-layer operations for daily box entries; encapsulates business logic and database work.

"""
Daily Entry Ledger

WHY: The per-(date, box) open/close readings are the source of truth for
scratch ticket sales. Every save recomputes sold count and amount and then
runs the continuity check.

DESIGN PRINCIPLES:
- Upsert keyed on (date, box); saving the same input twice leaves one row
- None means "no ticket in this box", 0 is a real reading
- An omitted new box start may be prefilled from that day's activated book;
  an explicit None is stored as None
- A batch is all-or-nothing: it is validated and authorized up front, then
  written in one transaction
- The submission lock is enforced here: once a date is submitted only an
  administrator actor may save that date
- Continuity runs after the commit and can only add warnings
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Iterable

from sqlalchemy import nulls_last
from sqlalchemy.exc import IntegrityError

from ..errors import NotFoundError, SubmissionLockedError, ValidationError, translate_integrity_error
from ..extensions import db
from ..models import ActivatedBook, Box, DailyBoxEntry, DailyEntrySubmission
from ..validation import parse_int, parse_optional_int, parse_ticket_number
from lottodesk.time_utils import to_iso_date, utcnow
from . import activated_book_service, continuity_service
from .auth_service import Actor, require_actor
from .concurrency import lock_for_update, run_upsert
from .ticket_math import compute_ticket_sale


@dataclass
class EntryUpdate:
    """
    One row of a save request. Fields a partial save does not touch are ignored.

    new_box_start_number is ... when the caller left it out, which lets the
    save fill it in from the box's activated book.
    """
    box_id: int
    open_number: int | None = None
    close_number: int | None = None
    new_box_start_number: Any = ...
    activated_book_id: int | None = None


@dataclass
class SaveResult:
    """
    Outcome of a batch save.

    warnings is non-empty for a partial success: the rows were saved but a
    side effect (continuity check) failed, or a sold count came out negative.
    """
    business_date: date
    entries: list[DailyBoxEntry]
    continuity_logs: list = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "partial" if self.warnings else "ok"

    def to_dict(self) -> dict:
        return {
            "date": to_iso_date(self.business_date),
            "status": self.status,
            "entries": [e.to_dict() for e in self.entries],
            "continuity_logs": [log.to_dict() for log in self.continuity_logs],
            "warnings": self.warnings,
        }


def parse_entry_updates(raw_rows: Iterable[dict]) -> list[EntryUpdate]:
    """
    Build EntryUpdate rows from a request body.

    Accepts snake_case keys; "" and "-" readings mean "no ticket".
    """
    if raw_rows is None:
        raise ValidationError("entries are required")

    updates = []
    for index, raw in enumerate(raw_rows):
        if not isinstance(raw, dict):
            raise ValidationError(f"entries[{index}] must be an object")
        if raw.get("box_id") is None:
            raise ValidationError(f"entries[{index}].box_id is required")
        updates.append(EntryUpdate(
            box_id=parse_int(raw.get("box_id"), f"entries[{index}].box_id"),
            open_number=parse_ticket_number(raw.get("open_number"), f"entries[{index}].open_number"),
            close_number=parse_ticket_number(raw.get("close_number"), f"entries[{index}].close_number"),
            new_box_start_number=(
                parse_ticket_number(raw["new_box_start_number"], f"entries[{index}].new_box_start_number")
                if "new_box_start_number" in raw else ...
            ),
            activated_book_id=parse_optional_int(
                raw.get("activated_book_id"), f"entries[{index}].activated_book_id"
            ),
        ))
    return updates


# =============================================================================
# READS
# =============================================================================

def get_entries_for_date(business_date: date) -> list[DailyBoxEntry]:
    """All entries for a date with box and book loaded; empty list when none."""
    return db.session.query(DailyBoxEntry).join(Box, DailyBoxEntry.box_id == Box.id).filter(
        DailyBoxEntry.date == business_date,
    ).order_by(nulls_last(Box.box_number.asc()), Box.name.asc()).all()


def get_submission(business_date: date) -> DailyEntrySubmission | None:
    return db.session.get(DailyEntrySubmission, business_date)


def get_submission_status(business_date: date) -> dict:
    submission = get_submission(business_date)
    if submission is None:
        return {
            "date": to_iso_date(business_date),
            "submitted": False,
            "submitted_at": None,
            "submitted_by_user_id": None,
        }
    data = submission.to_dict()
    data["submitted"] = True
    return data


# =============================================================================
# WRITES
# =============================================================================

def ensure_date_writable(business_date: date, actor: Actor | None) -> Actor:
    """
    Gate every write to a date's entries.

    Open date: any authenticated actor. Submitted date: administrators only.
    """
    actor = require_actor(actor)
    if get_submission(business_date) is not None and not actor.is_admin:
        raise SubmissionLockedError(business_date)
    return actor


def _validate_batch(updates: list[EntryUpdate]) -> dict[int, Box]:
    if not updates:
        raise ValidationError("At least one entry is required")

    box_ids = [u.box_id for u in updates]
    if len(set(box_ids)) != len(box_ids):
        raise ValidationError("Each box may appear only once per save")

    boxes = {b.id: b for b in db.session.query(Box).filter(Box.id.in_(box_ids)).all()}
    missing = sorted(set(box_ids) - set(boxes))
    if missing:
        raise NotFoundError(f"Box not found: {', '.join(str(i) for i in missing)}")
    return boxes


def _link_activated_book(entry: DailyBoxEntry, prefill: bool) -> None:
    """
    Keep activated_book_id only when it matches new_box_start_number.

    prefill is True only when the caller omitted the start number.

    - Omitted start with a link: copy the linked book's start number
    - Omitted start and no link: prefill from the box's book for that date
    - A start number with no link: link to that day's book with the same start
    """
    book = None
    if entry.activated_book_id is not None:
        book = db.session.get(ActivatedBook, entry.activated_book_id)
        if book is None or book.box_id != entry.box_id:
            book = None
        elif entry.new_box_start_number is None and prefill:
            entry.new_box_start_number = book.start_ticket_number
        elif entry.new_box_start_number != book.start_ticket_number:
            book = None
    else:
        current = activated_book_service.get_current_for_box(entry.box_id, entry.date)
        if current is not None:
            if entry.new_box_start_number is None and prefill:
                entry.new_box_start_number = current.start_ticket_number
                book = current
            elif entry.new_box_start_number == current.start_ticket_number:
                book = current

    entry.activated_book_id = book.id if book is not None else None


def _save_batch(
    business_date: date,
    updates: list[EntryUpdate],
    actor: Actor | None,
    apply_update: Callable[[DailyBoxEntry, EntryUpdate], bool],
    context: str,
) -> SaveResult:
    actor = ensure_date_writable(business_date, actor)
    boxes = _validate_batch(updates)
    box_ids = [u.box_id for u in updates]

    def _write() -> list[DailyBoxEntry]:
        existing = {
            e.box_id: e
            for e in lock_for_update(
                db.session.query(DailyBoxEntry).filter(
                    DailyBoxEntry.date == business_date,
                    DailyBoxEntry.box_id.in_(box_ids),
                )
            ).all()
        }

        saved = []
        for update in updates:
            entry = existing.get(update.box_id)
            if entry is None:
                entry = DailyBoxEntry(date=business_date, box_id=update.box_id)
                db.session.add(entry)

            # Set before the book lookup below autoflushes the row
            entry.created_by_user_id = actor.user_id
            prefill = apply_update(entry, update)
            _link_activated_book(entry, prefill)

            sale = compute_ticket_sale(
                entry.open_number,
                entry.close_number,
                entry.new_box_start_number,
                boxes[update.box_id].ticket_value_cents,
            )
            entry.sold_count = sale.sold_count
            entry.sold_amount_cents = sale.sold_amount_cents
            saved.append(entry)

        db.session.commit()
        return saved

    try:
        entries = run_upsert(_write)
    except IntegrityError as exc:
        db.session.rollback()
        raise translate_integrity_error(exc, context=context)

    warnings = [
        f"{boxes[e.box_id].name}: sold count is negative ({e.sold_count}); check the readings"
        for e in entries
        if e.sold_count < 0
    ]

    logs, continuity_warning = continuity_service.run_continuity_check_safely(business_date, box_ids)
    if continuity_warning:
        warnings.append(continuity_warning)

    return SaveResult(
        business_date=business_date,
        entries=entries,
        continuity_logs=logs,
        warnings=warnings,
    )


def _apply_start(entry: DailyBoxEntry, update: EntryUpdate) -> bool:
    entry.activated_book_id = update.activated_book_id
    if update.new_box_start_number is ...:
        entry.new_box_start_number = None
        return True
    entry.new_box_start_number = update.new_box_start_number
    return False


def _apply_full(entry: DailyBoxEntry, update: EntryUpdate) -> bool:
    entry.open_number = update.open_number
    entry.close_number = update.close_number
    return _apply_start(entry, update)


def _apply_open(entry: DailyBoxEntry, update: EntryUpdate) -> bool:
    # close_number keeps whatever was stored
    entry.open_number = update.open_number
    return _apply_start(entry, update)


def _apply_close(entry: DailyBoxEntry, update: EntryUpdate) -> bool:
    # open_number, new box start and book link keep whatever was stored
    entry.close_number = update.close_number
    return False


def save_entries(business_date: date, updates: list[EntryUpdate], *, actor: Actor | None) -> SaveResult:
    """Save open, close and new-box-start readings for a batch of boxes."""
    return _save_batch(business_date, updates, actor, _apply_full, "Saving daily entries")


def save_open_numbers(business_date: date, updates: list[EntryUpdate], *, actor: Actor | None) -> SaveResult:
    """Store-opening save: writes open readings, preserves stored close readings."""
    return _save_batch(business_date, updates, actor, _apply_open, "Saving open numbers")


def save_close_numbers(business_date: date, updates: list[EntryUpdate], *, actor: Actor | None) -> SaveResult:
    """Store-closing save: writes close readings, preserves stored open readings."""
    return _save_batch(business_date, updates, actor, _apply_close, "Saving close numbers")


def submit_day(business_date: date, *, actor: Actor | None) -> DailyEntrySubmission:
    """
    Lock a date's entries.

    Idempotent: submitting an already submitted date returns the original lock.
    """
    actor = require_actor(actor)

    submission = get_submission(business_date)
    if submission is not None:
        return submission

    submission = DailyEntrySubmission(
        date=business_date,
        submitted_at=utcnow(),
        submitted_by_user_id=actor.user_id,
    )
    db.session.add(submission)
    try:
        db.session.commit()
    except IntegrityError:
        # Another request submitted the same date first
        db.session.rollback()
        submission = get_submission(business_date)
    return submission
