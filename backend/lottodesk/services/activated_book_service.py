# Overview: Service-layer operations for activated books; encapsulates business logic and database work.

"""
Activated Book Registry

WHY: When staff load a fresh roll into a box, the daily entry for that date
needs the roll's first ticket number to compute sales across the swap.

DESIGN PRINCIPLES:
- Several rows per box over time; the newest row for (box, date) is "current"
- Deleting a book unlinks entries that reference it; the start number was
  already copied onto those entries, so their sold figures stay valid
"""

from __future__ import annotations

from datetime import date

from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import ActivatedBook, Box, DailyBoxEntry
from .auth_service import Actor, require_actor


def _validate_book(start_ticket_number: int, ticket_count: int) -> None:
    if start_ticket_number is None or start_ticket_number < 0:
        raise ValidationError("start_ticket_number must be 0 or greater")
    if ticket_count is None or ticket_count < 1:
        raise ValidationError("ticket_count must be at least 1")


def get_book(book_id: int) -> ActivatedBook:
    book = db.session.get(ActivatedBook, book_id)
    if not book:
        raise NotFoundError("Activated book not found")
    return book


def create_book(
    box_id: int,
    activated_date: date,
    start_ticket_number: int,
    ticket_count: int,
    note: str | None = None,
    *,
    actor: Actor | None,
) -> ActivatedBook:
    actor = require_actor(actor)
    _validate_book(start_ticket_number, ticket_count)

    if not db.session.get(Box, box_id):
        raise NotFoundError("Box not found")

    book = ActivatedBook(
        box_id=box_id,
        activated_date=activated_date,
        start_ticket_number=start_ticket_number,
        ticket_count=ticket_count,
        note=note,
        created_by_user_id=actor.user_id,
    )
    db.session.add(book)
    db.session.commit()
    return book


def update_book(
    book_id: int,
    *,
    actor: Actor | None,
    activated_date: date | None = None,
    start_ticket_number: int | None = None,
    ticket_count: int | None = None,
    note: str | None = None,
) -> ActivatedBook:
    """Patch a book. Omitted (None) fields keep their stored value."""
    require_actor(actor)
    book = get_book(book_id)

    new_start = book.start_ticket_number if start_ticket_number is None else start_ticket_number
    new_count = book.ticket_count if ticket_count is None else ticket_count
    _validate_book(new_start, new_count)

    book.start_ticket_number = new_start
    book.ticket_count = new_count
    if activated_date is not None:
        book.activated_date = activated_date
    if note is not None:
        book.note = note

    db.session.commit()
    return book


def delete_book(book_id: int, *, actor: Actor | None) -> None:
    require_actor(actor)
    book = get_book(book_id)

    db.session.query(DailyBoxEntry).filter_by(activated_book_id=book.id).update(
        {DailyBoxEntry.activated_book_id: None},
        synchronize_session="fetch",
    )
    db.session.delete(book)
    db.session.commit()


def list_for_date(activated_date: date) -> list[ActivatedBook]:
    """
    Current book per box for a date.

    When a box had several books that day the newest one wins.
    """
    rows = db.session.query(ActivatedBook).filter_by(
        activated_date=activated_date,
    ).order_by(ActivatedBook.created_at.desc(), ActivatedBook.id.desc()).all()

    current: dict[int, ActivatedBook] = {}
    for book in rows:
        current.setdefault(book.box_id, book)
    return list(current.values())


def get_current_for_box(box_id: int, activated_date: date) -> ActivatedBook | None:
    return db.session.query(ActivatedBook).filter_by(
        box_id=box_id,
        activated_date=activated_date,
    ).order_by(ActivatedBook.created_at.desc(), ActivatedBook.id.desc()).first()


def list_recent(
    *,
    box_id: int | None = None,
    from_date: date | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[ActivatedBook]:
    """Books newest first: activated_date desc, then creation desc."""
    query = db.session.query(ActivatedBook)
    if box_id is not None:
        query = query.filter(ActivatedBook.box_id == box_id)
    if from_date is not None:
        query = query.filter(ActivatedBook.activated_date >= from_date)

    return query.order_by(
        ActivatedBook.activated_date.desc(),
        ActivatedBook.created_at.desc(),
        ActivatedBook.id.desc(),
    ).offset(max(offset, 0)).limit(max(min(limit, 500), 1)).all()
