# Overview: Service-layer operations for boxes; encapsulates business logic and database work.

from __future__ import annotations

from sqlalchemy import nulls_last

from ..errors import ConflictError, NotFoundError, ValidationError
from ..extensions import db
from ..models import Box, DailyBoxEntry
from ..models.boxes import BOX_CATEGORIES
from ..validation import BOX_NUMBER_MAX, BOX_NUMBER_MIN


def _validate_box_fields(name: str, ticket_value_cents: int, category: str, box_number: int | None) -> tuple[str, str]:
    name = (name or "").strip()
    if not name:
        raise ValidationError("name is required")
    if ticket_value_cents is None or ticket_value_cents <= 0:
        raise ValidationError("ticket_value must be greater than 0")

    category = (category or "regular").strip().lower()
    if category not in BOX_CATEGORIES:
        raise ValidationError(f"category must be one of: {', '.join(BOX_CATEGORIES)}")

    if box_number is not None and not (BOX_NUMBER_MIN <= box_number <= BOX_NUMBER_MAX):
        raise ValidationError(f"box_number must be between {BOX_NUMBER_MIN} and {BOX_NUMBER_MAX}")
    return name, category


def _ensure_number_free(box_number: int | None, exclude_box_id: int | None = None) -> None:
    if box_number is None:
        return
    query = db.session.query(Box).filter_by(box_number=box_number)
    if exclude_box_id is not None:
        query = query.filter(Box.id != exclude_box_id)
    if query.first():
        raise ConflictError(f"Box number {box_number} is already in use")


def list_boxes() -> list[Box]:
    """Boxes ordered by display number (unnumbered last), then name."""
    return db.session.query(Box).order_by(
        nulls_last(Box.box_number.asc()),
        Box.name.asc(),
    ).all()


def get_box(box_id: int) -> Box:
    box = db.session.get(Box, box_id)
    if not box:
        raise NotFoundError("Box not found")
    return box


def create_box(
    name: str,
    ticket_value_cents: int,
    category: str = "regular",
    box_number: int | None = None,
) -> Box:
    name, category = _validate_box_fields(name, ticket_value_cents, category, box_number)
    _ensure_number_free(box_number)

    box = Box(
        name=name,
        ticket_value_cents=ticket_value_cents,
        category=category,
        box_number=box_number,
    )
    db.session.add(box)
    db.session.commit()
    return box


def update_box(
    box_id: int,
    name: str,
    ticket_value_cents: int,
    category: str = "regular",
    box_number: int | None = None,
) -> Box:
    """
    Update a box.

    NOTE: Changing ticket_value does not reprice saved entries; their
    sold_amount is recomputed the next time the entry is saved.
    """
    box = get_box(box_id)
    name, category = _validate_box_fields(name, ticket_value_cents, category, box_number)
    _ensure_number_free(box_number, exclude_box_id=box_id)

    box.name = name
    box.ticket_value_cents = ticket_value_cents
    box.category = category
    box.box_number = box_number
    db.session.commit()
    return box


def delete_box(box_id: int) -> None:
    """Delete a box that has never been used in a daily entry."""
    box = get_box(box_id)

    has_entries = db.session.query(DailyBoxEntry.id).filter_by(box_id=box_id).first()
    if has_entries:
        raise ConflictError("Box has daily entries and cannot be deleted")

    for book in list(box.activated_books):
        db.session.delete(book)
    db.session.delete(box)
    db.session.commit()
