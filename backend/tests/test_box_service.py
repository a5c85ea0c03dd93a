"""Box catalogue tests."""

import pytest

from lottodesk.errors import ConflictError, ValidationError
from lottodesk.models import ActivatedBook
from lottodesk.services import activated_book_service, box_service, daily_entry_service
from lottodesk.services.daily_entry_service import EntryUpdate


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": "", "ticket_value_cents": 100},
        {"name": "Zero", "ticket_value_cents": 0},
        {"name": "Negative", "ticket_value_cents": -500},
        {"name": "Low", "ticket_value_cents": 100, "box_number": 0},
        {"name": "High", "ticket_value_cents": 100, "box_number": 81},
        {"name": "Odd", "ticket_value_cents": 100, "category": "premium"},
    ],
)
def test_create_box_validates(db_session, kwargs):
    with pytest.raises(ValidationError):
        box_service.create_box(**kwargs)


def test_box_number_must_be_unique(db_session, box):
    with pytest.raises(ConflictError):
        box_service.create_box("Other", 500, box_number=box.box_number)


def test_update_box_can_keep_its_own_number(db_session, box):
    updated = box_service.update_box(box.id, "Lucky 7s Deluxe", 300, "high", box_number=box.box_number)
    assert updated.name == "Lucky 7s Deluxe"
    assert updated.ticket_value_cents == 300


def test_list_boxes_numbered_first(db_session):
    box_service.create_box("Unnumbered", 100)
    box_service.create_box("Twenty", 100, box_number=20)
    box_service.create_box("Three", 100, box_number=3)

    assert [b.name for b in box_service.list_boxes()] == ["Three", "Twenty", "Unnumbered"]


def test_delete_box_with_entries_is_refused(db_session, staff_actor, box, today):
    daily_entry_service.save_entries(today, [EntryUpdate(box_id=box.id, open_number=0, close_number=1)], actor=staff_actor)

    with pytest.raises(ConflictError):
        box_service.delete_box(box.id)


def test_delete_unused_box_removes_its_books(db_session, staff_actor, box, today):
    activated_book_service.create_book(box.id, today, 0, 50, actor=staff_actor)

    box_service.delete_box(box.id)

    assert db_session.query(ActivatedBook).count() == 0
    assert box_service.list_boxes() == []
