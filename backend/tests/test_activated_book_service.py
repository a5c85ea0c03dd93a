"""Activated book registry tests."""

from datetime import timedelta

import pytest

from lottodesk.errors import AuthenticationRequiredError, NotFoundError, ValidationError
from lottodesk.models import DailyBoxEntry
from lottodesk.services import activated_book_service, daily_entry_service
from lottodesk.services.daily_entry_service import EntryUpdate


def test_create_book_derives_end_number(db_session, staff_actor, box, today):
    book = activated_book_service.create_book(box.id, today, 0, 50, note="new roll", actor=staff_actor)

    assert book.end_ticket_number == 49
    assert book.created_by_user_id == staff_actor.user_id
    assert book.to_dict()["end_ticket_number"] == 49


@pytest.mark.parametrize("start,count", [(-1, 50), (0, 0), (5, -3)])
def test_create_book_validates(db_session, staff_actor, box, today, start, count):
    with pytest.raises(ValidationError):
        activated_book_service.create_book(box.id, today, start, count, actor=staff_actor)


def test_create_book_requires_actor(db_session, box, today):
    with pytest.raises(AuthenticationRequiredError):
        activated_book_service.create_book(box.id, today, 0, 50, actor=None)


def test_create_book_unknown_box(db_session, staff_actor, today):
    with pytest.raises(NotFoundError):
        activated_book_service.create_book(4242, today, 0, 50, actor=staff_actor)


def test_update_book_keeps_omitted_fields(db_session, staff_actor, box, today):
    book = activated_book_service.create_book(box.id, today, 0, 50, note="roll A", actor=staff_actor)

    updated = activated_book_service.update_book(book.id, actor=staff_actor, ticket_count=100)

    assert updated.ticket_count == 100
    assert updated.start_ticket_number == 0
    assert updated.note == "roll A"


def test_update_book_validates(db_session, staff_actor, box, today):
    book = activated_book_service.create_book(box.id, today, 0, 50, actor=staff_actor)
    with pytest.raises(ValidationError):
        activated_book_service.update_book(book.id, actor=staff_actor, ticket_count=0)


def test_delete_book_unlinks_entries(db_session, staff_actor, box, today):
    book = activated_book_service.create_book(box.id, today, 0, 50, actor=staff_actor)
    daily_entry_service.save_entries(
        today, [EntryUpdate(box_id=box.id, open_number=10, close_number=5)], actor=staff_actor
    )

    activated_book_service.delete_book(book.id, actor=staff_actor)

    db_session.expire_all()
    entry = db_session.query(DailyBoxEntry).filter_by(date=today, box_id=box.id).one()
    assert entry.activated_book_id is None
    assert entry.new_box_start_number == 0
    with pytest.raises(NotFoundError):
        activated_book_service.get_book(book.id)


def test_list_for_date_returns_newest_per_box(db_session, staff_actor, box, ten_dollar_box, today):
    activated_book_service.create_book(box.id, today, 0, 50, actor=staff_actor)
    newer = activated_book_service.create_book(box.id, today, 100, 50, actor=staff_actor)
    other = activated_book_service.create_book(ten_dollar_box.id, today, 0, 30, actor=staff_actor)
    activated_book_service.create_book(box.id, today - timedelta(days=1), 0, 50, actor=staff_actor)

    books = {b.box_id: b for b in activated_book_service.list_for_date(today)}

    assert len(books) == 2
    assert books[box.id].id == newer.id
    assert books[ten_dollar_box.id].id == other.id
    assert activated_book_service.get_current_for_box(box.id, today).id == newer.id


def test_list_recent_orders_and_filters(db_session, staff_actor, box, ten_dollar_box, today):
    old = activated_book_service.create_book(box.id, today - timedelta(days=3), 0, 50, actor=staff_actor)
    mid = activated_book_service.create_book(box.id, today - timedelta(days=1), 0, 50, actor=staff_actor)
    activated_book_service.create_book(ten_dollar_box.id, today, 0, 30, actor=staff_actor)

    assert [b.id for b in activated_book_service.list_recent(box_id=box.id)] == [mid.id, old.id]
    assert len(activated_book_service.list_recent(from_date=today - timedelta(days=1))) == 2
    assert [b.id for b in activated_book_service.list_recent(box_id=box.id, limit=1, offset=1)] == [old.id]
