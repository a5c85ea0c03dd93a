"""POS report and register cash count tests."""

import pytest

from lottodesk.errors import AuthenticationRequiredError, ValidationError
from lottodesk.models import POSReport
from lottodesk.services import pos_report_service


def test_upsert_pos_report_one_row_per_date(db_session, staff_actor, today):
    pos_report_service.upsert_pos_report(today, actor=staff_actor, grocery_total_cents=1000, cash_cents=400, card_cents=600)
    report = pos_report_service.upsert_pos_report(today, actor=staff_actor, grocery_total_cents=1500)

    assert db_session.query(POSReport).filter_by(date=today).count() == 1
    assert report.grocery_total_cents == 1500
    assert report.cash_cents == 0
    assert report.card_cents == 0


def test_pos_report_requires_total(db_session, staff_actor, today):
    with pytest.raises(ValidationError):
        pos_report_service.upsert_pos_report(today, actor=staff_actor, grocery_total_cents=None)


def test_pos_report_requires_actor(db_session, today):
    with pytest.raises(AuthenticationRequiredError):
        pos_report_service.upsert_pos_report(today, actor=None, grocery_total_cents=1)


def test_cash_register_none_means_not_counted(db_session, staff_actor, today):
    pos_report_service.upsert_cash_register(today, actor=staff_actor, lottery_cash_cents=0, grocery_cash_cents=None)

    row = pos_report_service.get_cash_register(today)
    assert row.lottery_cash_at_register_cents == 0
    assert row.grocery_cash_at_register_cents is None


def test_cash_register_update_in_place(db_session, staff_actor, admin_actor, today):
    pos_report_service.upsert_cash_register(today, actor=staff_actor, lottery_cash_cents=100, grocery_cash_cents=200)
    row = pos_report_service.upsert_cash_register(today, actor=admin_actor, lottery_cash_cents=300, grocery_cash_cents=400)

    assert row.lottery_cash_at_register_cents == 300
    assert row.created_by_user_id == admin_actor.user_id


def test_pos_report_insert_race_updates_winning_row(db_session, staff_actor, admin_actor, today, monkeypatch):
    real_get = pos_report_service.get_pos_report
    reads = []

    def miss_first_read(business_date):
        # Another request inserts and commits the row after this read misses it
        if not reads:
            reads.append(business_date)
            db_session.execute(POSReport.__table__.insert().values(
                date=business_date, grocery_total_cents=700, cash_cents=0, card_cents=0,
                created_by_user_id=admin_actor.user_id,
            ))
            db_session.commit()
            return None
        return real_get(business_date)

    monkeypatch.setattr(pos_report_service, "get_pos_report", miss_first_read)

    report = pos_report_service.upsert_pos_report(today, actor=staff_actor, grocery_total_cents=1500)

    db_session.expire_all()
    rows = db_session.query(POSReport).filter_by(date=today).all()
    assert len(rows) == 1
    assert rows[0].id == report.id
    assert rows[0].grocery_total_cents == 1500
    assert rows[0].created_by_user_id == staff_actor.user_id
