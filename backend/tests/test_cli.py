"""Flask CLI command tests."""

from datetime import timedelta

from lottodesk.models import ContinuityLog, User
from lottodesk.services import continuity_service, daily_entry_service
from lottodesk.services.daily_entry_service import EntryUpdate


def test_system_init_is_idempotent(app, db_session):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["system", "init"])
    second = runner.invoke(args=["system", "init"])

    assert first.exit_code == 0
    assert second.exit_code == 0
    assert "already exists" in second.output
    roles = {u.username: u.role for u in db_session.query(User).all()}
    assert roles == {"admin": "ADMIN", "staff": "STAFF"}


def test_users_create(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["users", "create", "--username", "sam", "--password", "Password123!", "--role", "admin"])

    assert result.exit_code == 0, result.output
    assert db_session.query(User).filter_by(username="sam").one().role == "ADMIN"


def test_users_create_weak_password_fails(app, db_session):
    result = app.test_cli_runner().invoke(args=["users", "create", "--username", "sam", "--password", "short"])
    assert result.exit_code != 0
    assert "Password validation failed" in result.output


def test_reports_daily_prints_dollars(app, db_session, staff_actor, box, today):
    daily_entry_service.save_entries(
        today, [EntryUpdate(box_id=box.id, open_number=0, close_number=10)], actor=staff_actor
    )

    result = app.test_cli_runner().invoke(args=["reports", "daily", "--date", today.isoformat()])

    assert result.exit_code == 0, result.output
    assert "scratch_sales" in result.output
    assert "20.00" in result.output


def test_reports_daily_rejects_bad_date(app, db_session):
    result = app.test_cli_runner().invoke(args=["reports", "daily", "--date", "yesterday"])
    assert result.exit_code != 0


def test_continuity_recheck(app, db_session, staff_actor, box, today, monkeypatch):
    # Save without the automatic check so the recheck has something to find
    monkeypatch.setattr(continuity_service, "run_continuity_check_safely", lambda *a, **k: ([], None))
    daily_entry_service.save_entries(
        today - timedelta(days=1), [EntryUpdate(box_id=box.id, open_number=0, close_number=10)], actor=staff_actor
    )
    daily_entry_service.save_entries(
        today, [EntryUpdate(box_id=box.id, open_number=13, close_number=20)], actor=staff_actor
    )
    monkeypatch.undo()
    assert db_session.query(ContinuityLog).count() == 0

    result = app.test_cli_runner().invoke(args=["continuity", "recheck", "--date", today.isoformat()])

    assert result.exit_code == 0, result.output
    assert "1 new mismatch" in result.output
    assert db_session.query(ContinuityLog).filter_by(date=today).count() == 1
