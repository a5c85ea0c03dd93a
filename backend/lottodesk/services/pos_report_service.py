# Overview: Service-layer operations for POS reports and register cash counts.

from __future__ import annotations

from datetime import date

from sqlalchemy.exc import IntegrityError

from ..errors import ValidationError, translate_integrity_error
from ..extensions import db
from ..models import DailyCashRegister, POSReport
from .auth_service import Actor, require_actor
from .concurrency import run_upsert


def get_pos_report(business_date: date) -> POSReport | None:
    return db.session.query(POSReport).filter_by(date=business_date).first()


def list_pos_reports(limit: int = 100) -> list[POSReport]:
    return db.session.query(POSReport).order_by(
        POSReport.date.desc(),
        POSReport.created_at.desc(),
    ).limit(limit).all()


def upsert_pos_report(
    business_date: date,
    *,
    actor: Actor | None,
    grocery_total_cents: int,
    cash_cents: int = 0,
    card_cents: int = 0,
    raw_image_url: str | None = None,
) -> POSReport:
    """
    Save the grocery POS totals for a date (one row per date).

    The numbers arrive already parsed from the receipt/file; this layer
    never reads the raw document.
    """
    actor = require_actor(actor)
    if grocery_total_cents is None:
        raise ValidationError("grocery_total is required")

    def _write() -> POSReport:
        report = get_pos_report(business_date)
        if report is None:
            report = POSReport(date=business_date)
            db.session.add(report)

        report.grocery_total_cents = grocery_total_cents
        report.cash_cents = cash_cents or 0
        report.card_cents = card_cents or 0
        report.raw_image_url = raw_image_url
        report.created_by_user_id = actor.user_id
        db.session.commit()
        return report

    try:
        return run_upsert(_write)
    except IntegrityError as exc:
        db.session.rollback()
        raise translate_integrity_error(exc, context="Saving POS report")


# =============================================================================
# REGISTER CASH COUNTS
# =============================================================================

def get_cash_register(business_date: date) -> DailyCashRegister | None:
    return db.session.get(DailyCashRegister, business_date)


def upsert_cash_register(
    business_date: date,
    *,
    actor: Actor | None,
    lottery_cash_cents: int | None,
    grocery_cash_cents: int | None,
) -> DailyCashRegister:
    """
    Save the hand-counted register cash for a date.

    None clears a value ("not counted"). The generated report picks the new
    values up on its next read; nothing is recomputed here.
    """
    actor = require_actor(actor)

    def _write() -> DailyCashRegister:
        row = get_cash_register(business_date)
        if row is None:
            row = DailyCashRegister(date=business_date)
            db.session.add(row)

        row.lottery_cash_at_register_cents = lottery_cash_cents
        row.grocery_cash_at_register_cents = grocery_cash_cents
        row.created_by_user_id = actor.user_id
        db.session.commit()
        return row

    try:
        return run_upsert(_write)
    except IntegrityError as exc:
        db.session.rollback()
        raise translate_integrity_error(exc, context="Saving register cash")
