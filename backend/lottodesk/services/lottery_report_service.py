# Overview: Service-layer operations for lottery reports; encapsulates business logic and database work.

"""
Lottery Settlement Calculator and report store.

Two report kinds share one table (see models.reports):
- instant_cashout: entered as printed, no derived fields
- online_settlement: net sales and net due derived from the raw lines

Formulas (missing raw lines count as 0):
    net_sales = total_sales - discount - cancels - free_bets
    net_due   = net_sales - commission - cash_value - cash_bonus + service_fee

An explicit net value from the caller is stored as-is (manual override).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import ValidationError, translate_integrity_error
from ..extensions import db
from ..models import InstantCashoutReport, LotteryReport, OnlineSettlementReport
from ..models.reports import REPORT_KINDS
from .auth_service import Actor, require_actor
from .concurrency import run_upsert

_SETTLEMENT_SALES_FIELDS = ("total_sales_cents", "discount_cents", "cancels_cents", "free_bets_cents")
SETTLEMENT_LINE_ITEMS = (
    "event_count",
    "event_value_cents",
    "total_sales_cents",
    "season_tkts_cents",
    "discount_cents",
    "cancels_cents",
    "free_bets_cents",
    "cash_count",
    "cash_value_cents",
    "cash_bonus_cents",
    "claims_bonus_cents",
    "adjustments_cents",
    "service_fee_cents",
)


@dataclass
class ReportSaveResult:
    report: LotteryReport
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "status": "partial" if self.warnings else "ok",
            "report": self.report.to_dict(),
            "warnings": self.warnings,
        }


def compute_net_sales(
    total_sales_cents: int | None,
    discount_cents: int | None = None,
    cancels_cents: int | None = None,
    free_bets_cents: int | None = None,
) -> int:
    return (total_sales_cents or 0) - (discount_cents or 0) - (cancels_cents or 0) - (free_bets_cents or 0)


def compute_net_due(
    net_sales_cents: int,
    commission_cents: int | None = None,
    cash_value_cents: int | None = None,
    cash_bonus_cents: int | None = None,
    service_fee_cents: int | None = None,
) -> int:
    return (
        net_sales_cents
        - (commission_cents or 0)
        - (cash_value_cents or 0)
        - (cash_bonus_cents or 0)
        + (service_fee_cents or 0)
    )


def derive_settlement_totals(
    fields: dict,
    *,
    commission_cents: int | None = None,
    net_sales_cents: int | None = None,
    net_due_cents: int | None = None,
) -> tuple[int | None, int | None]:
    """
    Resolve (net_sales, net_due) for a settlement report.

    net_sales is derived only when no override is given and at least one
    sales line was supplied; net_due is derived whenever a net_sales exists
    and no override is given.
    """
    if net_sales_cents is None and any(fields.get(k) is not None for k in _SETTLEMENT_SALES_FIELDS):
        net_sales_cents = compute_net_sales(
            fields.get("total_sales_cents"),
            fields.get("discount_cents"),
            fields.get("cancels_cents"),
            fields.get("free_bets_cents"),
        )
    if net_due_cents is None and net_sales_cents is not None:
        net_due_cents = compute_net_due(
            net_sales_cents,
            commission_cents,
            fields.get("cash_value_cents"),
            fields.get("cash_bonus_cents"),
            fields.get("service_fee_cents"),
        )
    return net_sales_cents, net_due_cents


def _upsert(model, business_date: date, actor: Actor, values: dict) -> LotteryReport:
    def _write() -> LotteryReport:
        report = db.session.query(model).filter_by(date=business_date).first()
        if report is None:
            report = model(date=business_date)
            db.session.add(report)

        for key, value in values.items():
            setattr(report, key, value)
        report.created_by_user_id = actor.user_id
        db.session.commit()
        return report

    try:
        return run_upsert(_write)
    except IntegrityError as exc:
        db.session.rollback()
        raise translate_integrity_error(exc, context="Saving lottery report")


def save_instant_cashout_report(
    business_date: date,
    *,
    actor: Actor | None,
    instant_ticket_count: int | None = None,
    instant_total_cents: int | None = None,
    commission_cents: int | None = None,
    net_sales_cents: int | None = None,
    net_due_cents: int | None = None,
    raw_image_url: str | None = None,
) -> LotteryReport:
    actor = require_actor(actor)
    if instant_ticket_count is not None and instant_ticket_count < 0:
        raise ValidationError("instant_ticket_count cannot be negative")

    return _upsert(InstantCashoutReport, business_date, actor, {
        "instant_ticket_count": instant_ticket_count,
        "instant_total_cents": instant_total_cents,
        "commission_cents": commission_cents,
        "net_sales_cents": net_sales_cents,
        "net_due_cents": net_due_cents,
        "raw_image_url": raw_image_url,
    })


def save_online_settlement_report(
    business_date: date,
    *,
    actor: Actor | None,
    commission_cents: int | None = None,
    net_sales_cents: int | None = None,
    net_due_cents: int | None = None,
    raw_image_url: str | None = None,
    **line_items,
) -> LotteryReport:
    """
    Upsert the settlement report for a date.

    line_items takes the raw report lines (total_sales_cents, discount_cents,
    cash_value_cents, ...). Unknown keys are rejected.
    """
    actor = require_actor(actor)
    unknown = set(line_items) - set(SETTLEMENT_LINE_ITEMS)
    if unknown:
        raise ValidationError(f"Unknown settlement fields: {', '.join(sorted(unknown))}")

    fields = {key: line_items.get(key) for key in SETTLEMENT_LINE_ITEMS}
    net_sales_cents, net_due_cents = derive_settlement_totals(
        fields,
        commission_cents=commission_cents,
        net_sales_cents=net_sales_cents,
        net_due_cents=net_due_cents,
    )

    values = dict(fields)
    values.update({
        "commission_cents": commission_cents,
        "net_sales_cents": net_sales_cents,
        "net_due_cents": net_due_cents,
        "raw_image_url": raw_image_url,
    })
    return _upsert(OnlineSettlementReport, business_date, actor, values)


def attach_receipt_image(report, upload: Callable[[], str]) -> list[str]:
    """
    Store a receipt image reference on an already saved report.

    upload is the image-storage collaborator; it returns the stored URL. The
    report numbers are already committed, so an upload failure is logged and
    returned as a warning rather than raised.
    """
    try:
        url = upload()
    except Exception:
        current_app.logger.exception("Receipt image upload failed for %s %s", type(report).__name__, report.id)
        return ["Report saved, but the receipt image could not be uploaded"]

    report.raw_image_url = url
    db.session.commit()
    return []


def get_reports_for_date(business_date: date) -> list[LotteryReport]:
    return db.session.query(LotteryReport).filter_by(date=business_date).order_by(LotteryReport.created_at).all()


def get_report(business_date: date, report_kind: str) -> LotteryReport | None:
    if report_kind not in REPORT_KINDS:
        raise ValidationError(f"report_kind must be one of: {', '.join(REPORT_KINDS)}")
    return db.session.query(LotteryReport).filter_by(date=business_date, report_kind=report_kind).first()


def list_reports(limit: int = 100) -> list[LotteryReport]:
    return db.session.query(LotteryReport).order_by(
        LotteryReport.date.desc(),
        LotteryReport.created_at.desc(),
    ).limit(limit).all()

