# Overview: Service-layer operations for revenue summaries; encapsulates business logic and database work.

"""
Revenue Aggregator

Combines the day's streams into the figures the operator reconciles against:
scratch ticket sales (daily box entries), lottery terminal reports, grocery
POS totals, register cash counts and player credit.

All amounts are integer cents. Missing rows contribute 0; only a database
failure can raise, and the dashboard substitutes an all-zero summary then.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date, timedelta

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..errors import ValidationError
from ..extensions import db
from ..models import DailyBoxEntry, InstantCashoutReport, LotteryReport, OnlineSettlementReport
from lottodesk.time_utils import iter_dates, to_iso_date
from . import player_service, pos_report_service

WEEK_LENGTH_DAYS = 7


@dataclass
class DailySummary:
    date: str
    scratch_sales_cents: int = 0
    online_sales_cents: int = 0
    grocery_sales_cents: int = 0
    lottery_cashes_cents: int = 0
    player_balance_cents: int = 0
    expected_cash_cents: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


_SUMMED_FIELDS = [f.name for f in fields(DailySummary) if f.name != "date"]


@dataclass
class GeneratedReportFields:
    """The ten-line cash pickup sheet for one date."""
    date: str
    scratch_sales_cents: int
    online_ticket_sales_cents: int
    total_lottery_sales_cents: int
    total_lottery_cashing_cents: int
    total_lottery_due_cents: int
    total_daily_udhari_cents: int
    lottery_cash_in_hand_cents: int
    lottery_cash_at_register_cents: int | None
    total_grocery_cash_at_register_cents: int
    total_cash_in_hand_daily_for_pickup_cents: int

    def to_dict(self) -> dict:
        return asdict(self)


def _scratch_sales_cents(business_date: date) -> int:
    return int(
        db.session.query(func.coalesce(func.sum(DailyBoxEntry.sold_amount_cents), 0))
        .filter(DailyBoxEntry.date == business_date)
        .scalar() or 0
    )


def compute_daily_summary(business_date: date) -> DailySummary:
    """
    Daily summary.

    expected_cash = scratch + online + grocery - lottery_cashes
                    + player_payments - player_wins

    online_sales and lottery_cashes sum net_sales / net_due over every
    lottery report kind stored for the date.
    """
    scratch = _scratch_sales_cents(business_date)

    online_sales, lottery_cashes = db.session.query(
        func.coalesce(func.sum(LotteryReport.net_sales_cents), 0),
        func.coalesce(func.sum(LotteryReport.net_due_cents), 0),
    ).filter(LotteryReport.date == business_date).one()
    online_sales = int(online_sales or 0)
    lottery_cashes = int(lottery_cashes or 0)

    pos = pos_report_service.get_pos_report(business_date)
    grocery = pos.grocery_total_cents if pos else 0

    players = player_service.get_day_totals(business_date)

    expected_cash = (
        scratch
        + online_sales
        + grocery
        - lottery_cashes
        + players.payment_cents
        - players.win_cents
    )

    return DailySummary(
        date=to_iso_date(business_date),
        scratch_sales_cents=scratch,
        online_sales_cents=online_sales,
        grocery_sales_cents=grocery,
        lottery_cashes_cents=lottery_cashes,
        player_balance_cents=players.balance_cents,
        expected_cash_cents=expected_cash,
    )


def empty_summary(business_date: date) -> DailySummary:
    return DailySummary(date=to_iso_date(business_date))


def compute_daily_summary_or_zero(business_date: date) -> DailySummary:
    """Dashboard variant: a database failure yields an all-zero summary."""
    try:
        return compute_daily_summary(business_date)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Daily summary failed for %s", business_date.isoformat())
        return empty_summary(business_date)


def compute_date_range_summary(start_date: date, end_date: date) -> DailySummary:
    """Field-wise sum of the daily summaries for every day in [start, end]."""
    if start_date > end_date:
        raise ValidationError("start date must be on or before end date")

    total = DailySummary(date=f"{to_iso_date(start_date)} to {to_iso_date(end_date)}")
    for day in iter_dates(start_date, end_date):
        daily = compute_daily_summary(day)
        for name in _SUMMED_FIELDS:
            setattr(total, name, getattr(total, name) + getattr(daily, name))
    return total


def compute_weekly_summary(start_date: date) -> list[DailySummary]:
    """Seven consecutive daily summaries starting at start_date, in order."""
    return [
        compute_daily_summary(start_date + timedelta(days=offset))
        for offset in range(WEEK_LENGTH_DAYS)
    ]


def compute_generated_report_fields(business_date: date) -> GeneratedReportFields:
    """
    Cash pickup sheet.

    Unlike the daily summary, online ticket sales here come from the online
    settlement report only, and cashing combines the instant cash-out total
    with the settlement's cash value.
    """
    scratch = _scratch_sales_cents(business_date)

    online_ticket_sales = 0
    total_cashing = 0
    for report in db.session.query(LotteryReport).filter_by(date=business_date).all():
        if isinstance(report, OnlineSettlementReport):
            online_ticket_sales += report.net_sales_cents or 0
            total_cashing += report.cash_value_cents or 0
        elif isinstance(report, InstantCashoutReport):
            total_cashing += report.instant_total_cents or 0

    total_lottery_sales = scratch + online_ticket_sales
    total_lottery_due = total_lottery_sales - total_cashing

    daily_udhari = player_service.get_day_totals(business_date).balance_cents
    lottery_cash_in_hand = total_lottery_due - daily_udhari

    register = pos_report_service.get_cash_register(business_date)
    lottery_at_register = register.lottery_cash_at_register_cents if register else None

    if register is not None and register.grocery_cash_at_register_cents is not None:
        grocery_at_register = register.grocery_cash_at_register_cents
    else:
        pos = pos_report_service.get_pos_report(business_date)
        grocery_at_register = pos.grocery_total_cents if pos else 0

    return GeneratedReportFields(
        date=to_iso_date(business_date),
        scratch_sales_cents=scratch,
        online_ticket_sales_cents=online_ticket_sales,
        total_lottery_sales_cents=total_lottery_sales,
        total_lottery_cashing_cents=total_cashing,
        total_lottery_due_cents=total_lottery_due,
        total_daily_udhari_cents=daily_udhari,
        lottery_cash_in_hand_cents=lottery_cash_in_hand,
        lottery_cash_at_register_cents=lottery_at_register,
        total_grocery_cash_at_register_cents=grocery_at_register,
        total_cash_in_hand_daily_for_pickup_cents=lottery_cash_in_hand + grocery_at_register,
    )
