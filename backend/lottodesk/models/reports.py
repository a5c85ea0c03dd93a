from __future__ import annotations

from ..extensions import db
from lottodesk.time_utils import to_iso_date, to_utc_z

REPORT_KIND_INSTANT_CASHOUT = "instant_cashout"
REPORT_KIND_ONLINE_SETTLEMENT = "online_settlement"
REPORT_KINDS = (REPORT_KIND_INSTANT_CASHOUT, REPORT_KIND_ONLINE_SETTLEMENT)


class LotteryReport(db.Model):
    """
    Lottery terminal report for one date, one row per (date, report_kind).

    DESIGN: Single-table inheritance keyed on report_kind. Each kind is its own
    class with its own fields; the shared columns are the net figures the
    revenue aggregation reads and the receipt image reference.
    """
    __tablename__ = "lottery_reports"
    __table_args__ = (
        db.UniqueConstraint("date", "report_kind", name="uq_lottery_reports_date_kind"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    report_kind = db.Column(db.String(32), nullable=False)

    commission_cents = db.Column(db.Integer, nullable=True)
    net_sales_cents = db.Column(db.Integer, nullable=True)
    net_due_cents = db.Column(db.Integer, nullable=True)
    raw_image_url = db.Column(db.String(512), nullable=True)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    __mapper_args__ = {"polymorphic_on": report_kind}

    def _base_dict(self) -> dict:
        return {
            "id": self.id,
            "date": to_iso_date(self.date),
            "report_kind": self.report_kind,
            "commission_cents": self.commission_cents,
            "net_sales_cents": self.net_sales_cents,
            "net_due_cents": self.net_due_cents,
            "raw_image_url": self.raw_image_url,
            "created_by_user_id": self.created_by_user_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }

    def to_dict(self) -> dict:
        return self._base_dict()


class InstantCashoutReport(LotteryReport):
    """Instant ticket cash-out report: figures are entered as printed, nothing derived."""
    instant_ticket_count = db.Column(db.Integer, nullable=True)
    instant_total_cents = db.Column(db.Integer, nullable=True)

    __mapper_args__ = {"polymorphic_identity": REPORT_KIND_INSTANT_CASHOUT}

    def to_dict(self) -> dict:
        data = self._base_dict()
        data.update({
            "instant_ticket_count": self.instant_ticket_count,
            "instant_total_cents": self.instant_total_cents,
        })
        return data


class OnlineSettlementReport(LotteryReport):
    """
    Online/instant settlement report.

    net_sales and net_due are derived from the raw lines at write time unless
    the caller supplies them explicitly.
    """
    event_count = db.Column(db.Integer, nullable=True)
    event_value_cents = db.Column(db.Integer, nullable=True)
    total_sales_cents = db.Column(db.Integer, nullable=True)
    season_tkts_cents = db.Column(db.Integer, nullable=True)
    discount_cents = db.Column(db.Integer, nullable=True)
    cancels_cents = db.Column(db.Integer, nullable=True)
    free_bets_cents = db.Column(db.Integer, nullable=True)
    cash_count = db.Column(db.Integer, nullable=True)
    cash_value_cents = db.Column(db.Integer, nullable=True)
    cash_bonus_cents = db.Column(db.Integer, nullable=True)
    claims_bonus_cents = db.Column(db.Integer, nullable=True)
    adjustments_cents = db.Column(db.Integer, nullable=True)
    service_fee_cents = db.Column(db.Integer, nullable=True)

    __mapper_args__ = {"polymorphic_identity": REPORT_KIND_ONLINE_SETTLEMENT}

    def to_dict(self) -> dict:
        data = self._base_dict()
        data.update({
            "event_count": self.event_count,
            "event_value_cents": self.event_value_cents,
            "total_sales_cents": self.total_sales_cents,
            "season_tkts_cents": self.season_tkts_cents,
            "discount_cents": self.discount_cents,
            "cancels_cents": self.cancels_cents,
            "free_bets_cents": self.free_bets_cents,
            "cash_count": self.cash_count,
            "cash_value_cents": self.cash_value_cents,
            "cash_bonus_cents": self.cash_bonus_cents,
            "claims_bonus_cents": self.claims_bonus_cents,
            "adjustments_cents": self.adjustments_cents,
            "service_fee_cents": self.service_fee_cents,
        })
        return data


class POSReport(db.Model):
    """Grocery POS end-of-day totals, one row per date."""
    __tablename__ = "pos_reports"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, unique=True)
    grocery_total_cents = db.Column(db.Integer, nullable=False, default=0)
    cash_cents = db.Column(db.Integer, nullable=False, default=0)
    card_cents = db.Column(db.Integer, nullable=False, default=0)
    raw_image_url = db.Column(db.String(512), nullable=True)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": to_iso_date(self.date),
            "grocery_total_cents": self.grocery_total_cents,
            "cash_cents": self.cash_cents,
            "card_cents": self.card_cents,
            "raw_image_url": self.raw_image_url,
            "created_by_user_id": self.created_by_user_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class DailyCashRegister(db.Model):
    """
    Cash counted at the registers, entered by hand for one date.

    Both values are nullable: "not counted yet" is different from zero.
    """
    __tablename__ = "daily_cash_register"

    date = db.Column(db.Date, primary_key=True)
    lottery_cash_at_register_cents = db.Column(db.Integer, nullable=True)
    grocery_cash_at_register_cents = db.Column(db.Integer, nullable=True)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "date": to_iso_date(self.date),
            "lottery_cash_at_register_cents": self.lottery_cash_at_register_cents,
            "grocery_cash_at_register_cents": self.grocery_cash_at_register_cents,
            "created_by_user_id": self.created_by_user_id,
            "updated_at": to_utc_z(self.updated_at),
        }
