# Overview: Service-layer operations for ticket continuity; encapsulates business logic and database work.

"""
Ticket Continuity Checker

WHY: Tickets in a box are physically continuous, so a box's opening number
today should equal its closing number yesterday unless a new roll was loaded.
Anything else means tickets went missing or a reading was mistyped.

DESIGN PRINCIPLES:
- Compares against the entry on the immediately preceding date only
- Boxes with a new roll on the date (new_box_start_number set, or an
  activated book dated that day) are exempt
- An absent reading on either side is not compared
- Logs are append-only; an identical mismatch already logged for the same
  (date, box) is not logged twice
- Never fails the save it runs after (see run_continuity_check_safely)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import ActivatedBook, ContinuityLog, DailyBoxEntry
from ..models.entries import SEVERITY_CRITICAL, SEVERITY_ERROR, SEVERITY_WARNING

DEFAULT_WARNING_THRESHOLD = 5
DEFAULT_ERROR_THRESHOLD = 20


@dataclass(frozen=True)
class SeverityThresholds:
    warning: int = DEFAULT_WARNING_THRESHOLD
    error: int = DEFAULT_ERROR_THRESHOLD

    @classmethod
    def from_config(cls) -> "SeverityThresholds":
        config = current_app.config
        return cls(
            warning=int(config.get("CONTINUITY_WARNING_THRESHOLD", DEFAULT_WARNING_THRESHOLD)),
            error=int(config.get("CONTINUITY_ERROR_THRESHOLD", DEFAULT_ERROR_THRESHOLD)),
        )


def classify_severity(difference: int, thresholds: SeverityThresholds | None = None) -> str | None:
    """
    Severity band for an open-vs-previous-close difference.

    0 -> None (continuous), then warning / error / critical by magnitude.
    """
    thresholds = thresholds or SeverityThresholds()
    magnitude = abs(difference)
    if magnitude == 0:
        return None
    if magnitude <= thresholds.warning:
        return SEVERITY_WARNING
    if magnitude <= thresholds.error:
        return SEVERITY_ERROR
    return SEVERITY_CRITICAL


def _has_activation(box_id: int, business_date: date) -> bool:
    return db.session.query(ActivatedBook.id).filter_by(
        box_id=box_id,
        activated_date=business_date,
    ).first() is not None


def _already_logged(entry: DailyBoxEntry, prev_close: int) -> bool:
    """True when this (date, box) already has a log for the same pair of readings."""
    return db.session.query(ContinuityLog).filter_by(
        date=entry.date,
        box_id=entry.box_id,
        prev_close=prev_close,
        today_open=entry.open_number,
    ).first() is not None


def check_entry(entry: DailyBoxEntry, thresholds: SeverityThresholds | None = None) -> ContinuityLog | None:
    """
    Compare one entry against the same box's entry on the previous day.

    Adds (does not commit) a ContinuityLog when a new mismatch is found.
    """
    if entry.open_number is None:
        return None
    if entry.new_box_start_number is not None or _has_activation(entry.box_id, entry.date):
        return None

    previous = db.session.query(DailyBoxEntry).filter_by(
        box_id=entry.box_id,
        date=entry.date - timedelta(days=1),
    ).first()
    if previous is None or previous.close_number is None:
        return None

    difference = entry.open_number - previous.close_number
    severity = classify_severity(difference, thresholds)
    if severity is None or _already_logged(entry, previous.close_number):
        return None

    log = ContinuityLog(
        date=entry.date,
        box_id=entry.box_id,
        prev_close=previous.close_number,
        today_open=entry.open_number,
        difference=difference,
        severity=severity,
    )
    db.session.add(log)
    return log


def run_continuity_check(business_date: date, box_ids: list[int]) -> list[ContinuityLog]:
    """
    Check the given boxes on business_date and on the following day.

    The following day is included because changing today's close can create
    (or resolve) a mismatch with tomorrow's open.
    """
    if not box_ids:
        return []

    thresholds = SeverityThresholds.from_config()
    entries = db.session.query(DailyBoxEntry).filter(
        DailyBoxEntry.box_id.in_(box_ids),
        DailyBoxEntry.date.in_([business_date, business_date + timedelta(days=1)]),
    ).order_by(DailyBoxEntry.date, DailyBoxEntry.box_id).all()

    logs = []
    for entry in entries:
        log = check_entry(entry, thresholds)
        if log is not None:
            logs.append(log)

    db.session.commit()
    return logs


def run_continuity_check_safely(business_date: date, box_ids: list[int]) -> tuple[list[ContinuityLog], str | None]:
    """
    Best-effort wrapper used after entries are committed.

    Returns (logs, warning). A failure is logged and reported as a warning;
    it never propagates to the save that triggered it.
    """
    try:
        return run_continuity_check(business_date, box_ids), None
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Continuity check failed for %s", business_date.isoformat())
        return [], "Entries saved, but the ticket continuity check could not run"


def get_continuity_logs(business_date: date | None = None, limit: int = 100) -> list[ContinuityLog]:
    """Logs newest first, optionally for one date."""
    query = db.session.query(ContinuityLog)
    if business_date is not None:
        query = query.filter(ContinuityLog.date == business_date)
    return query.order_by(
        ContinuityLog.date.desc(),
        ContinuityLog.created_at.desc(),
        ContinuityLog.id.desc(),
    ).limit(limit).all()


def get_mismatch_count(business_date: date) -> int:
    """Dashboard KPI: number of mismatches logged for the date."""
    return int(
        db.session.query(func.count(ContinuityLog.id)).filter(
            ContinuityLog.date == business_date,
            ContinuityLog.severity.in_([SEVERITY_WARNING, SEVERITY_ERROR, SEVERITY_CRITICAL]),
        ).scalar() or 0
    )
