# Overview: Flask API routes for daily box entries; parses input and returns JSON responses.

"""
Daily Entry API Routes

DESIGN:
- Full save, open-only save (store opens) and close-only save (store closes)
- POST .../submit locks the date; after that only admins can save it
- A save answers 200 with status "ok" or "partial" (saved with warnings)
"""

from flask import Blueprint, request, jsonify

from ..decorators import require_auth, current_actor
from ..services import daily_entry_service
from ..validation import parse_business_date


daily_entries_bp = Blueprint("daily_entries", __name__, url_prefix="/api/daily-entries")


def _updates_from_body():
    data = request.get_json(silent=True) or {}
    return daily_entry_service.parse_entry_updates(data.get("entries"))


@daily_entries_bp.get("/<day>")
@require_auth
def get_entries_route(day: str):
    business_date = parse_business_date(day)
    entries = daily_entry_service.get_entries_for_date(business_date)
    return jsonify({
        "date": business_date.isoformat(),
        "entries": [e.to_dict() for e in entries],
        "submission": daily_entry_service.get_submission_status(business_date),
    }), 200


@daily_entries_bp.put("/<day>")
@require_auth
def save_entries_route(day: str):
    """
    Request body:
    {
        "entries": [
            {"box_id": 1, "open_number": 10, "close_number": 25,
             "new_box_start_number": null, "activated_book_id": null}
        ]
    }
    "-" or "" for open/close means no ticket in the box. Leaving out
    new_box_start_number lets the save fill it in from that day's book;
    null stores no new box.
    """
    business_date = parse_business_date(day)
    result = daily_entry_service.save_entries(business_date, _updates_from_body(), actor=current_actor())
    return jsonify(result.to_dict()), 200


@daily_entries_bp.put("/<day>/open")
@require_auth
def save_open_route(day: str):
    business_date = parse_business_date(day)
    result = daily_entry_service.save_open_numbers(business_date, _updates_from_body(), actor=current_actor())
    return jsonify(result.to_dict()), 200


@daily_entries_bp.put("/<day>/close")
@require_auth
def save_close_route(day: str):
    business_date = parse_business_date(day)
    result = daily_entry_service.save_close_numbers(business_date, _updates_from_body(), actor=current_actor())
    return jsonify(result.to_dict()), 200


@daily_entries_bp.get("/<day>/submission")
@require_auth
def submission_status_route(day: str):
    business_date = parse_business_date(day)
    return jsonify(daily_entry_service.get_submission_status(business_date)), 200


@daily_entries_bp.post("/<day>/submit")
@require_auth
def submit_day_route(day: str):
    business_date = parse_business_date(day)
    daily_entry_service.submit_day(business_date, actor=current_actor())
    return jsonify(daily_entry_service.get_submission_status(business_date)), 200
