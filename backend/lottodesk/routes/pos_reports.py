# Overview: Flask API routes for grocery POS reports and register cash counts.

from flask import Blueprint, request, jsonify

from ..decorators import require_auth, current_actor
from ..services import pos_report_service
from ..validation import parse_business_date, parse_cents_field


pos_reports_bp = Blueprint("pos_reports", __name__, url_prefix="/api")


@pos_reports_bp.get("/pos-reports")
@require_auth
def list_pos_reports_route():
    reports = pos_report_service.list_pos_reports(limit=request.args.get("limit", 100, type=int))
    return jsonify({"pos_reports": [r.to_dict() for r in reports]}), 200


@pos_reports_bp.get("/pos-reports/<day>")
@require_auth
def get_pos_report_route(day: str):
    report = pos_report_service.get_pos_report(parse_business_date(day))
    return jsonify({"pos_report": report.to_dict() if report else None}), 200


@pos_reports_bp.put("/pos-reports/<day>")
@require_auth
def save_pos_report_route(day: str):
    """
    Request body:
    {
        "grocery_total": "845.20",
        "cash": "300.00",
        "card": "545.20",
        "raw_image_url": null
    }
    """
    data = request.get_json(silent=True) or {}
    report = pos_report_service.upsert_pos_report(
        parse_business_date(day),
        actor=current_actor(),
        grocery_total_cents=parse_cents_field(data, "grocery_total"),
        cash_cents=parse_cents_field(data, "cash", allow_negative=False) or 0,
        card_cents=parse_cents_field(data, "card", allow_negative=False) or 0,
        raw_image_url=data.get("raw_image_url"),
    )
    return jsonify({"pos_report": report.to_dict()}), 200


@pos_reports_bp.get("/cash-register/<day>")
@require_auth
def get_cash_register_route(day: str):
    row = pos_report_service.get_cash_register(parse_business_date(day))
    return jsonify({"cash_register": row.to_dict() if row else None}), 200


@pos_reports_bp.put("/cash-register/<day>")
@require_auth
def save_cash_register_route(day: str):
    data = request.get_json(silent=True) or {}
    row = pos_report_service.upsert_cash_register(
        parse_business_date(day),
        actor=current_actor(),
        lottery_cash_cents=parse_cents_field(data, "lottery_cash_at_register"),
        grocery_cash_cents=parse_cents_field(data, "grocery_cash_at_register"),
    )
    return jsonify({"cash_register": row.to_dict()}), 200
