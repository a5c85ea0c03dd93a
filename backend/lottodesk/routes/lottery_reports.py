# Overview: Flask API routes for lottery terminal reports; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify

from ..decorators import require_auth, current_actor
from ..services import lottery_report_service
from ..validation import parse_business_date, parse_cents_field, parse_optional_int


lottery_reports_bp = Blueprint("lottery_reports", __name__, url_prefix="/api/lottery-reports")


def _common_fields(data: dict) -> dict:
    return {
        "commission_cents": parse_cents_field(data, "commission"),
        "net_sales_cents": parse_cents_field(data, "net_sales"),
        "net_due_cents": parse_cents_field(data, "net_due"),
        "raw_image_url": data.get("raw_image_url"),
    }


@lottery_reports_bp.get("")
@require_auth
def list_reports_route():
    """
    GET /api/lottery-reports?date=2025-01-31 -> reports for that date
    GET /api/lottery-reports?limit=50        -> most recent reports
    """
    if request.args.get("date"):
        reports = lottery_report_service.get_reports_for_date(parse_business_date(request.args["date"]))
    else:
        reports = lottery_report_service.list_reports(limit=request.args.get("limit", 100, type=int))
    return jsonify({"reports": [r.to_dict() for r in reports]}), 200


@lottery_reports_bp.put("/<day>/instant-cashout")
@require_auth
def save_instant_cashout_route(day: str):
    """
    Request body (dollars, or the same keys suffixed _cents in cents):
    {
        "instant_ticket_count": 40,
        "instant_total": "312.00",
        "commission": "15.60",
        "net_sales": null,
        "net_due": null
    }
    """
    data = request.get_json(silent=True) or {}
    report = lottery_report_service.save_instant_cashout_report(
        parse_business_date(day),
        actor=current_actor(),
        instant_ticket_count=parse_optional_int(data.get("instant_ticket_count"), "instant_ticket_count"),
        instant_total_cents=parse_cents_field(data, "instant_total"),
        **_common_fields(data),
    )
    return jsonify({"report": report.to_dict()}), 200


@lottery_reports_bp.put("/<day>/online-settlement")
@require_auth
def save_online_settlement_route(day: str):
    """
    Request body: any settlement line (total_sales, discount, cancels,
    free_bets, cash_value, cash_bonus, service_fee, ...) plus commission.
    net_sales / net_due are derived unless given.
    """
    data = request.get_json(silent=True) or {}

    line_items = {}
    for name in lottery_report_service.SETTLEMENT_LINE_ITEMS:
        if name.endswith("_cents"):
            line_items[name] = parse_cents_field(data, name[:-len("_cents")])
        else:
            line_items[name] = parse_optional_int(data.get(name), name, minimum=0)

    report = lottery_report_service.save_online_settlement_report(
        parse_business_date(day),
        actor=current_actor(),
        **_common_fields(data),
        **line_items,
    )
    return jsonify({"report": report.to_dict()}), 200


@lottery_reports_bp.get("/<day>/<kind>")
@require_auth
def get_report_route(day: str, kind: str):
    report = lottery_report_service.get_report(parse_business_date(day), kind.replace("-", "_"))
    return jsonify({"report": report.to_dict() if report else None}), 200
