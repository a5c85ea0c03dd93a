# Overview: Flask API routes for revenue summaries, continuity logs and the dashboard.

from flask import Blueprint, request, jsonify

from ..decorators import require_auth
from ..services import continuity_service, player_service, summary_service
from ..validation import parse_business_date


summaries_bp = Blueprint("summaries", __name__, url_prefix="/api")


@summaries_bp.get("/summaries/daily")
@require_auth
def daily_summary_route():
    business_date = parse_business_date(request.args.get("date"))
    return jsonify({"summary": summary_service.compute_daily_summary(business_date).to_dict()}), 200


@summaries_bp.get("/summaries/range")
@require_auth
def range_summary_route():
    start = parse_business_date(request.args.get("start"), "start")
    end = parse_business_date(request.args.get("end"), "end")
    return jsonify({"summary": summary_service.compute_date_range_summary(start, end).to_dict()}), 200


@summaries_bp.get("/summaries/weekly")
@require_auth
def weekly_summary_route():
    start = parse_business_date(request.args.get("start"), "start")
    days = summary_service.compute_weekly_summary(start)
    return jsonify({"days": [d.to_dict() for d in days]}), 200


@summaries_bp.get("/summaries/generated-report")
@require_auth
def generated_report_route():
    business_date = parse_business_date(request.args.get("date"))
    return jsonify({"report": summary_service.compute_generated_report_fields(business_date).to_dict()}), 200


@summaries_bp.get("/continuity")
@require_auth
def continuity_logs_route():
    day = request.args.get("date")
    logs = continuity_service.get_continuity_logs(
        parse_business_date(day) if day else None,
        limit=request.args.get("limit", 100, type=int),
    )
    return jsonify({"logs": [log.to_dict() for log in logs]}), 200


@summaries_bp.get("/continuity/mismatch-count")
@require_auth
def mismatch_count_route():
    business_date = parse_business_date(request.args.get("date"))
    return jsonify({
        "date": business_date.isoformat(),
        "count": continuity_service.get_mismatch_count(business_date),
    }), 200


@summaries_bp.get("/dashboard")
@require_auth
def dashboard_route():
    """
    Dashboard bundle for one date: summary (all zeros on a database
    failure), the continuity mismatch count and every
    player balance.
    """
    business_date = parse_business_date(request.args.get("date"))
    return jsonify({
        "date": business_date.isoformat(),
        "summary": summary_service.compute_daily_summary_or_zero(business_date).to_dict(),
        "mismatch_count": continuity_service.get_mismatch_count(business_date),
        "player_balances": player_service.get_balances(),
    }), 200
