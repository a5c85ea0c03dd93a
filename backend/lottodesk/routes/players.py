# Overview: Flask API routes for players and their credit transactions.

from flask import Blueprint, request, jsonify

from ..decorators import require_auth, current_actor
from ..services import player_service
from ..validation import parse_business_date, parse_cents_field


players_bp = Blueprint("players", __name__, url_prefix="/api/players")


@players_bp.get("")
@require_auth
def list_players_route():
    """Players with their all-time balances."""
    return jsonify({"players": player_service.get_balances()}), 200


@players_bp.post("")
@require_auth
def create_player_route():
    data = request.get_json(silent=True) or {}
    player = player_service.create_player(data.get("name"))
    return jsonify({"player": player.to_dict()}), 201


@players_bp.get("/<int:player_id>")
@require_auth
def get_player_route(player_id: int):
    player = player_service.get_player(player_id)
    data = player.to_dict()
    data["balance_cents"] = player_service.get_balance(player_id)
    return jsonify({"player": data}), 200


@players_bp.get("/<int:player_id>/transactions")
@require_auth
def list_transactions_route(player_id: int):
    transactions = player_service.get_transactions(player_id, limit=request.args.get("limit", 50, type=int))
    return jsonify({"transactions": [t.to_dict() for t in transactions]}), 200


@players_bp.post("/<int:player_id>/transactions")
@require_auth
def record_transaction_route(player_id: int):
    """
    Request body:
    {
        "transaction_type": "play" | "payment" | "win",
        "amount": "20.00",          (or amount_cents)
        "date": "2025-01-31",
        "note": "...",              (optional)
        "game_details": "..."       (optional)
    }
    """
    data = request.get_json(silent=True) or {}
    txn = player_service.record_transaction(
        player_id,
        data.get("transaction_type"),
        parse_cents_field(data, "amount"),
        parse_business_date(data.get("date")),
        actor=current_actor(),
        note=data.get("note"),
        game_details=data.get("game_details"),
    )
    return jsonify({
        "transaction": txn.to_dict(),
        "balance_cents": player_service.get_balance(player_id),
    }), 201


@players_bp.get("/daily-activities")
@require_auth
def daily_activities_route():
    business_date = parse_business_date(request.args.get("date"))
    return jsonify({
        "date": business_date.isoformat(),
        "activities": player_service.get_daily_activities(business_date),
    }), 200
