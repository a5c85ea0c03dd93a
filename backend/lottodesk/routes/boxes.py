# Overview: Flask API routes for boxes; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify

from ..decorators import require_auth, require_admin
from ..services import box_service
from ..validation import parse_cents_field, parse_optional_int


boxes_bp = Blueprint("boxes", __name__, url_prefix="/api/boxes")


def _box_fields(data: dict) -> dict:
    return {
        "name": data.get("name"),
        "ticket_value_cents": parse_cents_field(data, "ticket_value"),
        "category": data.get("category") or "regular",
        "box_number": parse_optional_int(data.get("box_number"), "box_number"),
    }


@boxes_bp.get("")
@require_auth
def list_boxes_route():
    return jsonify({"boxes": [b.to_dict() for b in box_service.list_boxes()]}), 200


@boxes_bp.post("")
@require_auth
@require_admin
def create_box_route():
    """
    Request body:
    {
        "name": "Lucky 7s",
        "ticket_value": "5.00",   (or "ticket_value_cents": 500)
        "category": "regular",
        "box_number": 12          (optional, 1..80)
    }
    """
    data = request.get_json(silent=True) or {}
    box = box_service.create_box(**_box_fields(data))
    return jsonify({"box": box.to_dict()}), 201


@boxes_bp.put("/<int:box_id>")
@require_auth
@require_admin
def update_box_route(box_id: int):
    data = request.get_json(silent=True) or {}
    box = box_service.update_box(box_id, **_box_fields(data))
    return jsonify({"box": box.to_dict()}), 200


@boxes_bp.delete("/<int:box_id>")
@require_auth
@require_admin
def delete_box_route(box_id: int):
    box_service.delete_box(box_id)
    return jsonify({"deleted": box_id}), 200
