# Overview: Flask API routes for activated books; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify

from ..decorators import require_auth, current_actor
from ..services import activated_book_service
from ..validation import parse_business_date, parse_int, parse_optional_int


activated_books_bp = Blueprint("activated_books", __name__, url_prefix="/api/activated-books")


@activated_books_bp.get("")
@require_auth
def list_books_route():
    """
    GET /api/activated-books?date=2025-01-31          -> current book per box for that date
    GET /api/activated-books?box_id=3&from=...&limit= -> recent books, newest first
    """
    if request.args.get("date"):
        books = activated_book_service.list_for_date(parse_business_date(request.args["date"]))
    else:
        from_date = request.args.get("from")
        books = activated_book_service.list_recent(
            box_id=parse_optional_int(request.args.get("box_id"), "box_id"),
            from_date=parse_business_date(from_date, "from") if from_date else None,
            limit=request.args.get("limit", 100, type=int),
            offset=request.args.get("offset", 0, type=int),
        )
    return jsonify({"activated_books": [b.to_dict(include_box=True) for b in books]}), 200


@activated_books_bp.post("")
@require_auth
def create_book_route():
    """
    Request body:
    {
        "box_id": 3,
        "activated_date": "2025-01-31",
        "start_ticket_number": 0,
        "ticket_count": 50,
        "note": "new roll"   (optional)
    }
    """
    data = request.get_json(silent=True) or {}
    book = activated_book_service.create_book(
        box_id=parse_int(data.get("box_id"), "box_id"),
        activated_date=parse_business_date(data.get("activated_date"), "activated_date"),
        start_ticket_number=parse_int(data.get("start_ticket_number", 0), "start_ticket_number"),
        ticket_count=parse_int(data.get("ticket_count"), "ticket_count"),
        note=data.get("note"),
        actor=current_actor(),
    )
    return jsonify({"activated_book": book.to_dict(include_box=True)}), 201


@activated_books_bp.patch("/<int:book_id>")
@require_auth
def update_book_route(book_id: int):
    data = request.get_json(silent=True) or {}
    activated_date = data.get("activated_date")
    book = activated_book_service.update_book(
        book_id,
        actor=current_actor(),
        activated_date=parse_business_date(activated_date, "activated_date") if activated_date else None,
        start_ticket_number=parse_optional_int(data.get("start_ticket_number"), "start_ticket_number"),
        ticket_count=parse_optional_int(data.get("ticket_count"), "ticket_count"),
        note=data.get("note"),
    )
    return jsonify({"activated_book": book.to_dict(include_box=True)}), 200


@activated_books_bp.delete("/<int:book_id>")
@require_auth
def delete_book_route(book_id: int):
    activated_book_service.delete_book(book_id, actor=current_actor())
    return jsonify({"deleted": book_id}), 200
