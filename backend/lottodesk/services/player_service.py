# Overview: Service-layer operations for player credit; encapsulates business logic and database work.

"""
Player Credit Ledger

WHY: Regulars play on credit ("udhari") and settle later. The store needs to
know what each player owes and how credit moved on a given day.

DESIGN PRINCIPLES:
- Transactions are append-only; nothing is updated or deleted
- Amounts are stored non-negative, the type carries the sign
- Balance = sum(play) - sum(payment) - sum(win); positive means the player owes
- Rows with a missing/unknown type count as play (legacy data)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy import func

from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import Player, PlayerTransaction
from ..models.players import TRANSACTION_TYPES, TXN_PAYMENT, TXN_WIN
from .auth_service import Actor, require_actor


@dataclass
class PlayerTotals:
    play_cents: int = 0
    payment_cents: int = 0
    win_cents: int = 0

    @property
    def balance_cents(self) -> int:
        return self.play_cents - self.payment_cents - self.win_cents

    def add(self, transaction_type: str | None, amount_cents: int) -> None:
        if transaction_type == TXN_PAYMENT:
            self.payment_cents += amount_cents
        elif transaction_type == TXN_WIN:
            self.win_cents += amount_cents
        else:
            self.play_cents += amount_cents


def _totals_by_player(*filters) -> dict[int, PlayerTotals]:
    rows = db.session.query(
        PlayerTransaction.player_id,
        PlayerTransaction.transaction_type,
        func.coalesce(func.sum(PlayerTransaction.amount_cents), 0),
    ).filter(*filters).group_by(
        PlayerTransaction.player_id,
        PlayerTransaction.transaction_type,
    ).all()

    totals: dict[int, PlayerTotals] = {}
    for player_id, transaction_type, amount in rows:
        totals.setdefault(player_id, PlayerTotals()).add(transaction_type, int(amount))
    return totals


def get_player(player_id: int) -> Player:
    player = db.session.get(Player, player_id)
    if not player:
        raise NotFoundError("Player not found")
    return player


def list_players() -> list[Player]:
    return db.session.query(Player).order_by(Player.name.asc()).all()


def create_player(name: str) -> Player:
    name = (name or "").strip()
    if not name:
        raise ValidationError("name is required")

    player = Player(name=name)
    db.session.add(player)
    db.session.commit()
    return player


def record_transaction(
    player_id: int,
    transaction_type: str,
    amount_cents: int,
    business_date: date,
    *,
    actor: Actor | None,
    note: str | None = None,
    game_details: str | None = None,
) -> PlayerTransaction:
    """Append a play/payment/win. The amount's sign is dropped."""
    actor = require_actor(actor)

    transaction_type = (transaction_type or "").strip().lower()
    if transaction_type not in TRANSACTION_TYPES:
        raise ValidationError(f"transaction_type must be one of: {', '.join(TRANSACTION_TYPES)}")
    if amount_cents is None:
        raise ValidationError("amount is required")
    get_player(player_id)

    txn = PlayerTransaction(
        player_id=player_id,
        transaction_type=transaction_type,
        amount_cents=abs(amount_cents),
        date=business_date,
        note=note,
        game_details=game_details,
        created_by_user_id=actor.user_id,
    )
    db.session.add(txn)
    db.session.commit()
    return txn


def get_balance(player_id: int) -> int:
    """All-time balance in cents for one player (0 with no history)."""
    totals = _totals_by_player(PlayerTransaction.player_id == player_id)
    return totals.get(player_id, PlayerTotals()).balance_cents


def get_balances() -> list[dict]:
    totals = _totals_by_player()
    return [
        {
            "player_id": player.id,
            "name": player.name,
            "balance_cents": totals.get(player.id, PlayerTotals()).balance_cents,
        }
        for player in list_players()
    ]


def get_transactions(player_id: int, limit: int = 50) -> list[PlayerTransaction]:
    get_player(player_id)
    return db.session.query(PlayerTransaction).filter_by(player_id=player_id).order_by(
        PlayerTransaction.date.desc(),
        PlayerTransaction.created_at.desc(),
        PlayerTransaction.id.desc(),
    ).limit(limit).all()


def get_day_totals(business_date: date) -> PlayerTotals:
    """Play/payment/win sums across all players for one date."""
    day = PlayerTotals()
    for totals in _totals_by_player(PlayerTransaction.date == business_date).values():
        day.play_cents += totals.play_cents
        day.payment_cents += totals.payment_cents
        day.win_cents += totals.win_cents
    return day


def get_daily_activities(business_date: date) -> list[dict]:
    """
    Per-player view for one day.

    Mixes the day's play/win/payment sums with the player's all-time
    balance, which is what the operator wants on the daily sheet.
    """
    daily = _totals_by_player(PlayerTransaction.date == business_date)
    all_time = _totals_by_player()

    activities = []
    for player in list_players():
        day = daily.get(player.id, PlayerTotals())
        activities.append({
            "player_id": player.id,
            "name": player.name,
            "played_cents": day.play_cents,
            "win_cents": day.win_cents,
            "paid_cents": day.payment_cents,
            "day_net_cents": day.balance_cents,
            "total_balance_due_cents": all_time.get(player.id, PlayerTotals()).balance_cents,
        })
    return activities
