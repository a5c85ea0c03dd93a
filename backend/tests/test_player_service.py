"""Player credit ledger tests."""

from datetime import timedelta

import pytest

from lottodesk.errors import AuthenticationRequiredError, NotFoundError, ValidationError
from lottodesk.services import player_service


@pytest.fixture
def player(db_session):
    return player_service.create_player("Ravi")


def test_balance_is_play_minus_payment_and_win(db_session, staff_actor, player, today):
    player_service.record_transaction(player.id, "play", 5000, today, actor=staff_actor)
    player_service.record_transaction(player.id, "payment", 2000, today, actor=staff_actor)
    player_service.record_transaction(player.id, "win", 1000, today, actor=staff_actor)

    assert player_service.get_balance(player.id) == 2000


def test_balance_equals_sum_of_daily_udhari(db_session, staff_actor, player, today):
    yesterday = today - timedelta(days=1)
    player_service.record_transaction(player.id, "play", 3000, yesterday, actor=staff_actor)
    player_service.record_transaction(player.id, "win", 500, yesterday, actor=staff_actor)
    player_service.record_transaction(player.id, "play", 2000, today, actor=staff_actor)
    player_service.record_transaction(player.id, "payment", 2500, today, actor=staff_actor)

    daily = [player_service.get_day_totals(d).balance_cents for d in (yesterday, today)]
    assert sum(daily) == player_service.get_balance(player.id) == 2000


def test_amount_sign_is_dropped(db_session, staff_actor, player, today):
    txn = player_service.record_transaction(player.id, "payment", -1500, today, actor=staff_actor)
    assert txn.amount_cents == 1500
    assert player_service.get_balance(player.id) == -1500


def test_balance_without_history_is_zero(db_session, player):
    assert player_service.get_balance(player.id) == 0


def test_record_transaction_validates(db_session, staff_actor, player, today):
    with pytest.raises(ValidationError):
        player_service.record_transaction(player.id, "refund", 100, today, actor=staff_actor)
    with pytest.raises(NotFoundError):
        player_service.record_transaction(9999, "play", 100, today, actor=staff_actor)
    with pytest.raises(AuthenticationRequiredError):
        player_service.record_transaction(player.id, "play", 100, today, actor=None)


def test_create_player_requires_name(db_session):
    with pytest.raises(ValidationError):
        player_service.create_player("   ")


def test_daily_activities_mix_day_and_all_time(db_session, staff_actor, player, today):
    other = player_service.create_player("Anita")
    player_service.record_transaction(player.id, "play", 4000, today - timedelta(days=1), actor=staff_actor)
    player_service.record_transaction(player.id, "play", 1000, today, actor=staff_actor)
    player_service.record_transaction(player.id, "win", 300, today, actor=staff_actor)

    activities = {a["player_id"]: a for a in player_service.get_daily_activities(today)}

    mine = activities[player.id]
    assert mine["played_cents"] == 1000
    assert mine["win_cents"] == 300
    assert mine["paid_cents"] == 0
    assert mine["day_net_cents"] == 700
    assert mine["total_balance_due_cents"] == 4700
    assert activities[other.id]["total_balance_due_cents"] == 0


def test_transactions_newest_first(db_session, staff_actor, player, today):
    first = player_service.record_transaction(player.id, "play", 100, today - timedelta(days=2), actor=staff_actor)
    second = player_service.record_transaction(player.id, "play", 200, today, actor=staff_actor)

    assert [t.id for t in player_service.get_transactions(player.id)] == [second.id, first.id]


def test_get_balances_lists_every_player(db_session, staff_actor, player, today):
    player_service.create_player("Zed")
    player_service.record_transaction(player.id, "play", 700, today, actor=staff_actor)

    balances = {b["name"]: b["balance_cents"] for b in player_service.get_balances()}
    assert balances == {"Ravi": 700, "Zed": 0}
