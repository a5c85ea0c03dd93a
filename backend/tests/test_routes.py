"""
API route tests.

Verifies:
- Protected endpoints return 401 without a token
- Staff denied admin-only box management (403)
- Error taxonomy reaches the client as status + kind
- Happy paths for entries, reports, players and summaries
"""

import pytest

from conftest import auth_headers, get_auth_token


DAY = "2025-01-15"


# =============================================================================
# AUTHENTICATION (401)
# =============================================================================


class TestUnauthenticatedAccess:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/boxes"),
            ("POST", "/api/boxes"),
            ("GET", "/api/activated-books"),
            ("GET", f"/api/daily-entries/{DAY}"),
            ("PUT", f"/api/daily-entries/{DAY}"),
            ("POST", f"/api/daily-entries/{DAY}/submit"),
            ("GET", "/api/lottery-reports"),
            ("PUT", f"/api/pos-reports/{DAY}"),
            ("GET", "/api/players"),
            ("GET", f"/api/summaries/daily?date={DAY}"),
            ("GET", f"/api/dashboard?date={DAY}"),
            ("GET", "/api/auth/me"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_bad_token(self, client, db_session):
        resp = client.get("/api/boxes", headers=auth_headers("bogus"))
        assert resp.status_code == 401


class TestAuthRoutes:
    def test_login_me_logout(self, client, staff_user):
        token = get_auth_token(client, "staff")
        assert token

        me = client.get("/api/auth/me", headers=auth_headers(token))
        assert me.status_code == 200
        assert me.json["user"]["username"] == "staff"

        assert client.post("/api/auth/logout", headers=auth_headers(token)).status_code == 200
        assert client.get("/api/auth/me", headers=auth_headers(token)).status_code == 401

    def test_login_rejects_bad_password(self, client, staff_user):
        resp = client.post("/api/auth/login", json={"username": "staff", "password": "wrong-password"})
        assert resp.status_code == 401

    def test_login_requires_fields(self, client, db_session):
        assert client.post("/api/auth/login", json={}).status_code == 400


class TestBoxRoutes:
    def test_staff_cannot_create_box(self, client, staff_headers):
        resp = client.post("/api/boxes", json={"name": "X", "ticket_value": "2"}, headers=staff_headers)
        assert resp.status_code == 403

    def test_admin_creates_box_from_dollars(self, client, admin_headers):
        resp = client.post(
            "/api/boxes",
            json={"name": "Lucky 7s", "ticket_value": "2.50", "box_number": 4},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        assert resp.json["box"]["ticket_value_cents"] == 250

    def test_validation_error_shape(self, client, admin_headers):
        resp = client.post("/api/boxes", json={"name": "Free", "ticket_value": "0"}, headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json["kind"] == "validation"

    def test_duplicate_number_conflict(self, client, admin_headers, box):
        resp = client.post(
            "/api/boxes",
            json={"name": "Dup", "ticket_value_cents": 100, "box_number": box.box_number},
            headers=admin_headers,
        )
        assert resp.status_code == 409
        assert resp.json["kind"] == "conflict"


class TestDailyEntryRoutes:
    def test_save_and_read_back(self, client, staff_headers, box):
        resp = client.put(
            f"/api/daily-entries/{DAY}",
            json={"entries": [{"box_id": box.id, "open_number": "0", "close_number": 49}]},
            headers=staff_headers,
        )
        assert resp.status_code == 200
        assert resp.json["status"] == "ok"
        assert resp.json["entries"][0]["sold_amount_cents"] == 9800

        listing = client.get(f"/api/daily-entries/{DAY}", headers=staff_headers)
        assert listing.status_code == 200
        assert len(listing.json["entries"]) == 1
        assert listing.json["submission"]["submitted"] is False

    def test_dash_means_no_ticket(self, client, staff_headers, box):
        resp = client.put(
            f"/api/daily-entries/{DAY}/open",
            json={"entries": [{"box_id": box.id, "open_number": "-"}]},
            headers=staff_headers,
        )
        assert resp.status_code == 200
        assert resp.json["entries"][0]["open_number"] is None

    def test_negative_reading_rejected(self, client, staff_headers, box):
        resp = client.put(
            f"/api/daily-entries/{DAY}",
            json={"entries": [{"box_id": box.id, "open_number": -1}]},
            headers=staff_headers,
        )
        assert resp.status_code == 400

    def test_bad_date_rejected(self, client, staff_headers):
        resp = client.get("/api/daily-entries/15-01-2025", headers=staff_headers)
        assert resp.status_code == 400

    def test_submitted_day_locks_staff_not_admin(self, client, staff_headers, admin_headers, box):
        body = {"entries": [{"box_id": box.id, "open_number": 1, "close_number": 5}]}
        client.put(f"/api/daily-entries/{DAY}", json=body, headers=staff_headers)

        submit = client.post(f"/api/daily-entries/{DAY}/submit", headers=staff_headers)
        assert submit.status_code == 200
        assert submit.json["submitted"] is True

        locked = client.put(f"/api/daily-entries/{DAY}/close", json=body, headers=staff_headers)
        assert locked.status_code == 403
        assert locked.json["kind"] == "authorization"

        assert client.put(f"/api/daily-entries/{DAY}/close", json=body, headers=admin_headers).status_code == 200


class TestActivatedBookRoutes:
    def test_create_list_delete(self, client, staff_headers, box):
        created = client.post(
            "/api/activated-books",
            json={"box_id": box.id, "activated_date": DAY, "start_ticket_number": 0, "ticket_count": 50},
            headers=staff_headers,
        )
        assert created.status_code == 201
        book_id = created.json["activated_book"]["id"]
        assert created.json["activated_book"]["end_ticket_number"] == 49

        listing = client.get(f"/api/activated-books?date={DAY}", headers=staff_headers)
        assert [b["id"] for b in listing.json["activated_books"]] == [book_id]

        assert client.delete(f"/api/activated-books/{book_id}", headers=staff_headers).status_code == 200
        assert client.delete(f"/api/activated-books/{book_id}", headers=staff_headers).status_code == 404


class TestReportRoutes:
    def test_online_settlement_from_dollars(self, client, staff_headers):
        resp = client.put(
            f"/api/lottery-reports/{DAY}/online-settlement",
            json={
                "total_sales": "1000", "discount": "50", "cancels": "20", "free_bets": "10",
                "commission": "30", "cash_value": "100", "cash_bonus": "5", "service_fee": "15",
                "event_count": 12,
            },
            headers=staff_headers,
        )
        assert resp.status_code == 200
        assert resp.json["report"]["net_sales_cents"] == 92000
        assert resp.json["report"]["net_due_cents"] == 80000

        fetched = client.get(f"/api/lottery-reports/{DAY}/online-settlement", headers=staff_headers)
        assert fetched.json["report"]["event_count"] == 12

    def test_instant_cashout_and_pos(self, client, staff_headers):
        instant = client.put(
            f"/api/lottery-reports/{DAY}/instant-cashout",
            json={"instant_ticket_count": 4, "instant_total_cents": 2500},
            headers=staff_headers,
        )
        assert instant.status_code == 200

        pos = client.put(
            f"/api/pos-reports/{DAY}",
            json={"grocery_total": "845.20", "cash": "300", "card": "545.20"},
            headers=staff_headers,
        )
        assert pos.status_code == 200
        assert pos.json["pos_report"]["grocery_total_cents"] == 84520

        register = client.put(
            f"/api/cash-register/{DAY}",
            json={"lottery_cash_at_register": "120.00"},
            headers=staff_headers,
        )
        assert register.json["cash_register"]["lottery_cash_at_register_cents"] == 12000
        assert register.json["cash_register"]["grocery_cash_at_register_cents"] is None

        report = client.get(f"/api/summaries/generated-report?date={DAY}", headers=staff_headers)
        assert report.status_code == 200
        assert report.json["report"]["total_lottery_cashing_cents"] == 2500
        assert report.json["report"]["total_grocery_cash_at_register_cents"] == 84520


class TestPlayerRoutes:
    def test_record_and_balance(self, client, staff_headers):
        created = client.post("/api/players", json={"name": "Ravi"}, headers=staff_headers)
        assert created.status_code == 201
        player_id = created.json["player"]["id"]

        for txn_type, amount in (("play", "50"), ("payment", "20"), ("win", "10")):
            resp = client.post(
                f"/api/players/{player_id}/transactions",
                json={"transaction_type": txn_type, "amount": amount, "date": DAY},
                headers=staff_headers,
            )
            assert resp.status_code == 201

        assert resp.json["balance_cents"] == 2000
        player = client.get(f"/api/players/{player_id}", headers=staff_headers)
        assert player.json["player"]["balance_cents"] == 2000

        activities = client.get(f"/api/players/daily-activities?date={DAY}", headers=staff_headers)
        assert activities.json["activities"][0]["day_net_cents"] == 2000

    def test_unknown_player(self, client, staff_headers):
        assert client.get("/api/players/999", headers=staff_headers).status_code == 404


class TestSummaryRoutes:
    def test_daily_range_weekly_dashboard(self, client, staff_headers, box):
        client.put(
            f"/api/daily-entries/{DAY}",
            json={"entries": [{"box_id": box.id, "open_number": 0, "close_number": 10}]},
            headers=staff_headers,
        )

        daily = client.get(f"/api/summaries/daily?date={DAY}", headers=staff_headers)
        assert daily.json["summary"]["scratch_sales_cents"] == 2000

        ranged = client.get(f"/api/summaries/range?start={DAY}&end=2025-01-17", headers=staff_headers)
        assert ranged.json["summary"]["scratch_sales_cents"] == 2000

        inverted = client.get(f"/api/summaries/range?start=2025-01-17&end={DAY}", headers=staff_headers)
        assert inverted.status_code == 400

        weekly = client.get(f"/api/summaries/weekly?start={DAY}", headers=staff_headers)
        assert len(weekly.json["days"]) == 7

        dashboard = client.get(f"/api/dashboard?date={DAY}", headers=staff_headers)
        assert dashboard.status_code == 200
        assert dashboard.json["summary"]["expected_cash_cents"] == 2000
        assert dashboard.json["mismatch_count"] == 0
        assert dashboard.json["player_balances"] == []

    def test_continuity_endpoints(self, client, staff_headers, box):
        client.put(
            "/api/daily-entries/2025-01-14",
            json={"entries": [{"box_id": box.id, "open_number": 0, "close_number": 10}]},
            headers=staff_headers,
        )
        client.put(
            f"/api/daily-entries/{DAY}",
            json={"entries": [{"box_id": box.id, "open_number": 40, "close_number": 45}]},
            headers=staff_headers,
        )

        logs = client.get(f"/api/continuity?date={DAY}", headers=staff_headers)
        assert logs.json["logs"][0]["severity"] == "critical"

        count = client.get(f"/api/continuity/mismatch-count?date={DAY}", headers=staff_headers)
        assert count.json["count"] == 1


def test_health(client, db_session):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json["status"] == "healthy"
