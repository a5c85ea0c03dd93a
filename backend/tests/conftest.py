"""
Pytest fixtures for LottoDesk backend tests.

Provides test database setup, users/actors for both roles, and test client.
"""

from datetime import date

import pytest
from lottodesk import create_app
from lottodesk.config import TestConfig
from lottodesk.extensions import db
from lottodesk.models.auth import ROLE_ADMIN, ROLE_STAFF
from lottodesk.services import box_service
from lottodesk.services.auth_service import Actor, create_user


TEST_PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def admin_user(db_session):
    return create_user("admin", TEST_PASSWORD, role=ROLE_ADMIN)


@pytest.fixture(scope='function')
def staff_user(db_session):
    return create_user("staff", TEST_PASSWORD, role=ROLE_STAFF)


@pytest.fixture(scope='function')
def admin_actor(admin_user):
    return Actor.from_user(admin_user)


@pytest.fixture(scope='function')
def staff_actor(staff_user):
    return Actor.from_user(staff_user)


@pytest.fixture(scope='function')
def box(db_session):
    """$2 box, display number 1."""
    return box_service.create_box("Lucky 7s", 200, box_number=1)


@pytest.fixture(scope='function')
def ten_dollar_box(db_session):
    return box_service.create_box("Cash Blast", 1000, category="high", box_number=2)


@pytest.fixture
def today():
    return date(2025, 1, 15)


def get_auth_token(client, username: str, password: str = TEST_PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, "admin"))


@pytest.fixture(scope='function')
def staff_headers(client, staff_user):
    return auth_headers(get_auth_token(client, "staff"))
