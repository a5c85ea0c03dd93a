# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

WHY: Every write must be attributable to a user, and the submission lock
needs to know whether that user is an administrator.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12 unless BCRYPT_ROUNDS says otherwise)
- Minimum 8 characters required
- Session tokens managed separately (see session_service.py)
"""

from __future__ import annotations

from dataclasses import dataclass

import bcrypt
from flask import current_app

from ..errors import AuthenticationRequiredError, ConflictError, PermissionDeniedError, ValidationError
from ..extensions import db
from ..models import User
from ..models.auth import ROLE_ADMIN, ROLE_STAFF, ROLES
from lottodesk.time_utils import utcnow


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""
    pass


@dataclass(frozen=True)
class Actor:
    """
    Identity handed to every core write.

    Routes build it from the session; the CLI and tests build it directly.
    """
    user_id: int
    role: str = ROLE_STAFF

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(user_id=user.id, role=user.role)


def require_actor(actor: Actor | None) -> Actor:
    """Reject writes that arrive without an authenticated identity."""
    if actor is None or actor.user_id is None:
        raise AuthenticationRequiredError("Unauthorized: sign in to save changes")
    return actor


def require_admin(actor: Actor | None) -> Actor:
    actor = require_actor(actor)
    if not actor.is_admin:
        raise PermissionDeniedError("Administrator role required")
    return actor


def validate_password_strength(password: str) -> None:
    if len(password or "") < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt (cost factor from BCRYPT_ROUNDS, default 12).

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=current_app.config.get("BCRYPT_ROUNDS", 12))
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt comparison; malformed hashes simply fail."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def create_user(username: str, password: str, role: str = ROLE_STAFF) -> User:
    """
    Create a back-office user.

    Raises:
        ValidationError: bad role or weak password
        ConflictError: username taken
    """
    username = (username or "").strip()
    if not username:
        raise ValidationError("username is required")

    role = (role or ROLE_STAFF).upper()
    if role not in ROLES:
        raise ValidationError(f"role must be one of: {', '.join(ROLES)}")

    existing = db.session.query(User).filter_by(username=username).first()
    if existing:
        raise ConflictError("Username already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        is_active=True,
    )
    db.session.add(user)
    db.session.commit()
    return user


def authenticate(username: str, password: str) -> User | None:
    """
    Return the active user matching the credentials, or None.

    Updates last_login_at on success.
    """
    user = db.session.query(User).filter(
        User.username == username,
        User.is_active.is_(True),
    ).first()

    if not user or not verify_password(password, user.password_hash):
        return None

    user.last_login_at = utcnow()
    db.session.commit()
    return user
