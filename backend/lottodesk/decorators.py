# Overview: Request and role decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services import session_service
from .services.auth_service import Actor


def _is_authenticated() -> bool:
    return hasattr(g, 'current_user') and hasattr(g, 'actor')


def current_actor() -> Actor | None:
    """Actor for the current request, None outside @require_auth."""
    return getattr(g, 'actor', None)


def require_auth(f):
    """
    Require a valid bearer token.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.actor: Actor(user_id, role) handed to service writes
    - g.session_token: The plaintext token (for logout)

    Returns 401 if the header is missing, the token is unknown, expired or
    revoked, or the user is deactivated.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required", "kind": "authentication"}), 401

        token = auth_header.split(" ", 1)[1]
        context = session_service.validate_session(token)

        if not context:
            return jsonify({"error": "Invalid or expired token", "kind": "authentication"}), 401

        g.current_user = context.user
        g.actor = Actor.from_user(context.user)
        g.session_token = token

        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """Require the ADMIN role. Must be stacked under @require_auth."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not _is_authenticated():
            return jsonify({"error": "Authentication required", "kind": "authentication"}), 401

        if not g.actor.is_admin:
            return jsonify({
                "error": "Permission denied",
                "kind": "authorization",
                "message": "Administrator role required",
            }), 403

        return f(*args, **kwargs)

    return decorated_function
