from functools import wraps
from flask import current_app, g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request


def auth_required(fn):
    """
    Verifies the bearer token and exposes its identity as g.actor_id.

    With REQUIRE_AUTH off a missing token is accepted (g.actor_id is None);
    a token that is present must still be valid.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        optional = not current_app.config.get("REQUIRE_AUTH", False)
        verify_jwt_in_request(optional=optional)

        identity = get_jwt_identity()
        g.actor_id = str(identity) if identity is not None else None

        return fn(*args, **kwargs)
    return wrapper
