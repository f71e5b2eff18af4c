from __future__ import annotations
from functools import wraps
from flask import request, g, abort
from utils.security import ACCESS, decode_token
from models import storage
from models.user import User


def jwt_required():
    """Require a valid access token; loads the user into g.current_user."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer "):
                abort(401, description="Missing or invalid Authorization header")
            token = auth.split(" ", 1)[1].strip()
            # TokenError propagates to the 401 handler
            decoded = decode_token(token, expected_type=ACCESS)

            user = storage.get(User, decoded.get("sub"))
            if not user:
                abort(401, description="Account Not Found")
            g.current_user = user
            return fn(*args, **kwargs)

        return wrapper

    return decorator

def email_verified_required():
    """
    Allow access only once the user confirmed their email address.
    Implies jwt_required.
    """
    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            if not getattr(g.current_user, "is_verified", False):
                abort(401, description="Email not verified")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
