"""
Token lifecycle on top of utils.security and the redis token cache.

- access tokens are stateless and short-lived
- refresh tokens are stored under the user id; issuing one replaces the previous
- reset-password tokens are stored by jti and consumed on first use
"""
from __future__ import annotations

from flask import current_app

from models import cache
from utils.security import (
    ACCESS,
    REFRESH,
    RESET,
    TokenError,
    create_token,
    decode_token,
    generate_jti,
)


def set_access_token(user_id: str) -> str:
    return create_token(user_id, ACCESS, current_app.config["ACCESS_TOKEN_EXPIRES"])


def set_refresh_token(user_id: str) -> str:
    """Sign a refresh token and make it the only valid one for user_id."""
    expires = current_app.config["REFRESH_TOKEN_EXPIRES"]
    token = create_token(user_id, REFRESH, expires)
    cache.set_refresh_token(user_id, token, expires)
    return token


def issue_token_pair(user_id: str) -> dict:
    return {
        "accessToken": set_access_token(user_id),
        "refreshToken": set_refresh_token(user_id),
    }


def verify_refresh_token(token: str) -> str:
    """Return the user id the refresh token belongs to.

    The token must verify and also match the one stored for its user, so a
    token that was rotated out or logged out is rejected.
    """
    decoded = decode_token(token, expected_type=REFRESH)
    user_id = decoded["sub"]
    stored = cache.get_refresh_token(user_id)
    if stored is None or stored != token:
        raise TokenError("Refresh token is no longer valid")
    return user_id


def revoke_refresh_token(user_id: str) -> bool:
    return cache.delete_refresh_token(user_id)


def set_reset_password_token(user_id: str) -> str:
    expires = current_app.config["RESET_PASSWORD_TOKEN_EXPIRES"]
    jti = generate_jti()
    token = create_token(user_id, RESET, expires, jti=jti)
    cache.set_reset_token(user_id, jti, expires)
    return token


def verify_reset_password_token(token: str) -> str:
    """Return the user id for an outstanding reset token, without consuming it."""
    decoded = decode_token(token, expected_type=RESET)
    user_id = decoded["sub"]
    if cache.get_reset_token(user_id) != decoded["jti"]:
        raise TokenError("Reset link is invalid or has already been used")
    return user_id


def consume_reset_password_token(user_id: str) -> None:
    cache.delete_reset_token(user_id)
