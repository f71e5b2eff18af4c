"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- JTI and email token generation
"""
from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from flask import current_app

ph = PasswordHasher()

ACCESS = "access"
REFRESH = "refresh"
RESET = "reset"

# token type -> config key holding its signing secret
_SECRET_KEYS = {
    ACCESS: "JWT_SECRET",
    REFRESH: "JWT_REFRESH_SECRET",
    RESET: "JWT_SECRET",
}


class TokenError(Exception):
    """Raised when a token is malformed, expired, of the wrong type or no longer current."""


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False

def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())

def generate_email_token() -> str:
    """64 random bytes, hex encoded; mailed once to confirm an address."""
    return secrets.token_hex(64)

def _now() -> datetime:
    return datetime.now(timezone.utc)

def create_token(subject: str, token_type: str, expires: timedelta, jti: str | None = None) -> str:
    """
    Sign a JWT for `subject` (user id) of the given type.
    The signing secret depends on the type; see _SECRET_KEYS.
    """
    now = _now()
    payload = {
        "iss": current_app.config.get("JWT_ISSUER", "auth-api"),
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "exp": int((now + expires).timestamp()),
        "type": token_type,
        "jti": jti or generate_jti(),
    }
    secret = current_app.config[_SECRET_KEYS[token_type]]
    return jwt.encode(payload, secret, algorithm=current_app.config["JWT_ALGORITHM"])

def decode_token(token: str, expected_type: str = ACCESS) -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises TokenError on invalid signature/expired jwt
    or when the "type" claim is not expected_type.
    """
    if expected_type not in _SECRET_KEYS:
        raise ValueError(f"Unknown token type: {expected_type}")
    try:
        decoded = jwt.decode(
            token,
            current_app.config[_SECRET_KEYS[expected_type]],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            issuer=current_app.config.get("JWT_ISSUER", "auth-api"),
            options={"require": ["exp", "sub", "jti"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token expired")
    except jwt.InvalidTokenError as exc:
        raise TokenError(f"Invalid token: {exc}")

    if decoded.get("type") != expected_type:
        raise TokenError("Wrong token type")
    return decoded
