"""
Redis-backed key-value store for issued tokens.

Layout:
- <user_id>        -> current refresh token (one per user, overwritten on issue)
- reset:<user_id>  -> jti of the outstanding reset-password token

Entries carry a TTL equal to the lifetime of the token they hold.
"""
from __future__ import annotations

from datetime import timedelta
from os import getenv
from typing import Optional

import redis
from dotenv import load_dotenv

load_dotenv()

RESET_PREFIX = "reset:"


class TokenCache:
    def __init__(self, url: str | None = None):
        """Build the client; redis-py connects lazily on the first command."""
        self.url = url or getenv("REDIS_URL", "redis://localhost:6379/0")
        self.client = redis.Redis.from_url(self.url, decode_responses=True)

    @staticmethod
    def _ttl(expires: timedelta | int | None) -> Optional[int]:
        if expires is None:
            return None
        if isinstance(expires, timedelta):
            return int(expires.total_seconds())
        return int(expires)

    # refresh tokens
    def set_refresh_token(self, user_id: str, token: str, expires: timedelta | int | None = None) -> None:
        self.client.set(str(user_id), token, ex=self._ttl(expires))

    def get_refresh_token(self, user_id: str) -> Optional[str]:
        return self.client.get(str(user_id))

    def delete_refresh_token(self, user_id: str) -> bool:
        """Return True when a token was actually removed."""
        return bool(self.client.delete(str(user_id)))

    # reset-password tokens
    def set_reset_token(self, user_id: str, jti: str, expires: timedelta | int | None = None) -> None:
        self.client.set(f"{RESET_PREFIX}{user_id}", jti, ex=self._ttl(expires))

    def get_reset_token(self, user_id: str) -> Optional[str]:
        return self.client.get(f"{RESET_PREFIX}{user_id}")

    def delete_reset_token(self, user_id: str) -> bool:
        return bool(self.client.delete(f"{RESET_PREFIX}{user_id}"))

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.exceptions.RedisError:
            return False
