"""
APP_ENV normalisation shared by the config loader and DBStorage.
"""
from __future__ import annotations

from os import getenv

DEV = "dev"
TEST = "test"
PROD = "prod"

ENV_ALIASES = {
    "dev": DEV,
    "development": DEV,
    "test": TEST,
    "testing": TEST,
    "prod": PROD,
    "production": PROD,
}


def resolve_env(name: str | None = None) -> str:
    """Map name (or APP_ENV when name is empty) to dev, test or prod; unknown names mean dev."""
    raw = (name or getenv("APP_ENV", DEV)).strip().lower()
    return ENV_ALIASES.get(raw, DEV)
