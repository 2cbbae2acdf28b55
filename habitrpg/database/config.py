"""
Database configuration (Tortoise ORM).
Supports SQLite (dev) and PostgreSQL (production).
"""

from typing import Optional

from habitrpg.config import config


def get_tortoise_db_url(url: Optional[str] = None) -> str:
    """
    Database URL in the scheme Tortoise expects.

    Hosting providers hand out 'postgresql://' URLs, Tortoise registers
    the asyncpg backend under 'postgres://'.
    """
    url = url or config.database_url
    if url.startswith("postgresql://"):
        url = "postgres://" + url[len("postgresql://"):]
    return url


def build_tortoise_config(db_url: str) -> dict:
    """Tortoise config dict; completion days are computed in UTC."""
    return {
        "connections": {"default": get_tortoise_db_url(db_url)},
        "apps": {
            "models": {
                "models": ["habitrpg.database.models", "aerich.models"],
                "default_connection": "default",
            },
        },
        "use_tz": True,
        "timezone": "UTC",
    }


TORTOISE_ORM = build_tortoise_config(config.database_url)
