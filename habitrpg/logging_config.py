"""Logging setup shared by the API server and the ops scripts."""

import logging

from habitrpg.config import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=(level or config.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # Tortoise logs every SQL statement at DEBUG
    logging.getLogger("tortoise").setLevel(logging.WARNING)
