"""
Recalculate level and in-level XP of every user from total_xp.

Usage:
    python -m scripts.ops.recalc_levels [--dry-run]

AICODE-NOTE: total_xp is the source of truth. Run this after changing the
leveling curve or after manual edits to the users table.
"""

import argparse
import asyncio
import logging

from tortoise import Tortoise

from habitrpg.core.domain.leveling import level_progress
from habitrpg.database.config import TORTOISE_ORM
from habitrpg.database.models import User
from habitrpg.logging_config import setup_logging
from habitrpg.storage import user_repo

logger = logging.getLogger(__name__)


async def fix_levels(dry_run: bool = False) -> int:
    """Fix users whose level/xp disagree with total_xp; returns how many were off."""
    users = await User.all()
    logger.info(f"Found {len(users)} users to check")

    fixed = 0
    for user in users:
        progress = level_progress(user.total_xp)
        if (user.level, user.xp, user.total_xp) == (
            progress.level,
            progress.xp,
            progress.total_xp,
        ):
            continue

        fixed += 1
        logger.info(
            f"User {user.id} ({user.username}): level {user.level} -> "
            f"{progress.level}, xp {user.xp} -> {progress.xp}"
        )
        if not dry_run:
            await user_repo.update_progress(
                user, progress.level, progress.xp, progress.total_xp
            )

    logger.info(f"Done: {fixed} users {'need fixing' if dry_run else 'fixed'}")
    return fixed


async def main(dry_run: bool) -> None:
    await Tortoise.init(config=TORTOISE_ORM)
    try:
        await fix_levels(dry_run=dry_run)
    finally:
        await Tortoise.close_connections()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Recalculate user levels from total_xp")
    parser.add_argument("--dry-run", action="store_true", help="only report")
    args = parser.parse_args()

    setup_logging()
    asyncio.run(main(args.dry_run))
