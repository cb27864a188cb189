#!/usr/bin/env python3
"""Create the first ADMIN account.

Does nothing if an ADMIN already exists. The password comes from --password
or the SEED_ADMIN_PASSWORD environment variable.

Usage:
    python scripts/seed_admin.py --password 's3cret!'
    SEED_ADMIN_PASSWORD='s3cret!' python scripts/seed_admin.py --badge ADMIN001
"""

import argparse
import asyncio
import logging
import os
import sys

from custody_service.config.settings import Settings
from custody_service.core.security import TokenService
from custody_service.core.staff_directory import StaffDirectory
from custody_service.infrastructure.database import DatabaseClient

logger = logging.getLogger("seed_admin")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the first ADMIN account")
    parser.add_argument("--password", default=os.getenv("SEED_ADMIN_PASSWORD"))
    parser.add_argument("--badge", default="ADMIN001", help="Badge number (default: ADMIN001)")
    parser.add_argument("--name", default="System Administrator", help="Full name")
    parser.add_argument("--station", default="Headquarters", help="Station assignment (default: Headquarters)")
    return parser.parse_args(argv)


async def seed(args: argparse.Namespace, settings: Settings) -> bool:
    """Returns True if an account was created"""
    db_client = DatabaseClient(settings.database_url)
    await db_client.initialize()

    try:
        directory = StaffDirectory(settings, TokenService(settings))
        async with db_client.get_session() as db:
            admin = await directory.ensure_admin(
                db,
                password=args.password,
                badge_number=args.badge,
                full_name=args.name,
                station_assignment=args.station,
            )
    finally:
        await db_client.close()

    if admin is None:
        return False

    logger.info(f"Created admin {admin.badge_number} at {admin.station_assignment}")
    return True


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    args = parse_args(argv)

    if not args.password:
        logger.error("No password given: pass --password or set SEED_ADMIN_PASSWORD")
        return 2

    asyncio.run(seed(args, Settings()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
