#!/usr/bin/env python
"""Create the first admin profile.

Profiles are normally created by an admin through the API, which needs an
admin to exist already. This script bootstraps one.

Usage:
    python scripts/create_admin.py --username admin --name "Site Admin" \
        --email admin@example.com [--external-id <gateway subject>]
"""

import argparse
import asyncio
import sys

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from wms.core.database import get_engine, transaction
from wms.core.logging import configure_logging, get_logger
from wms.features.profiles.models import Profile, Role

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an admin profile")
    parser.add_argument("--username", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--email", default=None)
    parser.add_argument("--external-id", default=None, help="Identity from the auth gateway")
    return parser.parse_args(argv)


async def create_admin(args: argparse.Namespace) -> int:
    try:
        async with transaction() as session:
            existing = await session.execute(
                select(Profile).where(Profile.username == args.username)
            )
            profile = existing.scalar_one_or_none()
            if profile is not None:
                print(f"[SKIP] Profile '{args.username}' already exists (id={profile.id})")
                return 0

            profile = Profile(
                username=args.username,
                name=args.name,
                email=args.email,
                external_id=args.external_id,
                role=Role.ADMIN.value,
                active=True,
            )
            session.add(profile)
            await session.flush()

        logger.info("scripts.admin_created", profile_id=profile.id, username=profile.username)
        print(f"[OK] Admin '{profile.username}' created with id {profile.id}")
        print(f"     Send header X-Profile-ID: {profile.id}")
        return 0
    except SQLAlchemyError as e:
        print(f"[FAIL] Could not create admin: {e}")
        return 1
    finally:
        await get_engine().dispose()


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(create_admin(parse_args())))


if __name__ == "__main__":
    main()
