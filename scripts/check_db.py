#!/usr/bin/env python
"""Report whether the warehouse database is ready to serve requests.

Checks connectivity, the applied migration, missing tables and whether an
admin profile exists to bootstrap everyone else.

Usage:
    python scripts/check_db.py
"""

import asyncio
import sys

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from wms import models  # noqa: F401  (registers every table)
from wms.core.config import get_settings
from wms.core.database import Base, get_engine
from wms.features.profiles.models import Profile, Role


async def _missing_tables(conn: AsyncConnection) -> list[str]:
    result = await conn.execute(
        text("SELECT tablename FROM pg_tables WHERE schemaname = current_schema()")
    )
    return sorted(set(Base.metadata.tables) - set(result.scalars().all()))


async def _admin_count(conn: AsyncConnection) -> int:
    stmt = select(func.count(Profile.id)).where(
        Profile.role == Role.ADMIN.value, Profile.active.is_(True)
    )
    return (await conn.execute(stmt)).scalar_one()


async def check_database() -> int:
    settings = get_settings()
    print(f"{settings.app_name} database check ({settings.database_url.rsplit('@', 1)[-1]})")

    try:
        async with get_engine().connect() as conn:
            version = (await conn.execute(text("SHOW server_version"))).scalar()
            print(f"[OK] Connected, PostgreSQL {version}")

            missing = await _missing_tables(conn)
            if missing:
                print(f"[WARN] Missing tables: {', '.join(missing)}")
                print("       Run: alembic upgrade head")
                return 1

            revision = (
                await conn.execute(text("SELECT version_num FROM alembic_version"))
            ).scalar()
            print(f"[OK] {len(Base.metadata.tables)} tables at migration {revision}")

            if await _admin_count(conn) == 0:
                print("[WARN] No active admin profile")
                print("       Run: python scripts/create_admin.py --username ... --name ...")
                return 1
            print("[OK] Admin profile present")
        return 0

    except (SQLAlchemyError, OSError) as e:
        print(f"[FAIL] {type(e).__name__}: {e}")
        print("       Check that PostgreSQL is running and DATABASE_URL in .env")
        return 1

    finally:
        await get_engine().dispose()


def main() -> None:
    sys.exit(asyncio.run(check_database()))


if __name__ == "__main__":
    main()
