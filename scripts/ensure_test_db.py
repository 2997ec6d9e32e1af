from __future__ import annotations

import asyncio

import asyncpg
from sqlalchemy.engine import make_url

from app.core.config import get_settings
from app.core.integration_db_safety import inspect_test_db_target


async def _create_test_database(database_url: str) -> str:
    target = inspect_test_db_target(database_url)
    if not target.is_safe:
        raise RuntimeError(f"Refusing to create test database: {target.problem}")
    if not target.database_name.replace("_", "").isalnum():
        raise RuntimeError(f"Unsupported database name '{target.database_name}'.")

    url = make_url(database_url)
    if url.username is None:
        raise RuntimeError("DATABASE_URL username is required.")

    conn = await asyncpg.connect(
        host=url.host or "localhost",
        port=int(url.port or 5432),
        user=url.username,
        password=url.password,
        database="postgres",
    )
    try:
        if await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", target.database_name):
            return "exists"
        await conn.execute(f'CREATE DATABASE "{target.database_name}"')
        return "created"
    finally:
        await conn.close()


def main() -> int:
    database_url = get_settings().database_url
    outcome = asyncio.run(_create_test_database(database_url))
    print(f"ensure_test_db: {outcome} db={make_url(database_url).database}")  # noqa: T201
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
