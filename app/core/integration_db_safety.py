from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import make_url

LOCAL_DB_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "postgres", "ledger_postgres"})
TEST_DB_MARKER = "test"


@dataclass(frozen=True, slots=True)
class TestDbTarget:
    database_name: str
    host: str
    problem: str | None

    @property
    def is_safe(self) -> bool:
        return self.problem is None


def inspect_test_db_target(database_url: str) -> TestDbTarget:
    url = make_url(database_url)
    database_name = (url.database or "").strip()
    host = (url.host or "").strip().lower()

    problem: str | None = None
    if url.get_backend_name() != "postgresql":
        problem = "only PostgreSQL databases can back the integration suite"
    elif TEST_DB_MARKER not in database_name.lower():
        problem = f"database name must contain '{TEST_DB_MARKER}'"
    elif host not in LOCAL_DB_HOSTS:
        problem = f"host '{host}' is not a local database host"

    return TestDbTarget(database_name=database_name, host=host, problem=problem)


def assert_safe_integration_db(database_url: str) -> None:
    target = inspect_test_db_target(database_url)
    if target.is_safe:
        return
    raise RuntimeError(
        "Refusing to truncate ledger tables: "
        f"{target.problem} (database='{target.database_name}', host='{target.host}'). "
        "Point DATABASE_URL at a local test database such as 'referral_ledger_test'."
    )
