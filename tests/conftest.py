# tests/conftest.py
import os
import tempfile
from datetime import datetime, timezone

# Point the app at a throwaway SQLite database before anything imports settings.
_DB_DIR = tempfile.mkdtemp(prefix="staffing-tests-")
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/staffing_test.db"
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_JSON", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from app.api.dependencies.services import get_clock  # noqa: E402
from app.core.clock import FixedClock  # noqa: E402
from app.core.config import get_settings  # noqa: E402
from app.db.session import build_sync_db_url, reset_schema_sync  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models.client import Client  # noqa: E402
from app.models.user import User  # noqa: E402

NOW = datetime(2025, 11, 14, 10, 0, tzinfo=timezone.utc)


def _seed() -> dict[str, int]:
    sync_engine = create_engine(build_sync_db_url(get_settings().DB_URL), future=True)
    try:
        with Session(sync_engine) as session:
            clients = [
                Client(name="Acme Logistics", phone="555-0100", contact_person_position="COO"),
                Client(name="Northwind", phone="555-0200", contact_person_position="CTO"),
            ]
            users = [
                User(username=username, first_name=username.title(), last_name="Tester")
                for username in ("alice", "bob", "carol", "dave", "lead")
            ]
            session.add_all([*clients, *users])
            session.commit()

            ids = {client.name: client.id for client in clients}
            ids.update({user.username: user.id for user in users})
    finally:
        sync_engine.dispose()

    return {
        "client_a": ids["Acme Logistics"],
        "client_b": ids["Northwind"],
        "alice": ids["alice"],
        "bob": ids["bob"],
        "carol": ids["carol"],
        "dave": ids["dave"],
        "lead": ids["lead"],
    }


@pytest.fixture(autouse=True)
def _reset_db() -> None:
    """
    Reset the schema before each test so every test gets empty tables.

    Uses a sync engine so it never competes with pytest-asyncio's event loop.
    """
    reset_schema_sync()


@pytest.fixture
def staff() -> dict[str, int]:
    """
    Two clients and five users (four staff plus a team leader).
    """
    return _seed()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def client(clock: FixedClock) -> TestClient:
    """
    TestClient over a fresh app whose status engine sees a pinned clock.
    """
    app = create_app()
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
