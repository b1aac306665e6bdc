"""
HTTP test client wired to a throwaway in-memory database

The application lifespan creates the tables; every request gets its own
UnitOfWork on the test engine.
"""
import pytest
from fastapi.testclient import TestClient

from bakery import main
from bakery.api.dependencies import get_unit_of_work
from bakery.core.database import build_engine, build_session_factory
from bakery.repositories.unit_of_work import UnitOfWork

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def client(monkeypatch):
    test_engine = build_engine(TEST_DATABASE_URL)
    monkeypatch.setattr(main, "engine", test_engine)
    session_factory = build_session_factory(test_engine)

    async def override_get_unit_of_work():
        async with UnitOfWork(session_factory) as uow:
            yield uow

    main.app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()
