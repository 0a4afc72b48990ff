from __future__ import annotations

import os
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Point the SQLAlchemy engine at a throwaway sqlite file before app.* is imported.
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ENVIRONMENT"] = "test"
    os.environ.setdefault("SQLITE_BUSY_TIMEOUT", "30")
    os.environ.setdefault("LOG_LEVEL", "DEBUG")


@pytest.fixture(autouse=True)
def reset_database() -> None:
    from app import models  # noqa: F401
    from app.database import Base, engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture()
def db(reset_database) -> Any:
    from app.database import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(reset_database) -> Any:
    from app.main import create_app

    with TestClient(create_app()) as c:
        yield c


@pytest.fixture()
def make_payload() -> Callable[..., dict[str, Any]]:
    def _make(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": "Ivan",
            "surname": "Petrov",
            "patronymic": "Sergeevich",
            "email": "ivan.petrov@example.com",
            "age": 34,
            "nationality": "Russian",
            "country": "Russia",
            "gender": "male",
        }
        payload.update(overrides)
        return payload

    return _make
