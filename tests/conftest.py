"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
Each API test uses its own owner id, so tests never see each other's rows.
"""
import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_ledger.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import promise_ledger.models  # noqa: F401  (register tables on Base.metadata)
from promise_ledger.db.base import Base, get_db
from promise_ledger.main import app

SQLITE_URL = "sqlite:///./test_ledger.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def owner_id() -> str:
    return f"owner-{uuid.uuid4().hex[:12]}"


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
