import os
import sys
from datetime import datetime
from decimal import Decimal

import pytest

# Keep the module-level engine off Postgres while tests import the app
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../../"))

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.auth_local import create_access_token
from app.domain.models import InventoryItem
from app.infrastructure.db import build_engine, get_db, init_models
from app.main import app


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_models(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def alice():
    return auth_headers("alice")


@pytest.fixture
def bob():
    return auth_headers("bob")


def make_item(**overrides) -> InventoryItem:
    """Unsaved record for pure-function tests."""
    fields = {
        "owner_id": "alice",
        "name": "Wireless Mouse",
        "sku": "TECH-001",
        "category": "Electronics",
        "quantity": 45,
        "price": Decimal("29.99"),
        "description": "",
        "created_at": datetime(2026, 3, 5, 14, 30),
        "updated_at": datetime(2026, 3, 6, 9, 0),
    }
    fields.update(overrides)
    return InventoryItem(**fields)


def item_payload(**overrides) -> dict:
    payload = {
        "name": "Wireless Mouse",
        "sku": "TECH-001",
        "category": "Electronics",
        "quantity": 45,
        "price": 29.99,
        "description": "Ergonomic 2.4GHz mouse",
    }
    payload.update(overrides)
    return payload
