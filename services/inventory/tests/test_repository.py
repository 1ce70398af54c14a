from decimal import Decimal

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from app.application.errors import ConflictError
from app.application.validation import validate_item
from app.domain.models import InventoryItem
from app.infrastructure.db import build_engine, init_models
from app.infrastructure.repository import InventoryRepository

from conftest import item_payload


@pytest.fixture
def repo(db_session):
    return InventoryRepository(db_session)


def test_create_stamps_ids_and_timestamps(repo):
    item = repo.create("alice", validate_item(item_payload()))
    assert item.id is not None
    assert item.owner_id == "alice"
    assert item.created_at is not None
    assert item.updated_at == item.created_at
    assert item.price == Decimal("29.99")


def test_duplicate_sku_conflicts_across_owners(repo, db_session):
    repo.create("alice", validate_item(item_payload()))
    with pytest.raises(ConflictError) as exc:
        repo.create("bob", validate_item(item_payload(name="Other")))
    assert exc.value.sku == "TECH-001"
    assert db_session.query(InventoryItem).count() == 1


def test_list_by_owner_is_scoped(repo):
    repo.create("alice", validate_item(item_payload(sku="A-1")))
    repo.create("bob", validate_item(item_payload(sku="B-1")))
    repo.create("alice", validate_item(item_payload(sku="A-2")))
    assert {item.sku for item in repo.list_by_owner("alice")} == {"A-1", "A-2"}
    assert [item.sku for item in repo.list_by_owner("bob")] == ["B-1"]


def test_get_by_id_handles_unknown_and_malformed_ids(repo):
    item = repo.create("alice", validate_item(item_payload()))
    assert repo.get_by_id(str(item.id)).sku == "TECH-001"
    assert repo.get_by_id("not-a-uuid") is None
    assert repo.get_by_id("00000000-0000-0000-0000-000000000000") is None


def test_update_replaces_fields_but_not_owner(repo):
    item = repo.create("alice", validate_item(item_payload()))
    created_at = item.created_at
    updated = repo.update(item, validate_item(item_payload(name="Gaming Mouse", quantity=3, price="49.50")))
    assert updated.name == "Gaming Mouse"
    assert updated.quantity == 3
    assert updated.price == Decimal("49.50")
    assert updated.owner_id == "alice"
    assert updated.created_at == created_at
    assert updated.updated_at >= created_at


def test_update_to_taken_sku_conflicts(repo):
    repo.create("alice", validate_item(item_payload(sku="A-1")))
    second = repo.create("alice", validate_item(item_payload(sku="A-2")))
    with pytest.raises(ConflictError):
        repo.update(second, validate_item(item_payload(sku="A-1")))


def test_update_keeping_own_sku_is_fine(repo):
    item = repo.create("alice", validate_item(item_payload()))
    assert repo.update(item, validate_item(item_payload(quantity=1))).quantity == 1


def test_delete_is_permanent(repo):
    item = repo.create("alice", validate_item(item_payload()))
    item_id = item.id
    repo.delete(item)
    assert repo.get_by_id(item_id) is None


def test_unique_index_race_becomes_conflict(repo, db_session, monkeypatch):
    repo.create("alice", validate_item(item_payload()))
    # Another writer committed the same SKU between check and commit
    monkeypatch.setattr(repo, "_sku_taken", lambda sku, exclude_id=None: False)
    with pytest.raises(ConflictError) as exc:
        repo.create("bob", validate_item(item_payload(name="Other")))
    assert exc.value.sku == "TECH-001"
    assert db_session.query(InventoryItem).count() == 1
    assert repo.list_by_owner("bob") == []


def test_in_memory_sqlite_engine_keeps_one_database():
    engine = build_engine("sqlite://")
    try:
        assert isinstance(engine.pool, StaticPool)
        init_models(engine)
        assert inspect(engine).has_table("inventory_items")
    finally:
        engine.dispose()
