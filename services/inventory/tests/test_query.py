from decimal import Decimal

import pytest

from app.application.query import InventoryQuery, apply_query, collation_key, list_categories, sort_items

from conftest import make_item


@pytest.fixture
def catalog():
    return [
        make_item(name="Wireless Mouse", sku="TECH-001", category="Electronics", quantity=45, price=Decimal("29.99")),
        make_item(name="Office Chair", sku="FURN-001", category="Furniture", quantity=12, price=Decimal("199.99")),
        make_item(name="desk lamp", sku="FURN-002", category="Furniture", quantity=3, price=Decimal("34.99")),
        make_item(name="Notebook Set", sku="STAT-001", category="Stationery", quantity=125, price=Decimal("12.99")),
    ]


def names(items):
    return [item.name for item in items]


def test_search_is_case_insensitive_over_name_sku_category():
    items = [
        make_item(name="Wireless Mouse", sku="TECH-001", category="Electronics"),
        make_item(name="Office Chair", sku="FURN-001", category="Furniture"),
    ]
    assert names(apply_query(items, InventoryQuery(search="tech"))) == ["Wireless Mouse"]
    assert names(apply_query(items, InventoryQuery(search="o"))) == ["Wireless Mouse", "Office Chair"]


def test_search_matches_category(catalog):
    assert names(apply_query(catalog, InventoryQuery(search="FURNITURE"))) == ["Office Chair", "desk lamp"]


def test_empty_search_matches_everything(catalog):
    assert len(apply_query(catalog, InventoryQuery(search=""))) == 4
    assert len(apply_query(catalog, InventoryQuery(search="   "))) == 4


def test_search_keeps_surrounding_spaces():
    items = [make_item(name="Armchair", sku="FURN-010"), make_item(name="Office Chair", sku="FURN-011")]
    assert names(apply_query(items, InventoryQuery(search=" chair"))) == ["Office Chair"]
    assert names(apply_query(items, InventoryQuery(search="office "))) == ["Office Chair"]
    assert names(apply_query(items, InventoryQuery(search="chair"))) == ["Armchair", "Office Chair"]


def test_category_filter_is_exact(catalog):
    assert names(apply_query(catalog, InventoryQuery(category="Furniture"))) == ["Office Chair", "desk lamp"]
    assert apply_query(catalog, InventoryQuery(category="furniture")) == []
    assert len(apply_query(catalog, InventoryQuery(category="all"))) == 4


def test_search_and_category_combine(catalog):
    result = apply_query(catalog, InventoryQuery(search="lamp", category="Furniture"))
    assert names(result) == ["desk lamp"]


def test_sort_by_name_ignores_case(catalog):
    result = apply_query(catalog, InventoryQuery(sort_by="name"))
    assert names(result) == ["desk lamp", "Notebook Set", "Office Chair", "Wireless Mouse"]


def test_sort_numeric_descending(catalog):
    result = apply_query(catalog, InventoryQuery(sort_by="price", sort_order="desc"))
    assert [item.price for item in result] == [Decimal("199.99"), Decimal("34.99"), Decimal("29.99"), Decimal("12.99")]


def test_sort_by_quantity_ascending(catalog):
    result = apply_query(catalog, InventoryQuery(sort_by="quantity"))
    assert [item.quantity for item in result] == [3, 12, 45, 125]


def test_sort_is_stable_for_ties():
    items = [make_item(name="B", sku="B", price=Decimal("5")), make_item(name="A", sku="A", price=Decimal("5"))]
    assert names(sort_items(items, "price", "asc")) == ["B", "A"]
    assert names(sort_items(items, "price", "desc")) == ["B", "A"]


def test_no_sort_keeps_store_order(catalog):
    assert names(apply_query(catalog, InventoryQuery())) == names(catalog)


def test_input_is_not_mutated(catalog):
    before = list(catalog)
    apply_query(catalog, InventoryQuery(sort_by="quantity", sort_order="desc", search="e"))
    assert catalog == before


def test_collation_groups_accents_and_case():
    words = ["zebra", "Éclair", "apple", "eclair", "Apple"]
    assert sorted(words, key=collation_key) == ["Apple", "apple", "eclair", "Éclair", "zebra"]


def test_list_categories_is_distinct_and_ordered(catalog):
    assert list_categories(catalog) == ["Electronics", "Furniture", "Stationery"]
