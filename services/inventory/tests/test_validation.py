from decimal import Decimal

import pytest

from app.application.errors import ValidationError
from app.application.schemas import InventoryItemInput
from app.application.validation import validate_item

from conftest import item_payload

REQUIRED = ["name", "sku", "category", "quantity", "price"]


def test_valid_payload_is_trimmed_and_typed():
    data = validate_item(item_payload(name="  Wireless Mouse ", sku=" TECH-001", quantity="12", price="29.99"))
    assert data.name == "Wireless Mouse"
    assert data.sku == "TECH-001"
    assert data.quantity == 12
    assert data.price == Decimal("29.99")
    assert data.description == "Ergonomic 2.4GHz mouse"


def test_description_defaults_to_empty():
    payload = item_payload()
    del payload["description"]
    assert validate_item(payload).description == ""


def test_accepts_pydantic_input():
    data = validate_item(InventoryItemInput(**item_payload()))
    assert data.sku == "TECH-001"


@pytest.mark.parametrize("field", REQUIRED)
def test_missing_field_reports_only_that_field(field):
    payload = item_payload()
    del payload[field]
    with pytest.raises(ValidationError) as exc:
        validate_item(payload)
    assert list(exc.value.errors) == [field]


def test_all_violations_reported_together():
    with pytest.raises(ValidationError) as exc:
        validate_item({"name": "   ", "sku": "", "category": None, "quantity": -1, "price": "abc"})
    assert exc.value.errors == {
        "name": "Product name is required",
        "sku": "SKU is required",
        "category": "Category is required",
        "quantity": "Quantity must be a positive number",
        "price": "Price must be a number",
    }


def test_zero_quantity_is_allowed():
    assert validate_item(item_payload(quantity=0)).quantity == 0


@pytest.mark.parametrize("quantity, message", [
    ("", "Quantity is required"),
    ("many", "Quantity must be a number"),
    (True, "Quantity must be a number"),
    ("2.5", "Quantity must be a whole number"),
    (-3, "Quantity must be a positive number"),
])
def test_quantity_rules(quantity, message):
    with pytest.raises(ValidationError) as exc:
        validate_item(item_payload(quantity=quantity))
    assert exc.value.errors == {"quantity": message}


@pytest.mark.parametrize("price, message", [
    (0, "Price must be a positive number"),
    (-5, "Price must be a positive number"),
    ("0.001", "Price must be a positive number"),
    ("NaN", "Price must be a number"),
    ("Infinity", "Price must be a number"),
    (100000000, "Price must be less than 100,000,000"),
])
def test_price_rules(price, message):
    with pytest.raises(ValidationError) as exc:
        validate_item(item_payload(price=price))
    assert exc.value.errors == {"price": message}


def test_price_is_rounded_to_cents():
    assert validate_item(item_payload(price="19.995")).price == Decimal("20.00")


def test_text_length_limits():
    with pytest.raises(ValidationError) as exc:
        validate_item(item_payload(sku="X" * 51))
    assert exc.value.errors == {"sku": "SKU must be at most 50 characters"}
