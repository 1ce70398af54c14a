"""Write-side validation for inventory records.

``validate_item`` checks every field in a single pass and either returns the
normalized payload or raises ``ValidationError`` with one message per bad
field, so a form can show all problems at once.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel

from .errors import ValidationError
from .schemas import InventoryItemData

# field -> (label used in messages, max length matching the column size)
TEXT_FIELDS = {
    "name": ("Product name", 200),
    "sku": ("SKU", 50),
    "category": ("Category", 100),
}

CENT = Decimal("0.01")
MAX_PRICE = Decimal("100000000")
MAX_QUANTITY = 2_147_483_647


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(value: Any) -> Optional[Decimal]:
    """Parse a form or JSON value into a finite Decimal, or None if it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(str(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not number.is_finite():
        return None
    return number


def _check_text(field: str, value: Any, errors: Dict[str, str]) -> Optional[str]:
    label, max_length = TEXT_FIELDS[field]
    if _is_blank(value):
        errors[field] = f"{label} is required"
        return None
    if not isinstance(value, str):
        errors[field] = f"{label} must be text"
        return None
    text = value.strip()
    if len(text) > max_length:
        errors[field] = f"{label} must be at most {max_length} characters"
        return None
    return text


def _check_quantity(value: Any, errors: Dict[str, str]) -> Optional[int]:
    if _is_blank(value):
        errors["quantity"] = "Quantity is required"
        return None
    number = _parse_number(value)
    if number is None:
        errors["quantity"] = "Quantity must be a number"
    elif number < 0:
        errors["quantity"] = "Quantity must be a positive number"
    elif number != number.to_integral_value():
        errors["quantity"] = "Quantity must be a whole number"
    elif number > MAX_QUANTITY:
        errors["quantity"] = "Quantity is too large"
    else:
        return int(number)
    return None


def _check_price(value: Any, errors: Dict[str, str]) -> Optional[Decimal]:
    if _is_blank(value):
        errors["price"] = "Price is required"
        return None
    number = _parse_number(value)
    if number is None:
        errors["price"] = "Price must be a number"
        return None
    if number >= MAX_PRICE:
        errors["price"] = "Price must be less than 100,000,000"
        return None
    # Stored as Numeric(10, 2); a price that rounds to zero is not positive
    if number <= 0 or number.quantize(CENT, rounding=ROUND_HALF_UP) <= 0:
        errors["price"] = "Price must be a positive number"
        return None
    return number.quantize(CENT, rounding=ROUND_HALF_UP)


def validate_item(candidate: Union[BaseModel, Mapping[str, Any]]) -> InventoryItemData:
    """Validate a candidate record.

    Args:
        candidate: request payload, either a pydantic model or a plain mapping

    Returns:
        The trimmed, typed payload ready for the store.

    Raises:
        ValidationError: with a ``{field: message}`` mapping covering every
            violation found.
    """
    if isinstance(candidate, BaseModel):
        candidate = candidate.model_dump()

    errors: Dict[str, str] = {}
    values = {field: _check_text(field, candidate.get(field), errors) for field in TEXT_FIELDS}
    quantity = _check_quantity(candidate.get("quantity"), errors)
    price = _check_price(candidate.get("price"), errors)

    description = candidate.get("description")
    if description is None:
        description = ""
    elif not isinstance(description, str):
        errors["description"] = "Description must be text"
    else:
        description = description.strip()

    if errors:
        raise ValidationError(errors)

    return InventoryItemData(
        quantity=quantity,
        price=price,
        description=description,
        **values,
    )
