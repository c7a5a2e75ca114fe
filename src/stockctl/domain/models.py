"""Ledger records and their creation rules.

Records are frozen snapshots. Services read one from the store, derive a
new value with ``model_copy(update=...)``, and write it back.

INVARIANT: A persisted StockItem always has ``quantity > 0``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# SQLite INTEGER is a signed 64-bit value.
MAX_ID = 2**63 - 1
MAX_QUANTITY = 2**63 - 1


class Warehouse(BaseModel):
    """A named location that holds stock."""

    model_config = {"frozen": True}

    id: int = Field(ge=0, le=MAX_ID)
    name: str
    created_at: int


class StockItem(BaseModel):
    """A quantity of one named item held in one warehouse."""

    model_config = {"frozen": True}

    item_id: int = Field(ge=0, le=MAX_ID)
    warehouse_id: int = Field(ge=0, le=MAX_ID)
    item_name: str
    quantity: int = Field(ge=0, le=MAX_QUANTITY)
    created_at: int
    updated_at: int | None = None


class ValidationResult(BaseModel):
    """Outcome of a creation-rule check."""

    model_config = {"frozen": True}

    valid: bool
    errors: list[str] = Field(default_factory=list)


def validate_warehouse_name(name: str) -> ValidationResult:
    """A warehouse name must contain at least one non-space character."""
    if not name or not name.strip():
        return ValidationResult(valid=False, errors=["Warehouse name must not be empty"])
    return ValidationResult(valid=True)


def validate_quantity(quantity: int, *, field: str = "quantity") -> ValidationResult:
    """Quantities are positive and fit in a signed 64-bit column."""
    if quantity <= 0:
        return ValidationResult(valid=False, errors=[f"{field} must be greater than 0"])
    if quantity > MAX_QUANTITY:
        return ValidationResult(
            valid=False, errors=[f"{field} must not exceed {MAX_QUANTITY}"]
        )
    return ValidationResult(valid=True)


def validate_stock_create(item_name: str, quantity: int) -> ValidationResult:
    """Check the creation rules for a stock item."""
    errors: list[str] = []
    if not item_name or not item_name.strip():
        errors.append("Item name must not be empty")
    errors.extend(validate_quantity(quantity).errors)
    return ValidationResult(valid=not errors, errors=errors)


def record_data(record: BaseModel) -> dict[str, Any]:
    """Serialize a record for ``ServiceResult.data``."""
    return record.model_dump()
