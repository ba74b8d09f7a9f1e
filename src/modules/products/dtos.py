"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Views)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``ReplaceProductDTO``: input for full replacement (PUT).
- ``UpdateProductDTO``: input for partial updates (PATCH).

``version`` is never accepted on creation; unknown keys such as a
client-supplied ``version`` are ignored there.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

PRODUCT_FIELDS = ("name", "description", "price", "quantity")

# Column limits: CharField(max_length=255) and PositiveIntegerField.
NAME_MAX_LENGTH = 255
MAX_INTEGER = 2147483647


def _check_name(v: str | None) -> str | None:
    if v is None:
        return v
    if not v.strip():
        raise ValueError("Name must not be blank.")
    return v.strip()


def _check_price(v: Decimal | None) -> Decimal | None:
    if v is not None and v < 0:
        raise ValueError("Price cannot be negative.")
    return v


def _check_quantity(v: int | None) -> int | None:
    if v is not None and v < 0:
        raise ValueError("Quantity cannot be negative.")
    return v


def _check_version(v: int | None) -> int | None:
    if v is not None and v < 0:
        raise ValueError("Version cannot be negative.")
    return v


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is a non-blank string of at most 255 characters (RN-PRO-001).
    - ``price`` is a non-negative Decimal (RN-PRO-002).
    - ``quantity`` is non-negative and fits the column (RN-PRO-003).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(max_length=NAME_MAX_LENGTH)
    price: Decimal = Field(max_digits=10, decimal_places=2)
    description: str = ""
    quantity: int = Field(default=0, le=MAX_INTEGER)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal) -> Decimal:
        return _check_price(v)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: int) -> int:
        return _check_quantity(v)


class ReplaceProductDTO(CreateProductDTO):
    """Full replacement of a product's state (PUT).

    ``version`` is the version the caller last read.  It may be left out
    when the caller sends it as an ``If-Match`` header instead.
    """

    version: int | None = Field(default=None, le=MAX_INTEGER)

    @field_validator("version")
    @classmethod
    def version_must_be_non_negative(cls, v: int | None) -> int | None:
        return _check_version(v)

    def changes(self) -> Dict[str, Any]:
        """Every product field, as the new stored state."""
        return {field: getattr(self, field) for field in PRODUCT_FIELDS}


class UpdateProductDTO(BaseModel):
    """Immutable DTO for partial product updates (PATCH).

    All product fields are optional; only supplied fields will be written.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    price: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    description: str | None = None
    quantity: int | None = Field(default=None, le=MAX_INTEGER)
    version: int | None = Field(default=None, le=MAX_INTEGER)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str | None) -> str | None:
        return _check_name(v)

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal | None) -> Decimal | None:
        return _check_price(v)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: int | None) -> int | None:
        return _check_quantity(v)

    @field_validator("version")
    @classmethod
    def version_must_be_non_negative(cls, v: int | None) -> int | None:
        return _check_version(v)

    def changes(self) -> Dict[str, Any]:
        """Only the product fields the caller supplied."""
        return {
            field: getattr(self, field)
            for field in PRODUCT_FIELDS
            if getattr(self, field) is not None
        }
