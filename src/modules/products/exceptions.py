"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist."""


class ProductValidationError(Exception):
    """The request is missing input the operation requires."""


class MissingVersion(ProductValidationError):
    """A mutation was attempted without claiming the version last read."""


class ProductVersionConflict(Exception):
    """The claimed version does not match the stored version.

    Stale claims and claims ahead of the stored version are not
    distinguished; the caller re-reads and retries with ``actual``.
    """

    def __init__(self, product_id: int, expected: int, actual: int) -> None:
        self.product_id = product_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Product {product_id} is at version {actual}, "
            f"but version {expected} was claimed."
        )
