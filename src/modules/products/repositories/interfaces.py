"""Product repository interface.

Extends ``IVersionedRepository[Product]``: the Product aggregate is only
ever mutated through the atomic conditional operations.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IVersionedRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IVersionedRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional["Product"]:
        """Retrieve a product by exact name (case-insensitive)."""
