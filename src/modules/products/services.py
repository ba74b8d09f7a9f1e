"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

``ProductService`` is the optimistic version guard: every mutation must
present the version the caller last read, and a mismatch is surfaced as
``ProductVersionConflict`` instead of overwriting.  The guard never caches
records and never retries; retry is the caller's decision.

Business rules enforced here:
- Field ranges (validated by DTO).
- Version starts at 0 and advances by exactly 1 per update.
- Not-found takes precedence over version conflicts and missing versions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

import structlog

from modules.products.exceptions import (
    MissingVersion,
    ProductNotFound,
    ProductVersionConflict,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import (
        CreateProductDTO,
        ReplaceProductDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product at version 0."""
        product = Product(
            name=dto.name,
            price=dto.price,
            description=dto.description,
            quantity=dto.quantity,
        )
        product = self._repo.insert(product)
        logger.info("product.created", product_id=product.id, version=product.version)
        return product

    def update_product(
        self,
        id: int,
        dto: ReplaceProductDTO | UpdateProductDTO,
        claimed_version: Optional[int],
    ) -> Product:
        """Write the DTO's changes iff ``claimed_version`` is still current.

        Raises:
            ProductNotFound: if the product does not exist.
            MissingVersion: if the caller did not claim a version.
            ProductVersionConflict: if the stored version differs.
        """
        self._require_claim(id, claimed_version)
        log = logger.bind(product_id=id, claimed_version=claimed_version)

        product = self._repo.conditional_update(id, dto.changes(), claimed_version)
        if product is None:
            raise self._classify_miss(id, claimed_version)

        log.info("product.updated", version=product.version)
        return product

    def delete_product(self, id: int, claimed_version: Optional[int]) -> None:
        """Remove a product iff ``claimed_version`` is still current.

        Raises:
            ProductNotFound: if the product does not exist.
            MissingVersion: if the caller did not claim a version.
            ProductVersionConflict: if the stored version differs.
        """
        self._require_claim(id, claimed_version)

        if not self._repo.conditional_delete(id, claimed_version):
            raise self._classify_miss(id, claimed_version)

        logger.info("product.deleted", product_id=id, version=claimed_version)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self,
        filters: Optional[Dict[str, Any]] = None,
        search_terms: Optional[Sequence[str]] = None,
        ordering: Optional[Sequence[str]] = None,
    ) -> List[Product]:
        """Return a list of products, optionally filtered, searched and ordered."""
        return self._repo.list(filters, search_terms, ordering)

    def get_product(self, id: int) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.retrieved", product_id=id, version=product.version)
        return product

    # ------------------------------------------------------------------
    # Guard helpers
    # ------------------------------------------------------------------

    def _require_claim(self, id: int, claimed_version: Optional[int]) -> None:
        if claimed_version is not None:
            return
        if not self._repo.get_by_id(id):
            raise ProductNotFound(f"Product {id} not found.")
        raise MissingVersion(
            f"Product {id} must be modified with the version last read "
            "(a 'version' field or an If-Match header)."
        )

    def _classify_miss(self, id: int, claimed_version: int) -> Exception:
        """Explain a conditional write that matched no row.

        The write has already been refused atomically; this read only picks
        the error to report.
        """
        current = self._repo.get_by_id(id)
        if current is None:
            return ProductNotFound(f"Product {id} not found.")
        logger.warning(
            "product.version_conflict",
            product_id=id,
            claimed_version=claimed_version,
            current_version=current.version,
        )
        return ProductVersionConflict(id, claimed_version, current.version)
