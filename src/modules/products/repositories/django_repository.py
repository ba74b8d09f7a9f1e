"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
or ``False`` instead of raising HTTP-level exceptions; the Service Layer
decides how to translate a missing entity or a version miss into an API
response.

Concurrency control is a compare-and-write: ``conditional_update`` issues
a single ``UPDATE products SET ..., version = version + 1 WHERE id = %s
AND version = %s`` and inspects the affected row count.  No row lock is
held between reading and writing, so nothing here relies on
``select_for_update()``.
"""

from __future__ import annotations

from functools import reduce
from operator import or_
from typing import Any, Dict, List, Optional, Sequence

import structlog
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from modules.core.models import INITIAL_VERSION
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

WRITABLE_FIELDS = frozenset({"name", "description", "price", "quantity"})
SEARCH_FIELDS = ("name", "description")


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, TypeError):
            return None

    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        search_terms: Optional[Sequence[str]] = None,
        ordering: Optional[Sequence[str]] = None,
    ) -> List[Product]:
        """List products with optional Django ORM look-ups.

        Every search term must match ``name`` or ``description``
        (case-insensitive).  ``ordering`` takes ``order_by`` expressions;
        ``id`` always breaks ties.

        Examples of valid filters::

            {"price__lte": Decimal("100")}
            {"name__icontains": "phone"}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        for term in search_terms or ():
            queryset = queryset.filter(
                reduce(or_, (Q(**{f"{field}__icontains": term}) for field in SEARCH_FIELDS))
            )
        if ordering:
            queryset = queryset.order_by(*ordering, "id")
        return list(queryset)

    def get_by_name(self, name: str) -> Optional[Product]:
        return Product.objects.filter(name__iexact=name.strip()).first()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @transaction.atomic
    def insert(self, entity: Product) -> Product:
        """Persist a new product at the initial version."""
        entity.pk = None
        entity.version = INITIAL_VERSION
        entity.save(force_insert=True)
        logger.info("product.inserted", product_id=entity.id)
        return entity

    @transaction.atomic
    def conditional_update(
        self, id: int, fields: Dict[str, Any], expected_version: int
    ) -> Optional[Product]:
        """Apply ``fields`` iff the stored version equals ``expected_version``.

        The version predicate and the increment live in one statement, so of
        several concurrent callers holding the same version at most one sees
        a matched row.
        """
        unknown = set(fields) - WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not writable: {sorted(unknown)}")

        try:
            matched = Product.objects.filter(id=id, version=expected_version).update(
                **fields,
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
        except (ValueError, TypeError):
            return None

        if not matched:
            logger.debug(
                "product.cas_miss", product_id=id, expected_version=expected_version
            )
            return None
        # Re-read inside the same transaction to return the committed shape.
        return Product.objects.get(id=id)

    @transaction.atomic
    def conditional_delete(self, id: int, expected_version: int) -> bool:
        """Delete the product iff the stored version equals ``expected_version``."""
        try:
            deleted, _ = Product.objects.filter(
                id=id, version=expected_version
            ).delete()
        except (ValueError, TypeError):
            return False
        if not deleted:
            logger.debug(
                "product.cas_miss", product_id=id, expected_version=expected_version
            )
        return bool(deleted)
