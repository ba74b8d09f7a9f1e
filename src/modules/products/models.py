"""Product model guarded by optimistic locking.

Business rules implemented:
- RN-PRO-001: Name must not be blank.
- RN-PRO-002: Price cannot be negative.
- RN-PRO-003: Quantity cannot be negative.
- RN-PRO-004: ``version`` starts at 0 and only advances through the
  repository's conditional write (inherited from VersionedModel).
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import VersionedModel


class Product(VersionedModel):
    """Product aggregate root.

    Deletion is physical: there is no tombstone, so a deleted id simply
    stops resolving.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.name is not None and not self.name.strip():
            raise ValidationError({"name": "Name must not be blank."})
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.name} (v{self.version})"
