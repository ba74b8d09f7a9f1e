"""Base abstract models for the catalog service.

Provides:
- ``BaseModel``: created_at / updated_at timestamp bookkeeping.
- ``VersionedModel``: Extends BaseModel with an optimistic-lock ``version``.

Design decisions:
- The primary key is the project default (``BigAutoField``), so ids are
  assigned by the database and never reused.
- ``version`` is ``editable=False``: it is never written from client input.
  Only the repository's conditional write advances it, always by exactly 1.
"""

from __future__ import annotations

from django.db import models

# ---------------------------------------------------------------------------
# BaseModel
# ---------------------------------------------------------------------------


class BaseModel(models.Model):
    """Abstract base with timestamp bookkeeping."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Ensure ``updated_at`` is refreshed even when ``update_fields`` is passed."""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Optimistic locking
# ---------------------------------------------------------------------------

INITIAL_VERSION = 0


class VersionedModel(BaseModel):
    """Abstract model carrying an optimistic-concurrency ``version`` counter.

    - New rows always start at ``INITIAL_VERSION``.
    - The counter is advanced by the storage layer inside the same
      ``UPDATE`` statement that checks it (compare-and-write).
    """

    version = models.PositiveIntegerField(default=INITIAL_VERSION, editable=False)

    class Meta:
        abstract = True

    def etag(self) -> str:
        """Strong entity tag for the current version, e.g. ``'"3"'``."""
        return f'"{self.version}"'
