"""Generic repository interfaces (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend, and
``IVersionedRepository[T]`` for aggregates guarded by optimistic locking.
Service-layer code depends on these abstractions, never on Django ORM
directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Product``).
    """

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        search_terms: Optional[Sequence[str]] = None,
        ordering: Optional[Sequence[str]] = None,
    ) -> List[T]:
        """List entities with optional filters, search terms and ordering."""

    @abstractmethod
    def insert(self, entity: T) -> T:
        """Persist a new entity and return it with its assigned id."""


class IVersionedRepository(IRepository[T]):
    """Repository contract with atomic compare-and-write primitives.

    Both conditional operations must be a single storage operation keyed by
    ``id`` **and** ``expected_version``; a check followed by a separate write
    is not an acceptable implementation.
    """

    @abstractmethod
    def conditional_update(
        self, id: int, fields: Dict[str, Any], expected_version: int
    ) -> Optional[T]:
        """Write ``fields`` and bump ``version`` iff the stored version matches.

        Returns the updated entity, or ``None`` when no row matched (either
        the id does not exist or its version differs).
        """

    @abstractmethod
    def conditional_delete(self, id: int, expected_version: int) -> bool:
        """Delete the row iff the stored version matches.

        Returns ``True`` if a row was removed.
        """
