"""Unit tests for ProductDjangoRepository.

Covers:
- Reads (get_by_id, list, get_by_name).
- insert: always stores version 0.
- conditional_update / conditional_delete: compare-and-write semantics.
- No unconditioned delete: removal always goes through the version check.
- list: filters, search terms and ordering.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.repositories.interfaces import IProductRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return ProductDjangoRepository()


# ===========================================================================
# Instantiation
# ===========================================================================


class TestRepositoryInstantiation:
    def test_is_instance_of_interface(self, repo):
        assert isinstance(repo, IProductRepository)


# ===========================================================================
# Reads
# ===========================================================================


class TestGetById:
    def test_returns_product_when_found(self, repo, make_product):
        product = make_product()
        result = repo.get_by_id(product.id)
        assert result is not None
        assert result.id == product.id

    def test_accepts_string_ids(self, repo, make_product):
        product = make_product()
        assert repo.get_by_id(str(product.id)).id == product.id

    def test_returns_none_when_not_found(self, repo):
        assert repo.get_by_id(999) is None

    def test_returns_none_for_malformed_id(self, repo):
        assert repo.get_by_id("not-a-number") is None


class TestList:
    def test_returns_all_products_in_id_order(self, repo, make_product):
        a = make_product(name="A")
        b = make_product(name="B")
        assert [p.id for p in repo.list()] == [a.id, b.id]

    def test_returns_empty_list_when_no_products(self, repo):
        assert repo.list() == []

    def test_applies_filters(self, repo, make_product):
        make_product(name="Cheap", price=Decimal("5.00"))
        make_product(name="Dear", price=Decimal("500.00"))
        results = repo.list({"price__lte": Decimal("10")})
        assert [p.name for p in results] == ["Cheap"]

    def test_search_matches_name_or_description(self, repo, make_product):
        make_product(name="Smartphone")
        make_product(name="Charger", description="Fast charging for any phone")
        make_product(name="Laptop")
        results = repo.list(search_terms=["PHONE"])
        assert [p.name for p in results] == ["Smartphone", "Charger"]

    def test_every_search_term_must_match(self, repo, make_product):
        make_product(name="Wireless Mouse")
        make_product(name="Wireless Keyboard")
        results = repo.list(search_terms=["wireless", "mouse"])
        assert [p.name for p in results] == ["Wireless Mouse"]

    def test_ordering_with_id_tie_break(self, repo, make_product):
        a = make_product(name="A", price=Decimal("10.00"))
        b = make_product(name="B", price=Decimal("50.00"))
        c = make_product(name="C", price=Decimal("10.00"))
        results = repo.list(ordering=["-price"])
        assert [p.id for p in results] == [b.id, a.id, c.id]


class TestGetByName:
    def test_case_insensitive(self, repo, make_product):
        product = make_product(name="Smartphone")
        assert repo.get_by_name("  SMARTPHONE ").id == product.id

    def test_returns_none_when_not_found(self, repo):
        assert repo.get_by_name("Nothing") is None


# ===========================================================================
# insert
# ===========================================================================


class TestInsert:
    def test_assigns_id_and_version_zero(self, repo):
        product = repo.insert(Product(name="New", price=Decimal("9.99")))
        assert product.id is not None
        assert product.version == 0
        assert Product.objects.filter(id=product.id, version=0).exists()

    def test_forces_version_zero(self, repo):
        product = repo.insert(Product(name="Sneaky", price=Decimal("1.00"), version=9))
        product.refresh_from_db()
        assert product.version == 0

    def test_ids_are_never_reused(self, repo):
        first = repo.insert(Product(name="First", price=Decimal("1.00")))
        repo.conditional_delete(first.id, 0)
        second = repo.insert(Product(name="Second", price=Decimal("1.00")))
        assert second.id > first.id


# ===========================================================================
# conditional_update
# ===========================================================================


class TestConditionalUpdate:
    def test_matching_version_writes_and_increments(self, repo, make_product):
        product = make_product()
        updated = repo.conditional_update(
            product.id, {"price": Decimal("899.99")}, expected_version=0
        )
        assert updated is not None
        assert updated.version == 1
        assert updated.price == Decimal("899.99")
        assert updated.name == "Smartphone"

    def test_refreshes_updated_at(self, repo, make_product):
        product = make_product()
        updated = repo.conditional_update(product.id, {"quantity": 1}, 0)
        assert updated.updated_at >= product.updated_at

    def test_stale_version_returns_none_and_writes_nothing(self, repo, make_product):
        product = make_product()
        repo.conditional_update(product.id, {"quantity": 10}, 0)

        result = repo.conditional_update(product.id, {"quantity": 99}, 0)

        assert result is None
        product.refresh_from_db()
        assert product.version == 1
        assert product.quantity == 10

    def test_future_version_returns_none(self, repo, make_product):
        product = make_product()
        assert repo.conditional_update(product.id, {"quantity": 1}, 5) is None

    def test_missing_id_returns_none(self, repo):
        assert repo.conditional_update(999, {"quantity": 1}, 0) is None

    def test_same_claim_wins_only_once(self, repo, make_product):
        product = make_product()
        first = repo.conditional_update(product.id, {"name": "A"}, 0)
        second = repo.conditional_update(product.id, {"name": "B"}, 0)
        assert first is not None
        assert second is None
        product.refresh_from_db()
        assert product.name == "A"

    def test_rejects_unknown_fields(self, repo, make_product):
        product = make_product()
        with pytest.raises(ValueError, match="version"):
            repo.conditional_update(product.id, {"version": 7}, 0)


# ===========================================================================
# conditional_delete
# ===========================================================================


class TestConditionalDelete:
    def test_matching_version_deletes(self, repo, make_product):
        product = make_product()
        assert repo.conditional_delete(product.id, 0) is True
        assert not Product.objects.filter(id=product.id).exists()

    def test_stale_version_keeps_row(self, repo, make_product):
        product = make_product()
        repo.conditional_update(product.id, {"quantity": 1}, 0)
        assert repo.conditional_delete(product.id, 0) is False
        assert Product.objects.filter(id=product.id).exists()

    def test_missing_id_returns_false(self, repo):
        assert repo.conditional_delete(999, 0) is False


class TestNoUnconditionedDelete:
    def test_contract_offers_only_version_checked_delete(self):
        assert not hasattr(IProductRepository, "delete")
        assert not hasattr(ProductDjangoRepository, "delete")
