"""Unit tests for BaseModel and VersionedModel.

Uses concrete test models created via Django's SchemaEditor so we can
exercise the abstract classes against a real database.
"""

from __future__ import annotations

import pytest

from django.db import connection, models

from modules.core.models import INITIAL_VERSION, BaseModel, VersionedModel

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Concrete models for testing (abstract models can't be instantiated)
# ---------------------------------------------------------------------------


class ConcreteBaseModel(BaseModel):
    name = models.CharField(max_length=100)

    class Meta(BaseModel.Meta):
        app_label = "core"
        db_table = "test_concrete_base"


class ConcreteVersionedModel(VersionedModel):
    title = models.CharField(max_length=100)

    class Meta(VersionedModel.Meta):
        app_label = "core"
        db_table = "test_concrete_versioned"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def _test_tables(django_db_setup, django_db_blocker):
    """Create DB tables for concrete test models (idempotent for --reuse-db)."""
    with django_db_blocker.unblock():
        with connection.schema_editor() as editor:
            existing = connection.introspection.table_names()
            if ConcreteBaseModel._meta.db_table not in existing:
                editor.create_model(ConcreteBaseModel)
            if ConcreteVersionedModel._meta.db_table not in existing:
                editor.create_model(ConcreteVersionedModel)


@pytest.fixture(autouse=True)
def _use_test_tables(_test_tables):
    """Ensure test tables exist for every test in this module."""


# ---------------------------------------------------------------------------
# BaseModel tests
# ---------------------------------------------------------------------------


class TestBaseModel:
    """Tests for database-assigned ids and timestamp behaviour."""

    def test_id_is_assigned_on_create(self):
        obj = ConcreteBaseModel.objects.create(name="test")
        assert isinstance(obj.id, int)

    def test_ids_are_unique_and_increasing(self):
        a = ConcreteBaseModel.objects.create(name="a")
        b = ConcreteBaseModel.objects.create(name="b")
        assert b.id > a.id

    def test_timestamps_set_on_create(self):
        obj = ConcreteBaseModel.objects.create(name="test")
        assert obj.created_at is not None
        assert obj.updated_at is not None

    def test_created_at_does_not_change_on_save(self):
        obj = ConcreteBaseModel.objects.create(name="original")
        original_created = obj.created_at
        obj.name = "modified"
        obj.save()
        obj.refresh_from_db()
        assert obj.created_at == original_created

    def test_save_with_update_fields_includes_updated_at(self):
        """The save() guard must inject updated_at into update_fields."""
        obj = ConcreteBaseModel.objects.create(name="original")
        original_updated = obj.updated_at
        obj.name = "modified"
        obj.save(update_fields=["name"])
        obj.refresh_from_db()
        assert obj.name == "modified"
        assert obj.updated_at >= original_updated


# ---------------------------------------------------------------------------
# VersionedModel tests
# ---------------------------------------------------------------------------


class TestVersionedModel:
    def test_new_instance_starts_at_initial_version(self):
        obj = ConcreteVersionedModel.objects.create(title="fresh")
        obj.refresh_from_db()
        assert obj.version == INITIAL_VERSION == 0

    def test_version_is_not_editable(self):
        field = ConcreteVersionedModel._meta.get_field("version")
        assert field.editable is False

    def test_etag_quotes_version(self):
        obj = ConcreteVersionedModel(title="tagged", version=4)
        assert obj.etag() == '"4"'
