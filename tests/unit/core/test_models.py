"""Unit tests for BaseModel, exercised through a concrete model."""

from __future__ import annotations

import uuid

import pytest

from modules.accounts.models import AppUser

pytestmark = pytest.mark.unit


class TestBaseModel:
    """Tests for UUIDv7 PK and timestamp behaviour."""

    def test_id_is_uuid_version_7(self):
        user = AppUser.objects.create(uid="u-1", name="First")
        assert isinstance(user.id, uuid.UUID)
        assert user.id.version == 7

    def test_ids_are_time_ordered(self):
        a = AppUser.objects.create(uid="u-1", name="First")
        b = AppUser.objects.create(uid="u-2", name="Second")
        assert str(a.id) < str(b.id)

    def test_created_at_does_not_change_on_save(self):
        user = AppUser.objects.create(uid="u-1", name="Original")
        created = user.created_at
        user.name = "Modified"
        user.save()
        user.refresh_from_db()
        assert user.created_at == created

    def test_save_with_update_fields_includes_updated_at(self):
        user = AppUser.objects.create(uid="u-1", name="Original")
        original_updated = user.updated_at
        user.name = "Modified"
        user.save(update_fields=["name"])
        user.refresh_from_db()
        assert user.name == "Modified"
        assert user.updated_at > original_updated

    def test_id_is_not_editable(self):
        assert AppUser._meta.get_field("id").editable is False
