"""Tests for profile schemas."""

import pytest
from pydantic import ValidationError

from wms.features.profiles.models import Role
from wms.features.profiles.schemas import CustomerRegistration, ProfileCreate, ProfileUpdate


def test_profile_create_defaults_to_field_operator():
    data = ProfileCreate(username="picker.01")
    assert data.role is Role.FIELD_OPERATOR


@pytest.mark.parametrize("username", ["ab", "has space", "x" * 51])
def test_invalid_usernames_rejected(username):
    with pytest.raises(ValidationError):
        ProfileCreate(username=username)


def test_registration_requires_valid_email():
    with pytest.raises(ValidationError):
        CustomerRegistration(username="acme", name="Acme", email="not-an-email")


def test_registration_rejects_role_field():
    with pytest.raises(ValidationError):
        CustomerRegistration(
            username="acme", name="Acme", email="buyer@acme.test", role="admin"
        )


def test_update_tracks_only_sent_fields():
    data = ProfileUpdate(phone="+91 98200 00000")
    assert data.model_dump(exclude_unset=True) == {"phone": "+91 98200 00000"}
