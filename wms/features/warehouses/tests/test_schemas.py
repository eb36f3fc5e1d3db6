"""Tests for warehouse schemas and location naming."""

import pytest
from pydantic import ValidationError

from wms.features.warehouses.models import WarehouseLocation, location_display_name
from wms.features.warehouses.schemas import LocationCreate


def test_zone_is_upper_cased():
    assert LocationCreate(floor=2, zone=" b1 ").zone == "B1"


def test_negative_floor_rejected():
    with pytest.raises(ValidationError):
        LocationCreate(floor=-1, zone="A")


def test_display_name():
    assert location_display_name(0, "A") == "Floor 0 - Zone A"
    assert WarehouseLocation(floor=3, zone="C").display_name == "Floor 3 - Zone C"
