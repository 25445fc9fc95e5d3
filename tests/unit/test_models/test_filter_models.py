"""Tests for filter specification models."""

import pytest
from pydantic import ValidationError
from zoo_directory.models.filters import FilterOptions, FilterSpec, UserLocation


@pytest.mark.unit
def test_filter_spec_defaults():
    """Test that an empty spec constrains nothing."""
    spec = FilterSpec()

    assert spec.zoo_types == []
    assert spec.animal_types == []
    assert spec.amenities == []
    assert spec.distance == "all"
    assert spec.price_range == "all"
    assert spec.rating == "all"
    assert spec.is_default()


@pytest.mark.unit
def test_filter_spec_coerces_loose_values():
    """Test that malformed criteria degrade to no constraint."""
    spec = FilterSpec.model_validate({
        "zooTypes": "Farm",
        "animalTypes": None,
        "amenities": {"not": "a list"},
        "distance": 25,
        "priceRange": "",
        "rating": True,
    })

    assert spec.zoo_types == ["Farm"]
    assert spec.animal_types == []
    assert spec.amenities == []
    assert spec.distance == "25"
    assert spec.price_range == "all"
    assert spec.rating == "all"


@pytest.mark.unit
def test_filter_spec_populate_by_name():
    """Test snake_case construction."""
    spec = FilterSpec(zoo_types=["Farm"], price_range="low")

    assert spec.zoo_types == ["Farm"]
    assert spec.price_range == "low"


@pytest.mark.unit
def test_active_fields_use_url_names():
    """Test that only non-default criteria are reported, under camelCase keys."""
    spec = FilterSpec(zoo_types=["Farm"], price_range="low", rating="4+")

    assert spec.active_fields() == {"zooTypes": ["Farm"], "priceRange": "low", "rating": "4+"}
    assert not spec.is_default()


@pytest.mark.unit
def test_user_location_bounds():
    """Test user location validation."""
    location = UserLocation(lat=51.5, lng=-0.12)
    assert location.lat == 51.5

    with pytest.raises(ValidationError):
        UserLocation(lat=100, lng=0)


@pytest.mark.unit
def test_filter_options_dump_by_alias():
    """Test dropdown options serialize with camelCase keys."""
    options = FilterOptions(zoo_types=["Farm"], animal_types=["Goat"], amenities=["Parking"])

    assert options.model_dump(by_alias=True) == {
        "zooTypes": ["Farm"],
        "animalTypes": ["Goat"],
        "amenities": ["Parking"],
    }
