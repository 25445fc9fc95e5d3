"""Tests for URL state serialization."""

import pytest
from urllib.parse import quote, urlsplit
from zoo_directory.models.filters import FilterSpec
from zoo_directory.services.url_state import (
    build_shareable_url,
    deserialize_filters,
    parse_url_params,
    serialize_filters,
)


@pytest.mark.unit
def test_serialize_default_spec_is_empty():
    """Test default criteria are omitted entirely."""
    assert serialize_filters(FilterSpec()) == ""
    assert serialize_filters(None) == ""
    assert serialize_filters({"distance": "all", "zooTypes": []}) == ""


@pytest.mark.unit
def test_serialize_only_active_fields():
    """Test non-default criteria are JSON and percent encoded."""
    encoded = serialize_filters({"zooTypes": ["Farm"], "priceRange": "low"})

    assert encoded == quote('{"zooTypes":["Farm"],"priceRange":"low"}', safe="")


@pytest.mark.unit
def test_round_trip():
    """Test deserialize reverses serialize."""
    spec = FilterSpec(
        zoo_types=["Children's Zoo"],
        animal_types=["Goat", "farm"],
        distance="25",
        rating="4+",
    )

    assert deserialize_filters(serialize_filters(spec)) == spec


@pytest.mark.unit
@pytest.mark.parametrize("value", ["%7Bnot-json", "[1,2]", "42", "", None])
def test_deserialize_garbage_gives_defaults(value):
    """Test unreadable filters fall back to no constraint."""
    assert deserialize_filters(value) == FilterSpec()


@pytest.mark.unit
def test_parse_url_params_from_query_string():
    """Test search, filters and location are recovered from a raw query string."""
    query = f"?search=goats&filters={serialize_filters({'amenities': ['Parking']})}&lat=51.5&lng=-0.12"

    state = parse_url_params(query)

    assert state.search == "goats"
    assert state.filters.amenities == ["Parking"]
    assert state.user_location.lat == 51.5
    assert state.user_location.lng == -0.12


@pytest.mark.unit
def test_parse_url_params_from_mapping():
    """Test framework-style mappings (lists or scalars)."""
    state = parse_url_params({"search": ["alpaca"], "lat": "95", "lng": "0"})

    assert state.search == "alpaca"
    assert state.filters == FilterSpec()
    assert state.user_location is None


@pytest.mark.unit
def test_parse_url_params_empty():
    """Test no query at all."""
    state = parse_url_params(None)

    assert state.search == ""
    assert state.filters.is_default()


@pytest.mark.unit
def test_build_shareable_url_round_trips():
    """Test a shared URL restores the same search and filters."""
    spec = FilterSpec(zoo_types=["Farm"], price_range="medium")

    url = build_shareable_url("https://zoos.example/search?old=1", "goat farm", spec)
    state = parse_url_params(urlsplit(url).query)

    assert url.startswith("https://zoos.example/search?search=goat+farm&filters=")
    assert "old=1" not in url
    assert state.search == "goat farm"
    assert state.filters == spec


@pytest.mark.unit
def test_build_shareable_url_without_state():
    """Test blank search and default filters leave no query string."""
    assert build_shareable_url("https://zoos.example/search", "  ", FilterSpec()) == "https://zoos.example/search"
