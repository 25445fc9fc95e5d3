"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SANITY_PROJECT_ID", "test-project")
os.environ.setdefault("SANITY_DATASET", "test")
os.environ.setdefault("SANITY_USE_CDN", "true")
os.environ.setdefault("ENABLE_ERROR_MONITORING", "true")
os.environ.setdefault("LOG_FORMAT", "text")

from zoo_directory.services.error_monitor import ErrorMonitor
from zoo_directory.services.validation import validate_listing
from tests.utils.factories import (
    create_amenity_data,
    create_animal_data,
    create_review_data,
    create_zoo_data,
)


@pytest.fixture
def monitor():
    """Enabled error monitor."""
    return ErrorMonitor(enabled=True)


@pytest.fixture
def sample_zoo_data():
    """Raw, complete petting zoo record."""
    return create_zoo_data(name="Happy Goat Farm", slug="happy-goat-farm", zoo_type="Farm")


@pytest.fixture
def sample_listings():
    """Three normalized listings with distinct types, prices, animals and ratings."""
    raw = [
        create_zoo_data(
            name="Happy Goat Farm",
            slug="happy-goat-farm",
            zoo_type="Farm",
            adult_price=8,
            lat=51.5074,
            lng=-0.1278,
            reviews=[create_review_data(rating=5), create_review_data(rating=4)],
        ),
        create_zoo_data(
            name="Bunny Burrow",
            slug="bunny-burrow",
            zoo_type="Children's Zoo",
            adult_price=15,
            lat=51.752,
            lng=-1.2577,
            reviews=[create_review_data(rating=3)],
        ),
        create_zoo_data(
            name="Alpaca Acres",
            slug="alpaca-acres",
            zoo_type="Wildlife Park",
            adult_price=30,
            lat=53.4808,
            lng=-2.2426,
            reviews=[],
        ),
    ]
    for item in raw:
        item["description"] = f"Visit {item['name']} for a hands-on day out."
    raw[0]["animals"] = [create_animal_data("Goat", "farm")]
    raw[0]["amenities"] = [create_amenity_data("Parking"), create_amenity_data("Cafe")]
    raw[1]["animals"] = [create_animal_data("Rabbit", "small")]
    raw[1]["amenities"] = [create_amenity_data("Parking")]
    raw[2]["animals"] = [create_animal_data("Alpaca", "exotic")]
    raw[2]["amenities"] = [create_amenity_data("Gift Shop")]
    return [validate_listing(item).data for item in raw]


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture(scope="function")
def reset_environment(monkeypatch):
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
