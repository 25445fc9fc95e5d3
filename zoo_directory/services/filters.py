"""Filtering, search and summaries over normalized listings.

Everything here is pure and synchronous. Filtering keeps input order, and a
malformed criterion behaves as "no constraint" instead of raising.
"""

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ValidationError

from zoo_directory.models.filters import FilterOptions, FilterSpec, UserLocation
from zoo_directory.models.listing import Listing
from zoo_directory.models.references import Amenity, Animal, Review

EARTH_RADIUS_MILES = 3959

PRICE_LABELS = {
    "free": "free",
    "low": "under £10",
    "medium": "£10-£25",
    "high": "over £25",
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

FilterInput = Union[FilterSpec, Mapping, None]


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def to_filter_spec(spec: FilterInput) -> FilterSpec:
    """Accept a FilterSpec, a camelCase/snake_case mapping, or None."""
    if isinstance(spec, FilterSpec):
        return spec
    if isinstance(spec, Mapping):
        try:
            return FilterSpec.model_validate(dict(spec))
        except ValidationError:
            return FilterSpec()
    return FilterSpec()


def _to_user_location(location: Any) -> Optional[UserLocation]:
    if location is None or isinstance(location, UserLocation):
        return location
    try:
        if isinstance(location, Mapping):
            return UserLocation.model_validate(dict(location))
        return UserLocation(lat=location.lat, lng=location.lng)
    except (ValidationError, AttributeError, TypeError):
        return None


def _coerce(model: type[BaseModel], item: Any) -> Optional[BaseModel]:
    if isinstance(item, model):
        return item
    if not isinstance(item, Mapping):
        return None
    try:
        return model.model_validate(dict(item))
    except ValidationError:
        return None


def _leading_int(value: str) -> Optional[int]:
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


# ---------------------------------------------------------------------------
# Measurements
# ---------------------------------------------------------------------------

def distance_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in miles (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def get_price(listing: Listing) -> float:
    """Adult admission, else the legacy flat price, else 0."""
    if listing.admission_price is not None and listing.admission_price.adult:
        return listing.admission_price.adult
    if listing.price_per_night:
        return listing.price_per_night
    return 0


def mean_approved_rating(reviews: Any) -> float:
    """Mean rating over approved reviews with a numeric rating; 0 when there are none."""
    if not isinstance(reviews, (list, tuple)):
        return 0

    ratings = []
    for item in reviews:
        review = _coerce(Review, item)
        if review is None or review.is_approved is False:
            continue
        rating = review.rating
        if isinstance(rating, bool) or not isinstance(rating, (int, float)) or not rating:
            continue
        if math.isnan(rating):
            continue
        ratings.append(rating)

    if not ratings:
        return 0
    return sum(ratings) / len(ratings)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def matches_zoo_type(listing: Listing, zoo_types: list[str]) -> bool:
    return bool(listing.zoo_type) and listing.zoo_type in zoo_types


def matches_animal_type(listing: Listing, animal_types: list[str]) -> bool:
    for item in listing.animals:
        animal = _coerce(Animal, item)
        if animal and (animal.species in animal_types or animal.category in animal_types):
            return True
    return False


def matches_amenity(listing: Listing, amenities: list[str]) -> bool:
    for item in listing.amenities:
        amenity = _coerce(Amenity, item)
        if amenity and amenity.name in amenities:
            return True
    return False


def within_distance(listing: Listing, distance: str, user_location: Optional[UserLocation]) -> bool:
    """True when close enough, or when distance cannot be judged (no location either side)."""
    max_distance = _leading_int(distance)
    if max_distance is None or user_location is None or listing.location is None:
        return True
    miles = distance_miles(
        user_location.lat,
        user_location.lng,
        listing.location.lat,
        listing.location.lng,
    )
    return miles <= max_distance


def in_price_range(listing: Listing, price_range: str) -> bool:
    price = get_price(listing)
    if price_range == "free":
        return price <= 0
    if price_range == "low":
        return 0 < price < 10
    if price_range == "medium":
        return 10 <= price <= 25
    if price_range == "high":
        return price > 25
    return True


def meets_rating(listing: Listing, rating: str) -> bool:
    min_rating = _leading_int(rating)
    if min_rating is None:
        return True
    return mean_approved_rating(listing.reviews) >= min_rating


def listing_matches(listing: Listing, spec: FilterSpec, user_location: Optional[UserLocation] = None) -> bool:
    """AND across criteria, OR within each criterion's accepted values."""
    if spec.zoo_types and not matches_zoo_type(listing, spec.zoo_types):
        return False
    if spec.animal_types and not matches_animal_type(listing, spec.animal_types):
        return False
    if spec.amenities and not matches_amenity(listing, spec.amenities):
        return False
    if spec.distance != "all" and not within_distance(listing, spec.distance, user_location):
        return False
    if spec.price_range != "all" and not in_price_range(listing, spec.price_range):
        return False
    if spec.rating != "all" and not meets_rating(listing, spec.rating):
        return False
    return True


def apply_filters(
    listings: Iterable[Listing],
    spec: FilterInput = None,
    user_location: Any = None,
) -> list[Listing]:
    """Return the listings matching every active criterion, in input order."""
    spec = to_filter_spec(spec)
    location = _to_user_location(user_location)
    return [listing for listing in listings if listing_matches(listing, spec, location)]


# ---------------------------------------------------------------------------
# Search and dropdown options
# ---------------------------------------------------------------------------

def _contains(value: Any, term: str) -> bool:
    return isinstance(value, str) and term in value.lower()


def search_listings(listings: Iterable[Listing], search_term: Optional[str]) -> list[Listing]:
    """Case-insensitive substring search over names, types, addresses, animals and amenities."""
    listings = list(listings)
    if not search_term or not search_term.strip():
        return listings

    term = search_term.strip().lower()
    results = []
    for listing in listings:
        if any(_contains(value, term) for value in (
            listing.name, listing.description, listing.zoo_type, listing.address,
        )):
            results.append(listing)
            continue

        animals = filter(None, (_coerce(Animal, item) for item in listing.animals))
        if any(_contains(a.name, term) or _contains(a.species, term) or _contains(a.category, term) for a in animals):
            results.append(listing)
            continue

        amenities = filter(None, (_coerce(Amenity, item) for item in listing.amenities))
        if any(_contains(a.name, term) or _contains(a.description, term) for a in amenities):
            results.append(listing)

    return results


def collect_filter_options(listings: Iterable[Listing]) -> FilterOptions:
    """Distinct zoo types, animal types (species and categories) and amenity names, sorted."""
    zoo_types = set()
    animal_types = set()
    amenities = set()

    for listing in listings:
        if listing.zoo_type:
            zoo_types.add(listing.zoo_type)
        for item in listing.animals:
            animal = _coerce(Animal, item)
            if animal:
                animal_types.update(v for v in (animal.species, animal.category) if isinstance(v, str) and v)
        for item in listing.amenities:
            amenity = _coerce(Amenity, item)
            if amenity and isinstance(amenity.name, str) and amenity.name:
                amenities.add(amenity.name)

    return FilterOptions(
        zoo_types=sorted(zoo_types),
        animal_types=sorted(animal_types),
        amenities=sorted(amenities),
    )


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def summarize(spec: FilterInput, total_count: int, filtered_count: int) -> str:
    """Human-readable description of the active filters and result count."""
    spec = to_filter_spec(spec)
    active = []

    if spec.zoo_types:
        active.append(_plural(len(spec.zoo_types), "zoo type", "zoo types"))
    if spec.animal_types:
        active.append(_plural(len(spec.animal_types), "animal type", "animal types"))
    if spec.amenities:
        active.append(_plural(len(spec.amenities), "amenity", "amenities"))
    if _leading_int(spec.distance) is not None:
        active.append(f"within {spec.distance} miles")
    if spec.price_range != "all" and spec.price_range in PRICE_LABELS:
        active.append(PRICE_LABELS[spec.price_range])
    if _leading_int(spec.rating) is not None:
        active.append(f"{spec.rating} stars")

    if not active:
        return f"Showing all {total_count} petting zoos"

    return f"Showing {filtered_count} of {total_count} petting zoos ({', '.join(active)})"
