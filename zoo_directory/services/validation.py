"""Validation and sanitization of loosely-typed CMS records.

Every function here returns a result object and never raises: CMS data is
edited by hand and regularly arrives with missing slugs, images without
assets or coordinates typed as strings. Errors mark data that cannot be used
for its purpose (a listing without a slug cannot be linked to), warnings mark
data that was defaulted.
"""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import ValidationError
from ulid import ULID

from zoo_directory.models.listing import AdmissionPrice, Image, Listing, Location, Slug
from zoo_directory.models.validation_result import CollectionResult, RejectedRecord, ValidationResult
from zoo_directory.services.error_monitor import DiagnosticsSink
from zoo_directory.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

DEFAULT_NAME = "Unnamed Petting Zoo"
DEFAULT_DESCRIPTION = "No description available"
FALLBACK_DESCRIPTION = "Information not available"
DEFAULT_ALT = "Petting zoo image"
DEFAULT_CURRENCY = "USD"
PRICE_FIELDS = ("adult", "child", "senior", "group")


# ---------------------------------------------------------------------------
# Primitive coercion
# ---------------------------------------------------------------------------

def parse_float(value: Any) -> Optional[float]:
    """Parse a number the lenient way CMS editors expect ("12.5 GBP" -> 12.5)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_FLOAT.match(value)
        if not match:
            return None
        number = float(match.group(1))
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_price(value: Any) -> Optional[float]:
    """Return a non-negative price or None."""
    number = parse_float(value)
    if number is None or number < 0:
        return None
    return number


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _type_tag(value: Any, default: str) -> str:
    """Document _type tags are names; anything else gets the default."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def sanitize_array(data: Any) -> list:
    """Coerce to a list with None items removed. Anything that is not a list becomes []."""
    if isinstance(data, (list, tuple)):
        return [item for item in data if item is not None]
    return []


def _report(sink: Optional[DiagnosticsSink], component: str, errors: list[str], **context: Any) -> None:
    if sink is not None and errors:
        sink.log_validation_error(component, errors, context)


# ---------------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------------

def validate_slug(slug: Any) -> ValidationResult[Slug]:
    """Validate a slug object; non-canonical values are normalized and kept."""
    if not isinstance(slug, Mapping):
        return ValidationResult[Slug](
            is_valid=False,
            data=Slug(),
            errors=["Slug data is null or invalid"],
        )

    current = slug.get("current")
    if not current or not isinstance(current, str):
        return ValidationResult[Slug](
            is_valid=False,
            data=Slug(),
            errors=["Slug missing current value"],
        )

    warnings = []
    if not SLUG_PATTERN.match(current):
        warnings.append("Slug format may not be URL-safe")

    normalized = current.lower().strip()
    if not normalized:
        return ValidationResult[Slug](
            is_valid=False,
            data=Slug(),
            errors=["Slug missing current value"],
            warnings=warnings,
        )

    return ValidationResult[Slug](
        is_valid=True,
        data=Slug(current=normalized, type=_type_tag(slug.get("_type"), "slug")),
        warnings=warnings,
    )


def validate_image(image: Any) -> ValidationResult[Image]:
    """Validate an image; one without an asset reference is never usable."""
    if not isinstance(image, Mapping):
        return ValidationResult[Image](
            is_valid=False,
            errors=["Image data is null or invalid"],
        )

    asset = image.get("asset")
    if not asset:
        return ValidationResult[Image](
            is_valid=False,
            errors=["Image missing asset reference"],
        )

    warnings = []
    alt = _text(image.get("alt"))
    if alt is None:
        warnings.append("Image missing alt text, using default")

    data = Image(
        asset=asset,
        alt=alt or DEFAULT_ALT,
        caption=_text(image.get("caption")),
        hotspot=image.get("hotspot") or None,
        crop=image.get("crop") or None,
        type=_type_tag(image.get("_type"), "image"),
    )
    return ValidationResult[Image](is_valid=True, data=data, warnings=warnings)


def validate_location(location: Any) -> ValidationResult[Location]:
    """Validate a geopoint. Both coordinates must be usable or the whole location is rejected."""
    if not isinstance(location, Mapping):
        return ValidationResult[Location](
            is_valid=False,
            errors=["Location data is null or invalid"],
        )

    errors = []
    lat = parse_float(location.get("lat"))
    lng = parse_float(location.get("lng"))

    if lat is None or lat < -90 or lat > 90:
        errors.append("Invalid latitude value")
    if lng is None or lng < -180 or lng > 180:
        errors.append("Invalid longitude value")

    if errors:
        return ValidationResult[Location](is_valid=False, errors=errors)

    data = Location(
        lat=lat,
        lng=lng,
        address=_text(location.get("address")),
        city=_text(location.get("city")),
        state=_text(location.get("state")),
        zip_code=_text(location.get("zipCode")),
    )
    return ValidationResult[Location](is_valid=True, data=data)


def validate_pricing(pricing: Any) -> ValidationResult[AdmissionPrice]:
    """Validate admission prices; collapses to None when no field parses."""
    if not isinstance(pricing, Mapping):
        return ValidationResult[AdmissionPrice](
            is_valid=False,
            errors=["Pricing data is null or invalid"],
        )

    prices = {name: parse_price(pricing.get(name)) for name in PRICE_FIELDS}
    if all(price is None for price in prices.values()):
        return ValidationResult[AdmissionPrice](
            is_valid=True,
            data=None,
            warnings=["No valid pricing information available"],
        )

    currency = _text(pricing.get("currency")) or DEFAULT_CURRENCY
    return ValidationResult[AdmissionPrice](
        is_valid=True,
        data=AdmissionPrice(currency=currency, **prices),
    )


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

def default_listing() -> Listing:
    """Placeholder listing used when a record is not an object at all."""
    return Listing(
        id=f"fallback-{ULID()}",
        name=DEFAULT_NAME,
        description=FALLBACK_DESCRIPTION,
    )


def _item_type(raw: Mapping) -> str:
    declared = raw.get("itemType") or raw.get("_type")
    if declared in ("pettingZoo", "property"):
        return declared
    if "title" in raw and "name" not in raw:
        return "property"
    return "pettingZoo"


def validate_listing(raw: Any, sink: Optional[DiagnosticsSink] = None) -> ValidationResult[Listing]:
    """Validate a petting zoo (or legacy property) record.

    `data` is always a renderable Listing. `is_valid` is False only when the
    record is not an object or has no usable slug; other problems (such as
    out-of-range coordinates) are recorded in `errors` and the offending field
    is dropped, but they do not make the listing unusable.
    """
    if not isinstance(raw, Mapping):
        errors = ["Zoo data is null or not an object"]
        _report(sink, "validate_listing", errors, record_type=type(raw).__name__)
        return ValidationResult[Listing](is_valid=False, data=default_listing(), errors=errors)

    errors: list[str] = []
    warnings: list[str] = []

    listing_id = _text(raw.get("_id"))
    if listing_id is None:
        warnings.append("Zoo missing _id, using temporary ID")
        listing_id = f"temp-{ULID()}"

    name = _text(raw.get("name")) or _text(raw.get("title"))
    if name is None:
        warnings.append("Zoo missing name, using default")
        name = DEFAULT_NAME

    slug_result = validate_slug(raw.get("slug"))
    if not slug_result.is_valid:
        errors.append("Zoo missing valid slug")
    warnings.extend(slug_result.warnings)

    description = _text(raw.get("description"))
    if description is None:
        warnings.append("Zoo missing description, using default")
        description = DEFAULT_DESCRIPTION

    location = None
    if raw.get("location") is not None:
        location_result = validate_location(raw.get("location"))
        if location_result.is_valid:
            location = location_result.data
        else:
            errors.append("Zoo location invalid, dropping location")
            errors.extend(location_result.errors)

    main_image = None
    if raw.get("mainImage") is not None:
        image_result = validate_image(raw.get("mainImage"))
        main_image = image_result.data
        if not image_result.is_valid:
            warnings.append("Zoo main image unusable, using fallback")
        warnings.extend(image_result.warnings)

    images = []
    for image in sanitize_array(raw.get("images")):
        image_result = validate_image(image)
        if image_result.data is not None:
            images.append(image_result.data)

    admission_price = None
    if raw.get("admissionPrice") is not None:
        pricing_result = validate_pricing(raw.get("admissionPrice"))
        admission_price = pricing_result.data
        warnings.extend(pricing_result.warnings)

    hours = raw.get("hours") or raw.get("operatingHours")
    contact_info = raw.get("contactInfo")

    try:
        data = Listing(
            id=listing_id,
            item_type=_item_type(raw),
            name=name,
            slug=slug_result.data,
            description=description,
            location=location,
            address=_text(raw.get("address")) or (location.address if location else None),
            zoo_type=_text(raw.get("zooType")) or _text(raw.get("propertyType")),
            main_image=main_image,
            images=images,
            admission_price=admission_price,
            price_per_night=parse_price(raw.get("pricePerNight")),
            reviews=sanitize_array(raw.get("reviews")),
            amenities=sanitize_array(raw.get("amenities")),
            animals=sanitize_array(raw.get("animals")),
            contact_info=dict(contact_info) if isinstance(contact_info, Mapping) else {},
            hours=dict(hours) if isinstance(hours, Mapping) else {},
            website=_text(raw.get("website")),
            phone=_text(raw.get("phone")),
        )
    except ValidationError as e:
        errors.append(f"Zoo data could not be normalized: {e.error_count()} field error(s)")
        _report(sink, "validate_listing", errors, listing_id=listing_id)
        return ValidationResult[Listing](is_valid=False, data=default_listing(), errors=errors, warnings=warnings)

    _report(sink, "validate_listing", errors, listing_id=listing_id, slug=data.slug.current)
    return ValidationResult[Listing](
        is_valid=slug_result.is_valid,
        data=data,
        errors=errors,
        warnings=warnings,
    )


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

COLLECTION_KEYS = ("pettingZoos", "properties")


@dataclass(frozen=True)
class EmptyPayload:
    """Nothing came back from the content store."""


@dataclass(frozen=True)
class SinglePayload:
    record: Any


@dataclass(frozen=True)
class CollectionPayload:
    records: list
    extra: dict = field(default_factory=dict)


Payload = Union[EmptyPayload, SinglePayload, CollectionPayload]


def classify_payload(raw: Any) -> Payload:
    """Resolve the shape of a CMS response once, at the boundary."""
    if not raw and not isinstance(raw, (list, tuple, Mapping)):
        return EmptyPayload()
    if isinstance(raw, (list, tuple)):
        return CollectionPayload(records=list(raw))
    if isinstance(raw, Mapping) and any(isinstance(raw.get(key), (list, tuple)) for key in COLLECTION_KEYS):
        records = []
        for key in COLLECTION_KEYS:
            if isinstance(raw.get(key), (list, tuple)):
                records.extend(raw[key])
        extra = {key: value for key, value in raw.items() if key not in COLLECTION_KEYS}
        return CollectionPayload(records=records, extra=extra)
    return SinglePayload(record=raw)


def validate_and_sanitize_collection(raw: Any, sink: Optional[DiagnosticsSink] = None) -> CollectionResult:
    """Validate a CMS payload: an array, a wrapper object with listing arrays, or one record."""
    payload = classify_payload(raw)

    if isinstance(payload, EmptyPayload):
        errors = ["No data received from API"]
        _report(sink, "validate_and_sanitize_collection", errors)
        return CollectionResult(is_valid=False, errors=errors)

    if isinstance(payload, SinglePayload):
        result = validate_listing(payload.record, sink=sink)
        return CollectionResult(
            is_valid=result.is_valid,
            single=result.data,
            errors=result.errors,
            warnings=result.warnings,
        )

    accepted = []
    rejected = []
    errors = []
    warnings = []
    for index, record in enumerate(payload.records):
        result = validate_listing(record, sink=sink)
        errors.extend(result.errors)
        warnings.extend(result.warnings)
        if result.is_valid:
            accepted.append(result.data)
        else:
            rejected.append(RejectedRecord(index=index, data=result.data, errors=result.errors))

    if rejected:
        logger.warning(
            "Rejected listings without a usable slug",
            received=len(payload.records),
            accepted=len(accepted),
            rejected=len(rejected),
            rejected_ids=[r.data.id for r in rejected],
        )
    else:
        logger.debug("Validated listing collection", received=len(payload.records), warnings=len(warnings))

    return CollectionResult(
        is_valid=not errors,
        data=accepted,
        rejected=rejected,
        extra=payload.extra,
        errors=errors,
        warnings=warnings,
    )
