"""Render decisions for images, links and maps built from CMS data.

Each resolver returns either Rendered (what to draw) or Fallback (why not);
the presentation layer only has to pick a template.
"""

import os
import re
from collections.abc import Iterable, Mapping
from typing import Any, Literal, Optional, Union
from urllib.parse import urlencode

from pydantic import BaseModel, Field

from zoo_directory.models.listing import Listing, Location
from zoo_directory.services.error_monitor import ErrorMonitor
from zoo_directory.services.validation import validate_image, validate_location, validate_slug
from zoo_directory.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

CDN_BASE_URL = "https://cdn.sanity.io/images"
_IMAGE_REF = re.compile(r"^image-(?P<id>[A-Za-z0-9]+)-(?P<dims>\d+x\d+)-(?P<format>[a-z0-9]+)$")

DANGEROUS_PROTOCOLS = ("javascript:", "data:", "vbscript:", "file:")
EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "tel:")
SAFE_PREFIXES = ("/", "#") + EXTERNAL_PREFIXES


class Rendered(BaseModel):
    """The element can be rendered with these properties."""
    kind: Literal["rendered"] = "rendered"
    props: dict = Field(default_factory=dict)


class Fallback(BaseModel):
    """The element must be replaced by a placeholder."""
    kind: Literal["fallback"] = "fallback"
    reason: str
    message: str
    errors: list[str] = Field(default_factory=list)
    suggestion: Optional[str] = None


RenderDecision = Union[Rendered, Fallback]


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

def _asset_ref(asset: Any) -> Optional[str]:
    if isinstance(asset, str):
        return asset
    if isinstance(asset, Mapping):
        return asset.get("_ref") or asset.get("_id")
    return None


def build_image_url(
    asset: Any,
    project_id: str,
    dataset: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> str:
    """CDN URL for an image asset reference such as 'image-abc123-800x600-jpg'.

    Raises ValueError when the reference cannot be parsed.
    """
    ref = _asset_ref(asset)
    match = _IMAGE_REF.match(ref or "")
    if not match:
        raise ValueError(f"Unrecognised image asset reference: {ref!r}")
    if not project_id:
        raise ValueError("No CMS project id configured for image URLs")

    params = {}
    if width:
        params["w"] = width
    if height:
        params["h"] = height
    params["fit"] = "crop"
    params["auto"] = "format"

    filename = f"{match['id']}-{match['dims']}.{match['format']}"
    return f"{CDN_BASE_URL}/{project_id}/{dataset}/{filename}?{urlencode(params)}"


def resolve_image(
    image: Any,
    width: int = 400,
    height: int = 250,
    alt: Optional[str] = None,
    identifier: str = "image",
    project_id: Optional[str] = None,
    dataset: Optional[str] = None,
    sink: Optional[ErrorMonitor] = None,
) -> RenderDecision:
    """Decide how to render a CMS image."""
    result = validate_image(image)
    if not result.is_valid:
        if sink is not None:
            sink.log_validation_error("SafeImage", result.errors, {"identifier": identifier})
        return Fallback(reason="validation", message="No image available", errors=result.errors)

    project_id = project_id or os.environ.get("SANITY_PROJECT_ID", "")
    dataset = dataset or os.environ.get("SANITY_DATASET", "production")
    try:
        url = build_image_url(result.data.asset, project_id, dataset, width, height)
    except ValueError as e:
        logger.warning("Failed to generate image URL", identifier=identifier, error=str(e))
        if sink is not None:
            sink.log_image_error({"error": str(e)}, {"identifier": identifier})
        return Fallback(reason="url", message="No image available", errors=[str(e)])

    return Rendered(props={
        "src": url,
        "alt": alt or result.data.alt,
        "width": width,
        "height": height,
        "class_name": "main-image" if identifier == "main-image" else "image",
    })


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

def sanitize_href(href: Any) -> Optional[str]:
    """Block script-capable protocols and give bare relative paths a leading slash."""
    if not isinstance(href, str):
        return None

    trimmed = href.strip()
    if not trimmed:
        return None

    lowered = trimmed.lower()
    for protocol in DANGEROUS_PROTOCOLS:
        if lowered.startswith(protocol):
            logger.warning("Blocked dangerous link protocol", protocol=protocol)
            return None

    if lowered.startswith(SAFE_PREFIXES):
        return trimmed
    if "://" not in trimmed:
        return f"/{trimmed}"
    return trimmed


def is_external_link(href: str) -> bool:
    return href.lower().startswith(EXTERNAL_PREFIXES)


def resolve_link(
    href: Optional[str] = None,
    slug: Any = None,
    base_path: str = "",
    disabled: bool = False,
    sink: Optional[ErrorMonitor] = None,
) -> RenderDecision:
    """Decide how to render a link given an explicit href or a CMS slug."""
    final_href = href
    if slug is not None and not href:
        result = validate_slug(slug)
        if not result.is_valid:
            if sink is not None:
                sink.log_validation_error("SafeLink", result.errors, {"base_path": base_path})
            return Fallback(reason="validation", message="Link unavailable", errors=result.errors)
        base = base_path.rstrip("/")
        final_href = f"{base}/{result.data.current}"

    if not final_href or not isinstance(final_href, str) or not final_href.strip():
        if sink is not None:
            sink.log_link_error({"href": href, "slug": slug, "base_path": base_path})
        return Fallback(reason="missing", message="Link unavailable")

    if disabled:
        return Fallback(reason="disabled", message="Link disabled")

    sanitized = sanitize_href(final_href)
    if sanitized is None:
        if sink is not None:
            sink.log_link_error({"href": final_href, "reason": "sanitization"})
        return Fallback(reason="unsafe", message="Link unavailable")

    external = is_external_link(sanitized)
    props = {"href": sanitized, "external": external}
    if external:
        props.update(target="_blank", rel="noopener noreferrer")
    return Rendered(props=props)


# ---------------------------------------------------------------------------
# Maps
# ---------------------------------------------------------------------------

def _marker_location(location: Any) -> Optional[Location]:
    if isinstance(location, Location):
        return location
    result = validate_location(location)
    return result.data if result.is_valid else None


def resolve_map(
    listings: Iterable[Listing],
    api_key: Optional[str] = None,
    sink: Optional[ErrorMonitor] = None,
) -> RenderDecision:
    """Markers for listings with usable coordinates; a config fallback when no maps key is set."""
    api_key = api_key if api_key is not None else os.environ.get("GOOGLE_MAPS_API_KEY")
    if not api_key:
        if sink is not None:
            sink.log_map_error({"type": "config"})
        return Fallback(
            reason="config",
            message="Google Maps API key is not configured",
            suggestion="Set GOOGLE_MAPS_API_KEY in the environment",
        )

    markers = []
    unmapped = []
    for listing in listings:
        location = _marker_location(listing.location)
        if location is None:
            unmapped.append(listing.name)
            continue
        markers.append({
            "id": listing.id,
            "name": listing.name,
            "slug": listing.slug.current,
            "lat": location.lat,
            "lng": location.lng,
        })

    if unmapped:
        logger.debug("Listings shown without a map marker", count=len(unmapped))

    return Rendered(props={"markers": markers, "unmapped": unmapped})
