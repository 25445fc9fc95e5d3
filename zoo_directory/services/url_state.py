"""Round-trip search and filter state through URL query strings."""

import json
from collections.abc import Mapping
from typing import Any, Optional, Union
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit, urlunsplit

from pydantic import ValidationError

from zoo_directory.models.filters import FilterSpec, UrlState, UserLocation
from zoo_directory.services.filters import FilterInput, to_filter_spec
from zoo_directory.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

SEARCH_PARAM = "search"
FILTERS_PARAM = "filters"


def serialize_filters(spec: FilterInput) -> str:
    """JSON + percent-encode the non-default criteria; empty string when all are default."""
    active = to_filter_spec(spec).active_fields()
    if not active:
        return ""
    return quote(json.dumps(active, separators=(",", ":")), safe="")


def deserialize_filters(value: Optional[str]) -> FilterSpec:
    """Inverse of serialize_filters. Anything unreadable yields the default spec."""
    if not value:
        return FilterSpec()

    try:
        parsed = json.loads(unquote(value))
    except (TypeError, ValueError) as e:
        logger.warning("Failed to parse filters from URL", error=str(e))
        return FilterSpec()

    if not isinstance(parsed, dict):
        logger.warning("Ignoring filters that are not an object", value_type=type(parsed).__name__)
        return FilterSpec()

    try:
        return FilterSpec.model_validate(parsed)
    except ValidationError as e:
        logger.warning("Ignoring invalid filters from URL", error_count=e.error_count())
        return FilterSpec()


def _first(params: Mapping, key: str) -> Optional[str]:
    value = params.get(key)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return value if isinstance(value, str) else None


def _user_location(params: Mapping) -> Optional[UserLocation]:
    lat = _first(params, "lat")
    lng = _first(params, "lng")
    if lat is None or lng is None:
        return None
    try:
        return UserLocation(lat=float(lat), lng=float(lng))
    except (ValueError, ValidationError):
        logger.warning("Ignoring invalid user location", lat=lat, lng=lng)
        return None


def parse_url_params(query: Union[str, Mapping[str, Any], None]) -> UrlState:
    """Recover search term, filters and optional user location from a query string or mapping."""
    if query is None:
        params: Mapping = {}
    elif isinstance(query, str):
        params = parse_qs(query.lstrip("?"), keep_blank_values=True)
    else:
        params = query

    return UrlState(
        search=_first(params, SEARCH_PARAM) or "",
        filters=deserialize_filters(_first(params, FILTERS_PARAM)),
        user_location=_user_location(params),
    )


def build_shareable_url(base_url: str, search_term: str = "", spec: FilterInput = None) -> str:
    """Build a bookmarkable URL for the current search and filters (path kept, old query dropped)."""
    parts = urlsplit(base_url)
    params = {}
    if search_term and search_term.strip():
        params[SEARCH_PARAM] = search_term
    encoded_filters = serialize_filters(spec)
    if encoded_filters:
        params[FILTERS_PARAM] = encoded_filters
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(params), ""))
