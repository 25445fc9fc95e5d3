"""End-to-end: content store payload through validation, filtering and URL state."""

import pytest
from urllib.parse import urlsplit
from zoo_directory.services.content_client import fetch_all_listings
from zoo_directory.services.error_monitor import ErrorMonitor
from zoo_directory.services.filters import apply_filters, search_listings, summarize
from zoo_directory.services.safe_render import Rendered, resolve_link
from zoo_directory.services.url_state import build_shareable_url, parse_url_params
from zoo_directory.services.validation import validate_and_sanitize_collection
from tests.utils.factories import create_amenity_data, create_zoo_data
from tests.utils.helpers import sanity_transport


@pytest.mark.integration
@pytest.mark.asyncio
async def test_shared_url_reproduces_result_set():
    """Test a shared URL yields the same listings as the session that created it."""
    farm = create_zoo_data(name="Meadow Farm", slug="meadow-farm", zoo_type="Farm", adult_price=6)
    farm["amenities"] = [create_amenity_data("Cafe")]
    park = create_zoo_data(name="Valley Park", slug="valley-park", zoo_type="Wildlife Park", adult_price=20)
    park["amenities"] = [create_amenity_data("Cafe")]
    for zoo in (farm, park):
        zoo["description"] = "Family day out."
        zoo["location"]["address"] = "1 Meadow Lane"
        zoo["animals"] = []
    broken = {"name": "Half Entered Zoo", "location": {"lat": "??", "lng": 0}}
    payload = {"pettingZoos": [farm, park, broken], "properties": [], "totalCount": 3}

    raw = await fetch_all_listings(transport=sanity_transport(payload))
    monitor = ErrorMonitor(enabled=True)
    validated = validate_and_sanitize_collection(raw, sink=monitor)

    assert len(validated.data) == 2
    assert validated.extra == {"totalCount": 3}
    assert validated.rejected[0].data.name == "Half Entered Zoo"
    assert monitor.get_error_stats()["errors_by_component"] == {"validate_listing": 1}

    spec = {"amenities": ["Cafe"], "priceRange": "medium"}
    first = apply_filters(search_listings(validated.data, "park"), spec)

    url = build_shareable_url("https://zoos.example/", "park", spec)
    state = parse_url_params(urlsplit(url).query)
    second = apply_filters(search_listings(validated.data, state.search), state.filters, state.user_location)

    assert [listing.name for listing in first] == ["Valley Park"]
    assert second == first
    assert summarize(state.filters, len(validated.data), len(second)) == (
        "Showing 1 of 2 petting zoos (1 amenity, £10-£25)"
    )

    link = resolve_link(slug=second[0].slug.to_cms(), base_path="/zoos")
    assert isinstance(link, Rendered)
    assert link.props["href"] == "/zoos/valley-park"
