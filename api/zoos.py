"""Petting zoo directory listing endpoint for Vercel."""

from http.server import BaseHTTPRequestHandler
from urllib.parse import urlsplit
import json

from zoo_directory.services.content_client import fetch_all_listings
from zoo_directory.services.error_monitor import ErrorMonitor
from zoo_directory.services.filters import apply_filters, collect_filter_options, search_listings, summarize
from zoo_directory.services.url_state import parse_url_params
from zoo_directory.services.validation import validate_and_sanitize_collection
from zoo_directory.utils.errors import ContentStoreError
from zoo_directory.utils.event_loop import get_event_loop
from zoo_directory.utils.logging import correlation_context, get_structured_logger
from zoo_directory.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = get_structured_logger(__name__)


def build_directory(raw_payload, query) -> dict:
    """Validate the CMS payload, then apply search and filters from the query string."""
    monitor = ErrorMonitor()
    state = parse_url_params(query)

    validated = validate_and_sanitize_collection(raw_payload, sink=monitor)
    listings = validated.data
    if validated.single is not None:
        listings = [validated.single]

    matches = search_listings(listings, state.search)
    matches = apply_filters(matches, state.filters, state.user_location)

    return {
        "zoos": [listing.to_cms() for listing in matches],
        "total": len(listings),
        "count": len(matches),
        "summary": summarize(state.filters, len(listings), len(matches)),
        "filterOptions": collect_filter_options(listings).model_dump(by_alias=True),
        "warnings": len(validated.warnings),
        "errors": len(validated.errors),
    }


class handler(BaseHTTPRequestHandler):
    """Vercel serverless function handler for the zoo directory."""

    def _send_json(self, status: int, body: dict):
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(body, default=str).encode('utf-8'))

    def do_GET(self):
        """Handle GET request: list, search and filter petting zoos."""
        with correlation_context() as correlation_id:
            query = urlsplit(self.path).query
            try:
                raw_payload = get_event_loop().run_until_complete(fetch_all_listings())
                body = build_directory(raw_payload, query)
            except ContentStoreError as e:
                logger.error("Content store unavailable", exc_info=True, error=str(e), status_code=e.status_code)
                self._send_json(502, {"error": "content store unavailable", "correlation_id": correlation_id})
                return
            except Exception as e:
                logger.exception("Error building zoo directory", error=str(e))
                self._send_json(500, {"error": "internal server error", "correlation_id": correlation_id})
                return

            logger.info(
                "Zoo directory served",
                total=body["total"],
                count=body["count"],
            )
            self._send_json(200, body)
