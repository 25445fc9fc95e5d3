"""Single petting zoo detail endpoint for Vercel."""

from http.server import BaseHTTPRequestHandler
from urllib.parse import parse_qs, urlsplit
import json

from zoo_directory.services.content_client import fetch_listing_by_slug
from zoo_directory.services.error_monitor import ErrorMonitor
from zoo_directory.services.validation import validate_listing
from zoo_directory.utils.errors import ContentStoreError
from zoo_directory.utils.event_loop import get_event_loop
from zoo_directory.utils.logging import correlation_context, get_structured_logger
from zoo_directory.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = get_structured_logger(__name__)


class handler(BaseHTTPRequestHandler):
    """Vercel serverless function handler for one listing, looked up by slug."""

    def _send_json(self, status: int, body: dict):
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(body, default=str).encode('utf-8'))

    def do_GET(self):
        """Handle GET request: /api/zoo?slug=<slug>."""
        with correlation_context() as correlation_id:
            params = parse_qs(urlsplit(self.path).query)
            slug = (params.get("slug") or [""])[0].strip()
            if not slug:
                self._send_json(400, {"error": "slug is required"})
                return

            try:
                raw = get_event_loop().run_until_complete(fetch_listing_by_slug(slug))
                if raw is None:
                    logger.info("Zoo not found", slug=slug)
                    self._send_json(404, {"error": "zoo not found"})
                    return
                result = validate_listing(raw, sink=ErrorMonitor())
            except ContentStoreError as e:
                logger.error("Content store unavailable", exc_info=True, error=str(e), slug=slug)
                self._send_json(502, {"error": "content store unavailable", "correlation_id": correlation_id})
                return
            except Exception as e:
                logger.exception("Error fetching zoo", error=str(e), slug=slug)
                self._send_json(500, {"error": "internal server error", "correlation_id": correlation_id})
                return

            self._send_json(200, {
                "zoo": result.data.to_cms(),
                "isValid": result.is_valid,
                "warnings": result.warnings,
                "errors": result.errors,
            })
