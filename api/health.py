"""Health check endpoint."""

from http.server import BaseHTTPRequestHandler
import json

from zoo_directory.services.content_client import get_query_url
from zoo_directory.utils.errors import ConfigurationError


def content_store_status() -> str:
    """Report whether the content store query endpoint can be built from the environment."""
    try:
        get_query_url()
    except ConfigurationError:
        return "unconfigured"
    return "configured"


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        """Handle GET request."""
        content_store = content_store_status()
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        response = json.dumps({
            "status": "ok" if content_store == "configured" else "degraded",
            "service": "zoo-directory",
            "contentStore": content_store,
        })
        self.wfile.write(response.encode('utf-8'))

    def do_POST(self):
        """Handle POST request (same as GET for health check)."""
        self.do_GET()
