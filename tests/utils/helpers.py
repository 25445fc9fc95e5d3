"""Test helper functions."""

import json
from io import BytesIO
from typing import Any, Callable, Optional
from unittest.mock import Mock

import httpx


class MockSocket:
    """Just enough of a socket for BaseHTTPRequestHandler to parse one request."""

    def __init__(self, request_line: bytes):
        self.request_line = request_line

    def makefile(self, *args, **kwargs):
        return BytesIO(self.request_line)

    def sendall(self, data):
        pass

    def close(self):
        pass


def create_handler(handler_class, method: str = "GET", path: str = "/"):
    """Build a handler instance with its output captured in a BytesIO."""
    request_line = f"{method} {path} HTTP/1.1\r\n\r\n".encode('utf-8')
    h = handler_class(MockSocket(request_line), ("127.0.0.1", 8000), None)
    h.wfile = BytesIO()
    h.send_response = Mock()
    h.send_header = Mock()
    h.end_headers = Mock()
    return h


def sanity_transport(
    result: Any = None,
    status_code: int = 200,
    on_request: Optional[Callable[[httpx.Request], None]] = None,
) -> httpx.MockTransport:
    """MockTransport answering every query the way the content store does."""

    def handle(request: httpx.Request) -> httpx.Response:
        if on_request is not None:
            on_request(request)
        if status_code != 200:
            return httpx.Response(status_code, json={"error": {"description": "failure"}})
        return httpx.Response(200, content=json.dumps({"ms": 3, "result": result}))

    return httpx.MockTransport(handle)
