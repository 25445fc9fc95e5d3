"""Content store (Sanity) HTTP client with async context manager support."""

import json
import os
from typing import Any, Optional

import httpx

from zoo_directory.services.queries import ALL_LISTINGS_QUERY, LISTING_BY_SLUG_QUERY
from zoo_directory.utils.errors import ConfigurationError, ContentStoreError
from zoo_directory.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)

DEFAULT_API_VERSION = "2021-10-21"


def get_query_url() -> str:
    """Build the query endpoint from environment configuration."""
    project_id = os.environ.get("SANITY_PROJECT_ID")
    if not project_id:
        raise ConfigurationError("SANITY_PROJECT_ID must be set")

    dataset = os.environ.get("SANITY_DATASET", "production")
    api_version = os.environ.get("SANITY_API_VERSION", DEFAULT_API_VERSION)
    use_cdn = os.environ.get("SANITY_USE_CDN", "true").lower() == "true"
    host = "apicdn.sanity.io" if use_cdn else "api.sanity.io"
    return f"https://{project_id}.{host}/v{api_version}/data/query/{dataset}"


class ContentStoreClient:
    """Async context manager around an httpx client for GROQ queries."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport
        self.url: Optional[str] = None
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "ContentStoreClient":
        headers = {"Accept": "application/json"}
        token = os.environ.get("SANITY_API_TOKEN")
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.url = get_query_url()
        self.client = httpx.AsyncClient(
            headers=headers,
            timeout=float(os.environ.get("CONTENT_REQUEST_TIMEOUT_SECONDS", "10")),
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Content store operation error",
                error=str(exc_val),
                error_type=exc_type.__name__
            )
        if self.client is not None:
            await self.client.aclose()
            self.client = None
        return False

    async def query(self, groq: str, params: Optional[dict] = None) -> Any:
        """Run a GROQ query and return its `result`."""
        if self.client is None:
            raise ContentStoreError("ContentStoreClient used outside of its context")

        query_params = {"query": groq}
        for key, value in (params or {}).items():
            query_params[f"${key}"] = json.dumps(value)

        try:
            response = await self.client.get(self.url, params=query_params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ContentStoreError(
                f"Content store returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ContentStoreError(f"Content store request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise ContentStoreError("Content store returned invalid JSON") from e

        if not isinstance(body, dict) or "result" not in body:
            raise ContentStoreError("Content store response missing result")
        return body["result"]


async def fetch_all_listings(transport: Optional[httpx.AsyncBaseTransport] = None) -> Any:
    """Fetch every petting zoo and legacy property as a raw wrapper payload."""
    async with ContentStoreClient(transport=transport) as client:
        with log_timing("fetch_all_listings", logger=logger):
            return await client.query(ALL_LISTINGS_QUERY)


async def fetch_listing_by_slug(slug: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> Any:
    """Fetch one listing by slug; None when no document matches."""
    async with ContentStoreClient(transport=transport) as client:
        with log_timing("fetch_listing_by_slug", logger=logger, slug=slug):
            return await client.query(LISTING_BY_SLUG_QUERY, {"slug": slug})
