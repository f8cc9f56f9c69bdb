"""
Notes API: Upstream Posts Client
================================

What:  Fetches the post list from the configured third-party source and
       reduces it to the first N `{id, title}` objects.
How:   One httpx.AsyncClient, created in the application lifespan and closed
       on shutdown, shared by all requests. A single GET per call, no retries.
Who:   GET /posts.

Failure mapping (all → UpstreamFetchError "Failed to fetch posts"):
    httpx.HTTPError          connect/read timeout, DNS failure, non-2xx status
    ValueError               body is not JSON
    non-list body            e.g. an error object
    PydanticValidationError  an item without an integer id or string title
"""

import logging
from typing import List, Optional

import httpx
from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from notes_api.config import Settings
from notes_api.exceptions import UpstreamFetchError
from notes_api.schemas.post import PostSummary

logger = logging.getLogger(__name__)


class PostsClient:
    """
    Thin proxy over the upstream posts endpoint.

    Args:
        source_url: Absolute URL returning a JSON array of posts.
        limit: Number of posts to keep from the front of the array.
        timeout: Seconds for connect/read before the call fails.
        client: Pre-built httpx.AsyncClient (tests inject a MockTransport).
    """

    def __init__(
        self,
        source_url: str,
        limit: int = 5,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.source_url = source_url
        self.limit = limit
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PostsClient":
        return cls(
            source_url=settings.posts_source_url,
            limit=settings.posts_limit,
            timeout=settings.posts_timeout,
        )

    async def fetch_posts(self) -> List[PostSummary]:
        """
        GET the upstream list and keep the first `limit` items.

        Returns:
            Up to `limit` PostSummary objects, in upstream order.

        Raises:
            UpstreamFetchError: on any transport, status or payload problem.
        """
        try:
            response = await self._client.get(self.source_url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.warning("Upstream posts request failed: %s", str(e))
            raise UpstreamFetchError(
                context={"url": self.source_url, "error_type": type(e).__name__},
            ) from e
        except ValueError as e:
            logger.warning("Upstream posts response is not JSON: %s", str(e))
            raise UpstreamFetchError(context={"url": self.source_url}) from e

        if not isinstance(payload, list):
            logger.warning(
                "Upstream posts response is %s, expected a list", type(payload).__name__
            )
            raise UpstreamFetchError(context={"url": self.source_url})

        try:
            return [PostSummary.model_validate(item) for item in payload[: self.limit]]
        except PydanticValidationError as e:
            logger.warning("Upstream post item is malformed: %s", str(e))
            raise UpstreamFetchError(context={"url": self.source_url}) from e

    async def aclose(self) -> None:
        """Close the underlying connection pool (application shutdown)."""
        await self._client.aclose()


def get_posts_client(request: Request) -> PostsClient:
    """FastAPI dependency returning the application's PostsClient."""
    return request.app.state.posts_client
