"""Client for the Huang Shan content API (knowledge and news posts)."""

import concurrent.futures as _fut
import logging
import time
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from huangshan_edge.exceptions import (
    ContentAPIError,
    FetchTimeoutError,
    InvalidPostDataError,
    PostNotFoundError,
)
from huangshan_edge.models import ContentType, Post, PostPage

logger = logging.getLogger(__name__)

USER_AGENT = "Huang-Shan-Website/1.0"


class ContentClient:
    """Client for the content API's post endpoints."""

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        """Initialize client with the API origin.

        Args:
            base_url: Origin of the content API, without a trailing slash.
            timeout: Seconds before an in-flight request is abandoned.

        Raises:
            ValueError: If base_url is empty or timeout is not positive.
        """
        if not base_url or not base_url.strip():
            raise ValueError("API base URL must not be empty")
        if timeout <= 0:
            raise ValueError("timeout must be greater than zero")
        self._base_url = base_url.strip().rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def get_post(self, content_type: ContentType, slug: str, lang: str) -> Post:
        """Fetch a single post by slug.

        Exactly one request is made; there are no retries.

        Args:
            content_type: Section the post belongs to.
            slug: URL slug of the post.
            lang: Language code passed through as the ``lang`` query param.

        Returns:
            The post, guaranteed to have a non-empty title.

        Raises:
            PostNotFoundError: If the API answers 404.
            InvalidPostDataError: If a 200 response has no usable post.
            FetchTimeoutError: If the API does not answer in time.
            ContentAPIError: For any other status or transport failure.
        """
        content_type = ContentType(content_type)
        url = f"{self._base_url}/api/{content_type.value}/by-slug/{quote(slug, safe='')}"

        response = self._get(url, params={"lang": lang})

        if response.status_code == 404:
            raise PostNotFoundError(slug)

        if not response.is_success:
            raise ContentAPIError(
                f"API request failed with status {response.status_code}: "
                f"{response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise InvalidPostDataError() from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise InvalidPostDataError()

        try:
            post = Post.model_validate(data)
        except ValidationError as e:
            raise InvalidPostDataError() from e

        if not post.title or not post.title.strip():
            raise InvalidPostDataError()

        return post

    def list_posts(
        self,
        content_type: ContentType,
        lang: str | None = None,
        page: int | None = None,
        limit: int | None = None,
        category: str | None = None,
        search: str | None = None,
    ) -> PostPage:
        """List posts of one section, newest first as ordered by the API.

        Args:
            content_type: Section to list.
            lang: Optional language code.
            page: Optional 1-based page number.
            limit: Optional page size.
            category: Optional category slug; ``"all"`` means no filter.
            search: Optional free-text search term.

        Raises:
            ValueError: If page or limit is not positive.
            ContentAPIError: If the API returns an error response.
        """
        content_type = ContentType(content_type)

        params: dict[str, str | int] = {}
        if lang:
            params["lang"] = lang
        if page is not None:
            if page < 1:
                raise ValueError("page must be 1 or greater")
            params["page"] = page
        if limit is not None:
            if limit < 1:
                raise ValueError("limit must be 1 or greater")
            params["limit"] = limit
        if category and category != "all":
            params["category"] = category
        if search and search.strip():
            params["search"] = search.strip()

        response = self._get(f"{self._base_url}/api/{content_type.value}", params=params)

        if not response.is_success:
            raise ContentAPIError(
                f"API request failed with status {response.status_code}: "
                f"{response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            return PostPage.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise InvalidPostDataError("Invalid post list received") from e

    def _get(self, url: str, params: dict) -> httpx.Response:
        """GET with one deadline covering connect, headers and the whole body.

        httpx's own timeout only bounds each phase, so a slowly trickling
        body could outlive it. The caller stops waiting at the deadline;
        the worker drops the connection at its next chunk.
        """
        logger.debug("GET %s params=%s", url, params)
        deadline = time.monotonic() + self._timeout
        executor = _fut.ThreadPoolExecutor(max_workers=1)
        future = executor.submit(self._fetch, url, params, deadline)
        try:
            return future.result(timeout=self._timeout)
        except (_fut.TimeoutError, httpx.TimeoutException) as e:
            raise FetchTimeoutError(self._timeout) from e
        except httpx.HTTPError as e:
            raise ContentAPIError(f"Content API request failed: {e}") from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _fetch(self, url: str, params: dict, deadline: float) -> httpx.Response:
        with httpx.stream(
            "GET",
            url,
            params=params,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            timeout=self._timeout,
        ) as response:
            body = bytearray()
            for chunk in response.iter_raw():
                if time.monotonic() > deadline:
                    raise FetchTimeoutError(self._timeout)
                body.extend(chunk)

        # Raw bytes plus the original headers, so content-encoding is decoded once.
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            content=bytes(body),
            request=response.request,
            extensions=response.extensions,
        )
