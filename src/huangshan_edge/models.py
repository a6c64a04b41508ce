"""Pydantic models for content API data and edge responses."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentType(str, Enum):
    """Article sections served by the edge handlers."""

    KNOWLEDGE = "knowledge"
    NEWS = "news"


_TRUE_FLAGS = {"1", "true", "yes", "on"}
_FALSE_FLAGS = {"", "0", "false", "no", "off"}


def _lenient_text(value: Any) -> str | None:
    """Numbers become strings; anything else that is not text is dropped."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _lenient_flag(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        flag = value.strip().lower()
        if flag in _TRUE_FLAGS:
            return True
        if flag in _FALSE_FLAGS:
            return False
    return None


class Post(BaseModel):
    """A knowledge or news article as returned by ``/by-slug/``.

    Every field is optional; the renderer supplies localized fallbacks.
    Values of an unexpected type are coerced or dropped so that one odd
    field never invalidates an otherwise usable post.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    excerpt: str | None = None
    category: str | None = None
    featured_image: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    content: str | None = None
    content_html: str | None = None
    author: str | None = None
    featured: bool | None = None

    @field_validator(
        "title",
        "excerpt",
        "category",
        "featured_image",
        "created_at",
        "updated_at",
        "content",
        "content_html",
        "author",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _lenient_text(v)

    @field_validator("featured", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool | None:
        return _lenient_flag(v)


class PostSummary(BaseModel):
    """A list entry from ``GET /api/{type}``."""

    model_config = ConfigDict(extra="ignore")

    id: str | int | None = None
    slug: str | None = None
    title: str | None = None
    excerpt: str | None = None
    category: str | None = None
    created_at: str | None = None
    published_at: str | None = None

    @field_validator(
        "slug", "title", "excerpt", "category", "created_at", "published_at", mode="before"
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _lenient_text(v)


class PostPage(BaseModel):
    """One page of posts with the API's pagination counters."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    data: list[PostSummary] = []
    total: int = 0
    page: int = 1
    limit: int = 0
    total_pages: int = Field(default=0, alias="totalPages")


class StaticManifest(BaseModel):
    """Slugs that have a pre-built static page, per content type."""

    model_config = ConfigDict(extra="ignore")

    knowledge: list[str] = []
    news: list[str] = []


class PageResponse(BaseModel):
    """An HTTP response produced by the edge pipeline."""

    status_code: int
    headers: dict[str, str] = {}
    body: str = ""

    def to_lambda(self) -> dict:
        """Format as an API Gateway proxy integration response."""
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body,
        }
