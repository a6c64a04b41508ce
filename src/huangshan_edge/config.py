"""Configuration management via environment variables."""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_API_URL = "https://huangshan-api.xox-labs-server.workers.dev"
DEFAULT_SITE_URL = "https://huang-shan-global-fe.pages.dev"


class Config(BaseSettings):
    """Application configuration loaded from environment variables.

    Loaded once at cold start and passed into the client, the static route
    table and the renderer; nothing reads the environment per request.
    """

    api_url: str = Field(
        default=DEFAULT_API_URL,
        validation_alias=AliasChoices("NEXT_PUBLIC_API_URL", "API_URL", "api_url"),
    )
    site_url: str = DEFAULT_SITE_URL
    request_timeout: float = 10.0
    static_routes_path: str | None = None
    static_routes_bucket: str | None = None
    static_routes_key: str = "static-routes.json"
    aws_region_name: str = "ap-southeast-1"
    log_level: str = "INFO"

    @field_validator("api_url", "site_url")
    @classmethod
    def must_be_origin(cls, v: str) -> str:
        """Reject empty values and drop trailing slashes."""
        if not v or not v.strip():
            raise ValueError("must not be empty or whitespace")
        return v.strip().rstrip("/")

    @field_validator("request_timeout")
    @classmethod
    def must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator("static_routes_path", "static_routes_bucket")
    @classmethod
    def blank_means_unset(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v
