"""Unit tests for configuration loading."""

import pytest
from pydantic import ValidationError

from huangshan_edge.config import DEFAULT_API_URL, DEFAULT_SITE_URL, Config

ENV_VARS = [
    "NEXT_PUBLIC_API_URL",
    "API_URL",
    "SITE_URL",
    "REQUEST_TIMEOUT",
    "STATIC_ROUTES_PATH",
    "STATIC_ROUTES_BUCKET",
    "STATIC_ROUTES_KEY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestConfig:
    """Tests for the Config model."""

    def test_config_falls_back_to_default_api_url(self):
        """Without NEXT_PUBLIC_API_URL the production API origin is used."""
        config = Config()

        assert config.api_url == DEFAULT_API_URL
        assert config.site_url == DEFAULT_SITE_URL

    def test_config_reads_next_public_api_url(self, monkeypatch):
        """NEXT_PUBLIC_API_URL should override the default origin."""
        monkeypatch.setenv("NEXT_PUBLIC_API_URL", "https://api.example.test")

        config = Config()

        assert config.api_url == "https://api.example.test"

    def test_config_accepts_api_url_alias(self, monkeypatch):
        """API_URL is accepted as a shorter alias."""
        monkeypatch.setenv("API_URL", "https://alias.example.test")

        config = Config()

        assert config.api_url == "https://alias.example.test"

    def test_config_accepts_keyword_arguments(self):
        """Values can be injected directly, e.g. in tests and the CLI."""
        config = Config(api_url="https://kw.example.test", site_url="https://site.example.test")

        assert config.api_url == "https://kw.example.test"
        assert config.site_url == "https://site.example.test"

    def test_config_strips_trailing_slash(self, monkeypatch):
        """Origins are normalized so paths can be appended safely."""
        monkeypatch.setenv("NEXT_PUBLIC_API_URL", "https://api.example.test/")
        monkeypatch.setenv("SITE_URL", "https://site.example.test//")

        config = Config()

        assert config.api_url == "https://api.example.test"
        assert config.site_url == "https://site.example.test"

    def test_config_rejects_whitespace_api_url(self, monkeypatch):
        """Whitespace-only API URL should raise ValidationError."""
        monkeypatch.setenv("NEXT_PUBLIC_API_URL", "   ")

        with pytest.raises(ValidationError):
            Config()

    def test_config_default_timeout_is_ten_seconds(self):
        assert Config().request_timeout == 10.0

    def test_config_rejects_non_positive_timeout(self, monkeypatch):
        """A zero timeout would abort every request."""
        monkeypatch.setenv("REQUEST_TIMEOUT", "0")

        with pytest.raises(ValidationError) as exc_info:
            Config()

        assert "request_timeout" in str(exc_info.value).lower()

    def test_config_treats_blank_bucket_as_unset(self, monkeypatch):
        """An empty STATIC_ROUTES_BUCKET (e.g. from a blank SAM parameter) means no S3."""
        monkeypatch.setenv("STATIC_ROUTES_BUCKET", "")

        assert Config().static_routes_bucket is None
