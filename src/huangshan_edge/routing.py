"""Slug validation and the static route table.

Slugs listed in the static route table have a pre-built page in the static
site; requests for them are redirected there instead of being rendered.
The table is built once at cold start from one of:

- the built-in defaults,
- a JSON manifest on disk,
- a JSON manifest object in S3 (written by the site build).
"""

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from huangshan_edge.config import Config
from huangshan_edge.exceptions import InvalidSlugError, StaticRoutesError
from huangshan_edge.models import ContentType, StaticManifest

logger = logging.getLogger(__name__)

DEFAULT_STATIC_SLUGS: dict[ContentType, frozenset[str]] = {
    ContentType.KNOWLEDGE: frozenset(),
    ContentType.NEWS: frozenset(
        {
            "dynamic-route-test-post-creation-verification",
            "beautiful-ui-test-final-solution",
            "beautiful-dynamic-post-test",
            "final-solution-test-perfect-ui",
            "test-final-clean-configuration",
            "van-chuyen-duong-bo-chinh-ngach-lua-chon-toi-uu-khi-nhap-hang-trung-quoc",
        }
    ),
}


def validate_slug(value: Any) -> str:
    """Return the slug if usable, else raise InvalidSlugError."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidSlugError()
    return value


class StaticRoutes:
    """Lookup of slugs that are served from the static build."""

    def __init__(self, slugs: Mapping[ContentType | str, Iterable[str]] | None = None) -> None:
        source = DEFAULT_STATIC_SLUGS if slugs is None else slugs
        self._slugs: dict[ContentType, frozenset[str]] = {
            content_type: frozenset() for content_type in ContentType
        }
        for content_type, values in source.items():
            self._slugs[ContentType(content_type)] = frozenset(values)

    def __len__(self) -> int:
        return sum(len(slugs) for slugs in self._slugs.values())

    def is_static(self, content_type: ContentType, slug: str) -> bool:
        return slug in self._slugs[ContentType(content_type)]

    @staticmethod
    def static_path(content_type: ContentType, slug: str) -> str:
        """Path of the pre-built page: ``/{type}/{slug}/``, no query string."""
        return f"/{ContentType(content_type).value}/{quote(slug, safe='')}/"

    def to_manifest(self) -> StaticManifest:
        return StaticManifest(
            knowledge=sorted(self._slugs[ContentType.KNOWLEDGE]),
            news=sorted(self._slugs[ContentType.NEWS]),
        )

    @classmethod
    def from_manifest(cls, manifest: StaticManifest) -> "StaticRoutes":
        return cls({ContentType.KNOWLEDGE: manifest.knowledge, ContentType.NEWS: manifest.news})

    @classmethod
    def from_json(cls, raw: str | bytes) -> "StaticRoutes":
        """Parse a manifest document.

        Raises:
            StaticRoutesError: If the document is not a valid manifest.
        """
        try:
            return cls.from_manifest(StaticManifest.model_validate_json(raw))
        except ValidationError as e:
            raise StaticRoutesError(f"Invalid static route manifest: {e}", original_error=e) from e

    @classmethod
    def from_file(cls, path: str | Path) -> "StaticRoutes":
        try:
            raw = Path(path).read_bytes()
        except OSError as e:
            raise StaticRoutesError(
                f"Could not read static route manifest '{path}': {e}", original_error=e
            ) from e
        return cls.from_json(raw)

    @classmethod
    def from_s3(
        cls, bucket: str, key: str, region_name: str = "ap-southeast-1"
    ) -> "StaticRoutes":
        """Load the manifest the site build uploaded to S3.

        Raises:
            StaticRoutesError: If the object cannot be fetched or parsed.
        """
        client = boto3.client("s3", region_name=region_name)
        try:
            response = client.get_object(Bucket=bucket, Key=key)
            raw = response["Body"].read()
        except (ClientError, BotoCoreError) as e:
            raise StaticRoutesError(
                f"Could not fetch static route manifest s3://{bucket}/{key}: {e}",
                original_error=e,
            ) from e
        return cls.from_json(raw)

    @classmethod
    def from_config(cls, config: Config) -> "StaticRoutes":
        """Pick the manifest source: S3 first, then a local file, then defaults."""
        if config.static_routes_bucket:
            return cls.from_s3(
                config.static_routes_bucket,
                config.static_routes_key,
                region_name=config.aws_region_name,
            )
        if config.static_routes_path:
            return cls.from_file(config.static_routes_path)
        return cls()

    @classmethod
    def from_build_dir(cls, build_dir: str | Path) -> "StaticRoutes":
        """Collect slugs from a static export laid out as ``{type}/{slug}/index.html``."""
        root = Path(build_dir)
        if not root.is_dir():
            raise StaticRoutesError(f"Build directory not found: {root}")

        slugs: dict[ContentType, list[str]] = {}
        for content_type in ContentType:
            section = root / content_type.value
            found = []
            if section.is_dir():
                for page in sorted(section.glob("*/index.html")):
                    found.append(page.parent.name)
            slugs[content_type] = found
            logger.info("Found %d static %s pages", len(found), content_type.value)
        return cls(slugs)

    def to_json(self) -> str:
        return json.dumps(self.to_manifest().model_dump(), indent=2, ensure_ascii=False) + "\n"

    def write_file(self, path: str | Path) -> None:
        try:
            Path(path).write_text(self.to_json(), encoding="utf-8")
        except OSError as e:
            raise StaticRoutesError(
                f"Could not write static route manifest '{path}': {e}", original_error=e
            ) from e

    def upload_to_s3(self, bucket: str, key: str, region_name: str = "ap-southeast-1") -> None:
        client = boto3.client("s3", region_name=region_name)
        try:
            client.put_object(
                Bucket=bucket,
                Key=key,
                Body=self.to_json().encode("utf-8"),
                ContentType="application/json",
            )
        except (ClientError, BotoCoreError) as e:
            raise StaticRoutesError(
                f"Could not upload static route manifest to s3://{bucket}/{key}: {e}",
                original_error=e,
            ) from e
