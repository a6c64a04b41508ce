"""Command-line interface for Huang Shan edge pages."""

import sys
from pathlib import Path

import click
from pydantic import ValidationError

from huangshan_edge.config import Config
from huangshan_edge.content_client import ContentClient
from huangshan_edge.exceptions import ContentAPIError, StaticRoutesError
from huangshan_edge.i18n import DEFAULT_LANG, resolve_lang
from huangshan_edge.models import ContentType
from huangshan_edge.orchestrator import run
from huangshan_edge.renderer import PageRenderer
from huangshan_edge.routing import StaticRoutes

CONTENT_TYPE = click.Choice([content_type.value for content_type in ContentType])


def load_config() -> Config:
    try:
        return Config()
    except ValidationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
def main() -> None:
    """Render and inspect the dynamic knowledge and news pages."""


@main.command()
@click.argument("content_type", type=CONTENT_TYPE)
@click.argument("slug")
@click.option("--lang", default=DEFAULT_LANG, show_default=True, help="Site language (vn, en, cn).")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the response body to this file instead of stdout.",
)
def render(content_type: str, slug: str, lang: str, output: Path | None) -> None:
    """Run the edge pipeline for one slug against the live content API.

    CONTENT_TYPE: knowledge or news.
    SLUG: The post slug (e.g. "van-chuyen-duong-bo").
    """
    if not slug.strip():
        raise click.BadParameter("slug must not be empty", param_hint="SLUG")

    config = load_config()

    try:
        static_routes = StaticRoutes.from_config(config)
    except StaticRoutesError as e:
        click.echo(f"Static routes error: {e}", err=True)
        sys.exit(1)

    response = run(
        content_type=ContentType(content_type),
        slug=slug,
        lang=resolve_lang(lang),
        client=ContentClient(base_url=config.api_url, timeout=config.request_timeout),
        static_routes=static_routes,
        renderer=PageRenderer(site_url=config.site_url),
    )

    click.echo(f"Status: {response.status_code}", err=True)
    for name, value in response.headers.items():
        click.echo(f"{name}: {value}", err=True)

    if output is not None:
        output.write_text(response.body, encoding="utf-8")
        click.echo(f"Wrote {len(response.body)} characters to {output}", err=True)
    elif response.body:
        click.echo(response.body)

    if response.status_code >= 500:
        sys.exit(1)


@main.command()
@click.argument("content_type", type=CONTENT_TYPE)
@click.option("--lang", default=None, help="Site language (vn, en, cn).")
@click.option("--page", type=click.IntRange(min=1), default=None, help="Page number.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Posts per page.")
@click.option("--category", default=None, help="Category slug, or 'all'.")
@click.option("--search", default=None, help="Free-text search term.")
def posts(
    content_type: str,
    lang: str | None,
    page: int | None,
    limit: int | None,
    category: str | None,
    search: str | None,
) -> None:
    """List posts of one section from the content API."""
    config = load_config()
    client = ContentClient(base_url=config.api_url, timeout=config.request_timeout)

    try:
        result = client.list_posts(
            ContentType(content_type),
            lang=resolve_lang(lang) if lang else None,
            page=page,
            limit=limit,
            category=category,
            search=search,
        )
    except ContentAPIError as e:
        click.echo(f"Content API error: {e}", err=True)
        sys.exit(1)

    for post in result.data:
        click.echo(f"{post.slug or '-'}\t{post.title or ''}")
    click.echo(
        f"Page {result.page} of {result.total_pages or 1} ({result.total} {content_type} posts)"
    )


@main.command()
@click.argument("build_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the manifest JSON to this file instead of stdout.",
)
@click.option("--bucket", default=None, help="Upload the manifest to this S3 bucket.")
@click.option("--key", default="static-routes.json", show_default=True, help="S3 object key.")
@click.option("--region", default="ap-southeast-1", show_default=True, help="AWS region.")
def manifest(
    build_dir: Path, output: Path | None, bucket: str | None, key: str, region: str
) -> None:
    """Generate the static route manifest from a static site build.

    BUILD_DIR: Export directory containing knowledge/<slug>/index.html
    and news/<slug>/index.html pages.
    """
    try:
        routes = StaticRoutes.from_build_dir(build_dir)

        if output is not None:
            routes.write_file(output)
            click.echo(f"Wrote {len(routes)} static routes to {output}", err=True)
        else:
            click.echo(routes.to_json(), nl=False)

        if bucket:
            routes.upload_to_s3(bucket, key, region_name=region)
            click.echo(f"Uploaded manifest to s3://{bucket}/{key}", err=True)

    except StaticRoutesError as e:
        click.echo(f"Static routes error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
