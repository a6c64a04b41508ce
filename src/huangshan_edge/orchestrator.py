"""Orchestrator for the slug → page pipeline."""

import logging
from datetime import datetime, timezone
from typing import Any

from huangshan_edge.content_client import ContentClient
from huangshan_edge.exceptions import ContentAPIError, PostNotFoundError
from huangshan_edge.models import ContentType, PageResponse
from huangshan_edge.renderer import PageRenderer
from huangshan_edge.responses import (
    article_response,
    not_found_response,
    redirect_response,
    unavailable_response,
)
from huangshan_edge.routing import StaticRoutes

logger = logging.getLogger(__name__)


def failure_kind(error: Exception) -> str:
    """Classify a failure for the log record; visitors always get the same 503."""
    if isinstance(error, ContentAPIError):
        return error.kind
    return "internal"


def run(
    content_type: ContentType,
    slug: str,
    lang: str,
    client: ContentClient | Any,
    static_routes: StaticRoutes | Any,
    renderer: PageRenderer | Any,
) -> PageResponse:
    """Resolve a validated slug to a page.

    Args:
        content_type: Section being served.
        slug: Validated slug from the request path.
        lang: Resolved site language code.
        client: ContentClient instance (or mock for testing).
        static_routes: StaticRoutes instance (or mock for testing).
        renderer: PageRenderer instance (or mock for testing).

    Returns:
        A 302 redirect for pre-built pages, otherwise the 200 article page,
        the 404 page, or the 503 page. Never raises.
    """
    content_type = ContentType(content_type)

    if static_routes.is_static(content_type, slug):
        logger.info(
            "Redirecting %s/%s to static page",
            content_type.value,
            slug,
            extra={"content_type": content_type.value, "slug": slug, "lang": lang},
        )
        return redirect_response(static_routes.static_path(content_type, slug))

    logger.info(
        "Rendering %s/%s dynamically",
        content_type.value,
        slug,
        extra={"content_type": content_type.value, "slug": slug, "lang": lang},
    )

    try:
        post = client.get_post(content_type, slug, lang)
        html = renderer.render_article(content_type, post, slug, lang)

    except PostNotFoundError:
        logger.info(
            "Post %s/%s not found upstream",
            content_type.value,
            slug,
            extra={"content_type": content_type.value, "slug": slug, "lang": lang},
        )
        return not_found_response(renderer.render_not_found(content_type, lang))

    except Exception as e:
        logger.error(
            "Failed to render %s/%s: %s",
            content_type.value,
            slug,
            e,
            exc_info=e,
            extra={
                "content_type": content_type.value,
                "slug": slug,
                "lang": lang,
                "error": str(e),
                "error_kind": failure_kind(e),
                "status_code": getattr(e, "status_code", None),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
        return unavailable_response(renderer.render_unavailable(content_type, lang))

    return article_response(html)
