"""AWS Lambda handlers for the dynamic knowledge and news routes.

Each function sits behind an API Gateway route ``GET /{section}/{slug}``.
It validates the slug, redirects slugs that have a pre-built static page,
and otherwise renders the post fetched from the content API.

Module-level initialization is used for cold start optimization: the
configuration, HTTP client settings, static route table and template
environment are built once when the container starts, not per request.
"""

import logging
from typing import Any

from huangshan_edge.config import Config
from huangshan_edge.content_client import ContentClient
from huangshan_edge.exceptions import InvalidSlugError
from huangshan_edge.i18n import DEFAULT_LANG, resolve_lang
from huangshan_edge.logging_config import configure_logging
from huangshan_edge.models import ContentType
from huangshan_edge.orchestrator import run
from huangshan_edge.renderer import PageRenderer
from huangshan_edge.responses import bad_request_response, unavailable_response
from huangshan_edge.routing import StaticRoutes, validate_slug

logger = logging.getLogger(__name__)

_config: Config | None = None
_client: ContentClient | None = None
_static_routes: StaticRoutes | None = None
_renderer: PageRenderer | None = None
_init_error: Exception | None = None


def _initialize() -> None:
    """Initialize module-level resources at container startup.

    Errors are captured rather than raised so the handler can still answer
    with the styled 503 page instead of crashing.
    """
    global _config, _client, _static_routes, _renderer, _init_error

    try:
        _config = Config()
        configure_logging(_config.log_level)

        _client = ContentClient(base_url=_config.api_url, timeout=_config.request_timeout)
        _static_routes = StaticRoutes.from_config(_config)
        _renderer = PageRenderer(site_url=_config.site_url)

        logger.info(
            "Edge handler initialized with %d static routes",
            len(_static_routes),
            extra={"api_url": _config.api_url, "site_url": _config.site_url},
        )

    except Exception as e:
        _init_error = e
        logger.exception("Edge handler initialization failed")


_initialize()


def _parse_request(event: dict[str, Any]) -> tuple[Any, str]:
    """Pull the raw slug and the resolved language out of a proxy event."""
    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}
    slug = path_params.get("slug") if isinstance(path_params, dict) else None
    lang = query_params.get("lang") if isinstance(query_params, dict) else None
    return slug, resolve_lang(lang or DEFAULT_LANG)


def _handle(content_type: ContentType, event: dict[str, Any]) -> dict[str, Any]:
    slug, lang = _parse_request(event if isinstance(event, dict) else {})

    try:
        slug = validate_slug(slug)
    except InvalidSlugError as e:
        return bad_request_response(str(e)).to_lambda()

    if _init_error is not None:
        logger.error(
            "Serving 503 because initialization failed",
            extra={"content_type": content_type.value, "slug": slug, "lang": lang},
        )
        renderer = _renderer or PageRenderer()
        return unavailable_response(renderer.render_unavailable(content_type, lang)).to_lambda()

    response = run(
        content_type=content_type,
        slug=slug,
        lang=lang,
        client=_client,
        static_routes=_static_routes,
        renderer=_renderer,
    )
    return response.to_lambda()


def knowledge_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point for ``GET /knowledge/{slug}``.

    Args:
        event: API Gateway proxy event with ``pathParameters.slug`` and an
            optional ``queryStringParameters.lang``.
        context: Lambda context (unused but required by AWS).

    Returns:
        API Gateway proxy response with statusCode, headers and body.

    Response codes:
        200: Article page
        302: Redirect to the pre-built static page
        400: Missing or empty slug
        404: Post not found upstream
        503: Content API failure, timeout or bad payload
    """
    return _handle(ContentType.KNOWLEDGE, event)


def news_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point for ``GET /news/{slug}``; see knowledge_handler."""
    return _handle(ContentType.NEWS, event)
