"""Status codes and header policies for every page the edge can return."""

from huangshan_edge.models import PageResponse

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

# Browser 30 min, CDN 1 h, serve stale for a day while revalidating.
ARTICLE_CACHE_CONTROL = "public, max-age=1800, s-maxage=3600, stale-while-revalidate=86400"
SHORT_CACHE_CONTROL = "public, max-age=300"
NO_CACHE_CONTROL = "no-cache, no-store, must-revalidate"
RETRY_AFTER_SECONDS = 300


def article_response(html: str) -> PageResponse:
    return PageResponse(
        status_code=200,
        headers={
            "Content-Type": HTML_CONTENT_TYPE,
            "Cache-Control": ARTICLE_CACHE_CONTROL,
            "Vary": "Accept-Language",
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "SAMEORIGIN",
            "Referrer-Policy": "strict-origin-when-cross-origin",
        },
        body=html,
    )


def not_found_response(html: str) -> PageResponse:
    return PageResponse(
        status_code=404,
        headers={
            "Content-Type": HTML_CONTENT_TYPE,
            "Cache-Control": SHORT_CACHE_CONTROL,
        },
        body=html,
    )


def unavailable_response(html: str) -> PageResponse:
    return PageResponse(
        status_code=503,
        headers={
            "Content-Type": HTML_CONTENT_TYPE,
            "Cache-Control": NO_CACHE_CONTROL,
            "Retry-After": str(RETRY_AFTER_SECONDS),
        },
        body=html,
    )


def redirect_response(location: str) -> PageResponse:
    """302 to a pre-built static page."""
    return PageResponse(
        status_code=302,
        headers={
            "Location": location,
            "Cache-Control": SHORT_CACHE_CONTROL,
            "X-Static-Redirect": "true",
        },
    )


def bad_request_response(message: str = "Invalid slug parameter") -> PageResponse:
    return PageResponse(
        status_code=400,
        headers={"Content-Type": TEXT_CONTENT_TYPE},
        body=message,
    )
