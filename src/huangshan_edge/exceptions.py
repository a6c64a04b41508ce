"""Custom exceptions for the Huang Shan edge pages service."""


class InvalidSlugError(ValueError):
    """Raised when the slug path parameter is missing or malformed."""

    def __init__(self, message: str = "Invalid slug parameter") -> None:
        super().__init__(message)


class ContentAPIError(Exception):
    """Raised when the content API cannot deliver a usable post.

    ``kind`` tags the failure for logging; the page shown to the visitor
    is the same for every kind except ``not_found``.
    """

    kind = "network"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        if status_code is not None and type(self).kind == "network":
            self.kind = "upstream_status"
        super().__init__(message)


class PostNotFoundError(ContentAPIError):
    """Raised when the content API answers 404 for a slug."""

    kind = "not_found"

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Post not found: {slug}", status_code=404)


class InvalidPostDataError(ContentAPIError):
    """Raised when a 200 response carries no usable post payload."""

    kind = "invalid_payload"

    def __init__(self, message: str = "Invalid post data received") -> None:
        super().__init__(message)


class FetchTimeoutError(ContentAPIError):
    """Raised when the content API does not answer before the deadline."""

    kind = "timeout"

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Content API request timed out after {timeout:g}s")


class StaticRoutesError(Exception):
    """Raised when the static route manifest cannot be loaded or saved."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        self.original_error = original_error
        super().__init__(message)
