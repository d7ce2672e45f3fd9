"""Domain exceptions raised by the corpus store and the search engine."""
from typing import Any


class KnowledgeSearchError(Exception):
    """Base class for errors surfaced to API callers.

    Attributes:
        code: Stable machine-readable error code.
        status_code: HTTP status the transport layer maps this error to.
        details: Optional structured context for correcting the request.
    """

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize error.

        Args:
            message: Human-readable description.
            details: Optional structured context.
        """
        super().__init__(message)
        self.message = message
        self.details = details


class SearchValidationError(KnowledgeSearchError):
    """Raised when request parameters are out of range or unparsable.

    Never clamped or retried; the whole call fails.
    """

    code = "BAD_REQUEST"
    status_code = 400

    def __init__(self, message: str, invalid_params: list[str] | None = None) -> None:
        """Initialize validation error.

        Args:
            message: Human-readable description.
            invalid_params: One message per offending parameter.
        """
        details = {"invalidParams": invalid_params} if invalid_params else None
        super().__init__(message, details)
        self.invalid_params = invalid_params or []


class ArticleNotFoundError(KnowledgeSearchError):
    """Raised when an article id does not exist in the corpus."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, article_id: str) -> None:
        """Initialize not-found error.

        Args:
            article_id: The unknown article identifier.
        """
        super().__init__("Article not found", {"articleId": article_id})
        self.article_id = article_id


class ArticleStateError(KnowledgeSearchError):
    """Raised when a lifecycle transition is not allowed."""

    code = "BAD_REQUEST"
    status_code = 400
