"""
Typed upstream error for the Reddit JSON integration.

Every failure in the fetch engine, the normalizer, and the query facade
is reported as a single UpstreamError tagged with an ErrorKind. Callers
branch on ``kind`` and ``retriable`` instead of on exception subclasses.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Classification of upstream failures."""

    RATE_LIMITED = "RATE_LIMITED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    UPSTREAM_BLOCKED = "UPSTREAM_BLOCKED"
    NETWORK_ERROR = "NETWORK_ERROR"
    BAD_INPUT = "BAD_INPUT"


class UpstreamError(Exception):
    """
    Failure raised by any layer that talks to Reddit.

    ``retriable`` is a hint for an outer retry policy. It stays True for
    rate limits, 5xx and network failures even after the fetch engine has
    spent its own retry budget.

    Attributes:
        kind: ErrorKind classification
        message: Human-readable description
        status: HTTP status code when one was received
        retriable: Whether repeating the same request may succeed

    Example:
        >>> raise UpstreamError("Resource not found", ErrorKind.NOT_FOUND, status=404)
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        status: Optional[int] = None,
        retriable: bool = False,
    ) -> None:
        """
        Initialize UpstreamError.

        Args:
            message: Error description
            kind: Error classification
            status: Optional HTTP status code from Reddit
            retriable: Whether the caller may retry later (default: False)
        """
        self.message = message
        self.kind = ErrorKind(kind)
        self.status = status
        self.retriable = retriable
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"UpstreamError(kind={self.kind.value}, status={self.status}, "
            f"retriable={self.retriable}, message={self.message!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the error as a plain dict for rendering to tool callers."""
        return {
            "kind": self.kind.value,
            "status": self.status,
            "retriable": self.retriable,
            "message": self.message,
        }
