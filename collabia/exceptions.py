"""
Collabia — Matching engine error taxonomy.

Every error is raised synchronously by the service layer and mapped to an
HTTP response by a single exception handler in ``collabia.main``.  Storage
failures are not wrapped; they propagate as infrastructure errors.
"""

from __future__ import annotations


class MatchingError(Exception):
    """Base class for matching-engine errors surfaced to the caller."""

    status_code: int = 400
    code: str = "matching_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class QuotaExceeded(MatchingError):
    """Daily swipe cap reached.  Retry on the next calendar day."""

    status_code = 429
    code = "quota_exceeded"


class NotFound(MatchingError):
    status_code = 404
    code = "not_found"


class Forbidden(MatchingError):
    """Caller is not the party allowed to perform the action."""

    status_code = 403
    code = "forbidden"


class AlreadyResponded(MatchingError):
    """Interest is no longer pending."""

    status_code = 409
    code = "already_responded"


class InvalidInput(MatchingError):
    status_code = 422
    code = "invalid_input"
