"""Exceptions for the SnapLink service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class AuthError(ServiceError):
    """Base exception for authentication errors."""
    pass


class InvalidTokenError(AuthError):
    """The identity provider rejected the token."""
    pass


class InvalidSessionError(AuthError):
    """The session credential is missing, expired or invalid."""
    pass


class RateLimitExceededError(ServiceError):
    """The caller exhausted their link creation quota for the current window."""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class URLError(ServiceError):
    """Base exception for URL-related errors."""
    pass


class URLValidationError(URLError):
    """URL failed validation checks."""
    pass


class MissingFieldError(URLValidationError):
    """A required request field was not supplied."""
    pass


class InvalidURLError(URLValidationError):
    """The URL format is invalid."""
    pass


class URLCreationError(URLError):
    """Error occurred during URL creation."""
    pass


class ShortCodeGenerationError(URLCreationError):
    """Failed to generate a unique short code."""
    pass


class AliasTakenError(URLCreationError):
    """The requested custom alias is already in use."""
    pass


class URLNotFoundError(URLError):
    """URL with the specified short code was not found."""
    pass


class VisitTrackingError(URLError):
    """Error occurred while recording a visit."""
    pass


class AnalyticsError(ServiceError):
    """Base exception for analytics errors."""
    pass


class TopicNotFoundError(AnalyticsError):
    """No link carries the requested topic."""
    pass


class NoLinksFoundError(AnalyticsError):
    """The user owns no links to report on."""
    pass


class AnalyticsRetrievalError(AnalyticsError):
    """Error occurred while reading analytics data."""
    pass
