"""
Custom exceptions for the application.
"""


class FlashcardsException(Exception):
    """Base exception for all Flashcards application exceptions."""
    pass


class ValidationError(FlashcardsException):
    """Raised when validation fails."""
    pass


class InvalidArgumentError(ValidationError):
    """Raised when an argument is missing, non-positive or otherwise out of range."""
    pass


class NotFoundError(FlashcardsException):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(FlashcardsException):
    """Raised when there's a conflict (e.g., duplicate entry)."""
    pass


class AuthenticationError(FlashcardsException):
    """Raised when authentication fails."""
    pass


class AuthorizationError(FlashcardsException):
    """Raised when authorization fails."""
    pass
