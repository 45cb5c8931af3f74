"""
Domain-specific exceptions for projects app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class ProjectsServiceError(Exception):
    """Base exception for all projects service errors."""
    pass


class CountryMismatchError(ProjectsServiceError):
    """Raised when a country belongs to a different project type."""
    pass


class PriceMismatchError(ProjectsServiceError):
    """Raised when the donated amount differs from the country's price."""
    pass


class InvalidCompletionError(ProjectsServiceError):
    """Raised when a completion report is incomplete (e.g. not exactly 4 images)."""
    pass


class InvalidStatusTransitionError(ProjectsServiceError):
    """Raised when a donation cannot move to the requested status."""
    pass
