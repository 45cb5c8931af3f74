"""
Domain-specific exceptions for masjids app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class MasjidsServiceError(Exception):
    """Base exception for all masjids service errors."""
    pass


class NotRecordOwnerError(MasjidsServiceError):
    """Raised when a staff member edits a record someone else added."""
    pass
