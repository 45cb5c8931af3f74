"""
Domain-specific exceptions for donations app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class DonationsServiceError(Exception):
    """Base exception for all donations service errors."""
    pass


class DonationNumberUnavailableError(DonationsServiceError):
    """Raised when no unused donation number could be generated."""
    pass


class NotRefundableError(DonationsServiceError):
    """Raised when a donation is not in a refundable state."""
    pass


class NotCancellableError(DonationsServiceError):
    """Raised when a recurring donation is already cancelled or has no subscription."""
    pass
