"""
Donations app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and row locks.
"""

from .exceptions import (
    DonationsServiceError,
    DonationNumberUnavailableError,
    NotRefundableError,
    NotCancellableError,
)

from .numbering import (
    generate_donation_number,
    is_donation_number_taken,
)

from .refunds import (
    refund_donation,
    cancel_recurring_donation,
)

from .queries import (
    search_donations,
    search_donors,
    search_recurring,
    fundraisers_with_totals,
)


__all__ = [
    # Exceptions
    'DonationsServiceError',
    'DonationNumberUnavailableError',
    'NotRefundableError',
    'NotCancellableError',

    # Numbering
    'generate_donation_number',
    'is_donation_number_taken',

    # Refunds
    'refund_donation',
    'cancel_recurring_donation',

    # Queries
    'search_donations',
    'search_donors',
    'search_recurring',
    'fundraisers_with_totals',
]
