"""
Projects app services layer.

Fulfillment of water project and sponsorship donations.
"""

from .exceptions import (
    ProjectsServiceError,
    CountryMismatchError,
    PriceMismatchError,
    InvalidCompletionError,
    InvalidStatusTransitionError,
)

from .fulfillment import (
    REQUIRED_COMPLETION_IMAGES,
    validate_country_for_project,
    create_project_donation,
    update_donation,
    complete_donation,
    send_donation_receipt,
)

from .queries import (
    search_project_donations,
)


__all__ = [
    # Exceptions
    'ProjectsServiceError',
    'CountryMismatchError',
    'PriceMismatchError',
    'InvalidCompletionError',
    'InvalidStatusTransitionError',

    # Fulfillment
    'REQUIRED_COMPLETION_IMAGES',
    'validate_country_for_project',
    'create_project_donation',
    'update_donation',
    'complete_donation',
    'send_donation_receipt',

    # Queries
    'search_project_donations',
]
