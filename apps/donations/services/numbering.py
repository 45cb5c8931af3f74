"""
Donation number generation.

Online orders, offline income and project donations share one number
space: ``786-1`` followed by 8 random digits. A candidate is only
returned if no record in any of those tables already uses it.
"""

import secrets

from django.apps import apps

from .exceptions import DonationNumberUnavailableError


DONATION_NUMBER_PREFIX = '786-1'
DONATION_NUMBER_DIGITS = 8

# (model label, field holding the number)
NUMBERED_MODELS = [
    ('checkout.Order', 'order_number'),
    ('masjids.OfflineIncome', 'donation_number'),
    ('projects.WaterProjectDonation', 'donation_number'),
    ('projects.SponsorshipDonation', 'donation_number'),
]


def format_donation_number(value: int) -> str:
    return f'{DONATION_NUMBER_PREFIX}{value:0{DONATION_NUMBER_DIGITS}d}'


def is_donation_number_taken(candidate: str) -> bool:
    for label, field in NUMBERED_MODELS:
        model = apps.get_model(label)
        if model.objects.filter(**{field: candidate}).exists():
            return True
    return False


def generate_donation_number(*, max_attempts: int = 15) -> str:
    """
    Return an unused donation number.

    Raises:
        DonationNumberUnavailableError: If every attempt collided.
    """
    for _ in range(max_attempts):
        candidate = format_donation_number(secrets.randbelow(10 ** DONATION_NUMBER_DIGITS))
        if not is_donation_number_taken(candidate):
            return candidate
    raise DonationNumberUnavailableError('Failed to generate donation number')
