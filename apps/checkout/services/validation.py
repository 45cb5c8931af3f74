"""
Donor details validation for checkout.

Validation is an ordered list of small rule functions. Each rule receives
the donor details dict and returns a ``FieldError`` or ``None``; the
first error per field wins. Cross-field rules (phone vs country, postcode
vs country, Gift Aid vs address) live in the same list so the whole form
is validated in one pass.

Usage::

    errors = validate_donor_details(data)
    if errors:
        raise serializers.ValidationError(errors_to_dict(errors))
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email


UK_COUNTRY_CODES = ('GB', 'UK')

UK_POSTCODE_RE = re.compile(r'^([A-Z]{1,2}\d[A-Z\d]?)\s?(\d[A-Z]{2})$', re.IGNORECASE)
INTERNATIONAL_POSTCODE_RE = re.compile(r'^[A-Za-z0-9][A-Za-z0-9\s-]{1,9}$')
PHONE_RE = re.compile(r'^\+?[0-9\s()-]{6,20}$')

# International dialling prefixes for the countries donors most often select.
DIAL_CODES = {
    'GB': '+44',
    'IE': '+353',
    'US': '+1',
    'CA': '+1',
    'FR': '+33',
    'DE': '+49',
    'NL': '+31',
    'BE': '+32',
    'ES': '+34',
    'IT': '+39',
    'SE': '+46',
    'NO': '+47',
    'DK': '+45',
    'AE': '+971',
    'SA': '+966',
    'QA': '+974',
    'TR': '+90',
    'PK': '+92',
    'IN': '+91',
    'BD': '+880',
    'MY': '+60',
    'AU': '+61',
    'NZ': '+64',
    'ZA': '+27',
    'NG': '+234',
}


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


Rule = Callable[[dict], Optional[FieldError]]


def normalize_country(value) -> str:
    country = (value or '').strip().upper()
    return 'GB' if country == 'UK' else country


def is_uk(country) -> bool:
    return normalize_country(country) in UK_COUNTRY_CODES


def is_valid_postcode(postcode, country) -> bool:
    value = (postcode or '').strip()
    if not value:
        return False
    if is_uk(country):
        return bool(UK_POSTCODE_RE.match(value))
    return bool(INTERNATIONAL_POSTCODE_RE.match(value))


def _text(data: dict, key: str) -> str:
    return (data.get(key) or '').strip()


def require_first_name(data: dict) -> Optional[FieldError]:
    if not _text(data, 'first_name'):
        return FieldError('first_name', 'First name is required.')
    return None


def require_last_name(data: dict) -> Optional[FieldError]:
    if not _text(data, 'last_name'):
        return FieldError('last_name', 'Last name is required.')
    return None


def valid_email(data: dict) -> Optional[FieldError]:
    email = _text(data, 'email')
    if not email:
        return FieldError('email', 'Email is required.')
    try:
        validate_email(email)
    except DjangoValidationError:
        return FieldError('email', 'Enter a valid email address.')
    return None


def valid_phone(data: dict) -> Optional[FieldError]:
    phone = _text(data, 'phone')
    if phone and not PHONE_RE.match(phone):
        return FieldError('phone', 'Enter a valid phone number.')
    return None


def phone_matches_country(data: dict) -> Optional[FieldError]:
    """An international number must use the dial code of the selected country."""
    phone = _text(data, 'phone').replace(' ', '')
    country = normalize_country(data.get('country'))
    if not phone.startswith('+') or country not in DIAL_CODES:
        return None
    if not phone.startswith(DIAL_CODES[country]):
        return FieldError(
            'phone',
            f'Phone number should start with {DIAL_CODES[country]} for the selected country.'
        )
    return None


def valid_postcode(data: dict) -> Optional[FieldError]:
    postcode = _text(data, 'postcode')
    if not postcode:
        return None
    if not is_valid_postcode(postcode, data.get('country')):
        if is_uk(data.get('country')):
            return FieldError('postcode', 'Enter a valid UK postcode.')
        return FieldError('postcode', 'Enter a valid postcode.')
    return None


def gift_aid_requires_uk_address(data: dict) -> Optional[FieldError]:
    """Gift Aid can only be claimed for UK taxpayers with a UK home address."""
    if not data.get('gift_aid'):
        return None
    if not is_uk(data.get('country')):
        return FieldError('gift_aid', 'Gift Aid is only available with a UK address.')
    if not _text(data, 'address'):
        return FieldError('address', 'Home address is required to claim Gift Aid.')
    if not _text(data, 'postcode'):
        return FieldError('postcode', 'Postcode is required to claim Gift Aid.')
    return None


DONOR_RULES: List[Rule] = [
    require_first_name,
    require_last_name,
    valid_email,
    valid_phone,
    phone_matches_country,
    valid_postcode,
    gift_aid_requires_uk_address,
]


def validate_donor_details(data: dict, rules: Optional[List[Rule]] = None) -> List[FieldError]:
    """Run every rule in order; keep only the first error for each field."""
    errors: List[FieldError] = []
    seen = set()
    for rule in DONOR_RULES if rules is None else rules:
        error = rule(data)
        if error is not None and error.field not in seen:
            seen.add(error.field)
            errors.append(error)
    return errors


def errors_to_dict(errors: List[FieldError]) -> Dict[str, List[str]]:
    """Shape errors like DRF serializer errors: ``{field: [message]}``."""
    return {error.field: [error.message] for error in errors}
