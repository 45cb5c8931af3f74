import pytest

from apps.checkout.services.validation import (
    FieldError,
    errors_to_dict,
    gift_aid_requires_uk_address,
    is_valid_postcode,
    normalize_country,
    phone_matches_country,
    validate_donor_details,
)


@pytest.fixture
def details():
    return {
        'first_name': 'Amina',
        'last_name': 'Khan',
        'email': 'amina@example.com',
        'phone': '+44 7700 900123',
        'address': '1 High Street',
        'postcode': 'LS1 4AP',
        'country': 'GB',
        'gift_aid': True,
    }


class TestDonorValidation:

    def test_valid_details(self, details):
        assert validate_donor_details(details) == []

    def test_required_fields(self):
        errors = errors_to_dict(validate_donor_details({'country': 'GB'}))

        assert set(errors) == {'first_name', 'last_name', 'email'}
        assert errors['email'] == ['Email is required.']

    def test_invalid_email(self, details):
        details['email'] = 'not-an-email'

        errors = errors_to_dict(validate_donor_details(details))

        assert errors == {'email': ['Enter a valid email address.']}

    def test_first_error_per_field_wins(self, details):
        details['phone'] = '+92abc'

        errors = validate_donor_details(details)

        assert errors == [FieldError('phone', 'Enter a valid phone number.')]

    def test_custom_rule_list(self):
        errors = validate_donor_details({}, rules=[lambda data: FieldError('x', 'bad')])

        assert errors_to_dict(errors) == {'x': ['bad']}


class TestCrossFieldRules:

    def test_phone_dial_code_must_match_country(self, details):
        details['phone'] = '+92 300 1234567'

        error = phone_matches_country(details)

        assert error.field == 'phone'
        assert '+44' in error.message

    def test_local_phone_number_is_not_checked_against_country(self, details):
        details['phone'] = '07700 900123'

        assert phone_matches_country(details) is None

    def test_unknown_country_skips_dial_code_check(self, details):
        details['phone'] = '+44 7700 900123'
        details['country'] = 'ZZ'
        details['gift_aid'] = False
        details['postcode'] = ''

        assert validate_donor_details(details) == []

    def test_uk_postcode_format(self, details):
        details['postcode'] = '12345'

        errors = errors_to_dict(validate_donor_details(details))

        assert errors == {'postcode': ['Enter a valid UK postcode.']}

    def test_international_postcode_format(self):
        assert is_valid_postcode('75001', 'FR') is True
        assert is_valid_postcode('!!', 'FR') is False
        assert is_valid_postcode('SW1A 1AA', 'UK') is True

    def test_gift_aid_requires_uk_country(self, details):
        details['country'] = 'FR'
        details['phone'] = ''
        details['postcode'] = '75001'

        errors = errors_to_dict(validate_donor_details(details))

        assert errors == {'gift_aid': ['Gift Aid is only available with a UK address.']}

    def test_gift_aid_requires_address_and_postcode(self, details):
        details['address'] = ''
        assert gift_aid_requires_uk_address(details).field == 'address'

        details['address'] = '1 High Street'
        details['postcode'] = ''
        assert gift_aid_requires_uk_address(details).field == 'postcode'

    def test_no_gift_aid_no_address_needed(self, details):
        details['gift_aid'] = False
        details['address'] = ''

        assert gift_aid_requires_uk_address(details) is None

    def test_normalize_country(self):
        assert normalize_country(' uk ') == 'GB'
        assert normalize_country(None) == ''
