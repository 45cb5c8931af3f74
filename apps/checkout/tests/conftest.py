import pytest
from unittest.mock import patch
from rest_framework.test import APIClient

from apps.checkout.services.orders import create_order
from apps.checkout.services.payments import PaymentIntentResult, SubscriptionResult
from apps.donations.models import Appeal, Donor
from apps.projects.models import (
    SponsorshipProject,
    SponsorshipProjectCountry,
    SponsorshipProjectType,
    WaterProject,
    WaterProjectCountry,
    WaterProjectType,
)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client (checkout is public)."""
    return APIClient()


@pytest.fixture
def appeal(db):
    """An active appeal accepting one-off and monthly donations."""
    return Appeal.objects.create(
        title='Emergency Relief',
        allow_monthly=True,
        allow_yearly=True,
    )


@pytest.fixture
def one_off_only_appeal(db):
    return Appeal.objects.create(title='Mosque Build', allow_monthly=False, allow_yearly=False)


@pytest.fixture
def inactive_appeal(db):
    return Appeal.objects.create(title='Closed Appeal', is_active=False)


@pytest.fixture
def water_project(db):
    return WaterProject.objects.create(project_type=WaterProjectType.WATER_WELL, plaque_available=True)


@pytest.fixture
def water_country(db):
    return WaterProjectCountry.objects.create(
        project_type=WaterProjectType.WATER_WELL,
        country='Pakistan',
        price_pence=45000,
    )


@pytest.fixture
def pump_country(db):
    """A country priced for a different water project type."""
    return WaterProjectCountry.objects.create(
        project_type=WaterProjectType.WATER_PUMP,
        country='Bangladesh',
        price_pence=15000,
    )


@pytest.fixture
def sponsorship_project(db):
    return SponsorshipProject.objects.create(project_type=SponsorshipProjectType.ORPHANS)


@pytest.fixture
def sponsorship_country(db):
    return SponsorshipProjectCountry.objects.create(
        project_type=SponsorshipProjectType.ORPHANS,
        country='Gambia',
        price_pence=3000,
    )


@pytest.fixture
def existing_donor(db):
    return Donor.objects.create(
        first_name='Amina',
        last_name='Khan',
        email='amina@example.com',
        city='Leeds',
        postcode='LS1 4AP',
    )


@pytest.fixture
def donor_payload():
    """Valid UK donor details for the checkout form."""
    return {
        'title': 'Mrs',
        'first_name': 'Amina',
        'last_name': 'Khan',
        'email': 'Amina@Example.com',
        'phone': '+44 7700 900123',
        'address': '1 High Street',
        'city': 'Leeds',
        'postcode': 'ls1 4ap',
        'country': 'GB',
        'gift_aid': True,
        'cover_fees': True,
        'marketing_email': False,
        'marketing_sms': False,
    }


@pytest.fixture
def stripe_service():
    """Patch Stripe calls made while starting a payment."""
    with patch('apps.checkout.services.orders.StripePaymentService') as service:
        service.get_or_create_customer.return_value = 'cus_test123'
        service.create_payment_intent.return_value = PaymentIntentResult(
            id='pi_test123',
            client_secret='pi_test123_secret_abc',
            status='requires_payment_method',
        )
        service.create_subscription.return_value = SubscriptionResult(
            id='sub_test123',
            client_secret='pi_sub_secret_abc',
            status='incomplete',
        )
        yield service


@pytest.fixture
def donor_details():
    return {
        'first_name': 'Amina',
        'last_name': 'Khan',
        'email': 'amina@example.com',
        'address': '1 High Street',
        'city': 'Leeds',
        'postcode': 'LS1 4AP',
        'country': 'GB',
        'gift_aid': True,
        'cover_fees': False,
    }


@pytest.fixture
def pending_order(appeal, water_project, water_country, donor_details):
    """A PENDING order with a one-off, a monthly and a water project line."""
    items = [
        {
            'appeal': appeal,
            'appeal_title': appeal.title,
            'amount_pence': 1000,
            'frequency': 'ONE_OFF',
            'donation_type': 'ZAKAT',
        },
        {
            'appeal': appeal,
            'appeal_title': appeal.title,
            'product_name': 'Food Pack',
            'amount_pence': 2500,
            'frequency': 'MONTHLY',
            'donation_type': 'SADAQAH',
        },
        {
            'water_project': water_project,
            'water_project_country': water_country,
            'appeal_title': 'Water Well',
            'amount_pence': 45000,
            'frequency': 'ONE_OFF',
            'donation_type': 'GENERAL',
        },
    ]
    order, _ = create_order(items=items, donor_details=donor_details)

    recurring_item = order.items.get(frequency='MONTHLY')
    recurring_item.subscription_id = 'sub_test123'
    recurring_item.save(update_fields=['subscription_id'])
    recurring_item.recurring_donation.subscription_id = 'sub_test123'
    recurring_item.recurring_donation.save(update_fields=['subscription_id'])
    return order
