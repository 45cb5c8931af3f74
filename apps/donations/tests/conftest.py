import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.donations.models import (
    Appeal,
    CollectionSource,
    Donation,
    DonationStatus,
    Donor,
    Fundraiser,
    PaymentMethod,
    RecurringDonation,
    RecurringStatus,
)


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        first_name='Ada',
        last_name='Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(
        email='staff@example.com',
        password='TestPass123!',
        first_name='Sami',
        last_name='Staff',
        role=UserRole.STAFF,
    )


@pytest.fixture
def viewer_user(db):
    return User.objects.create_user(
        email='viewer@example.com',
        password='TestPass123!',
        role=UserRole.VIEWER,
    )


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def staff_client(staff_user):
    return client_for(staff_user)


@pytest.fixture
def viewer_client(viewer_user):
    return client_for(viewer_user)


@pytest.fixture
def donor(db):
    return Donor.objects.create(
        first_name='Amina',
        last_name='Khan',
        email='amina@example.com',
        city='Leeds',
        postcode='LS1 4AP',
    )


@pytest.fixture
def other_donor(db):
    return Donor.objects.create(first_name='Bilal', last_name='Ahmed', email='bilal@example.com', city='Bradford')


@pytest.fixture
def appeal(db):
    return Appeal.objects.create(title='Emergency Relief')


@pytest.fixture
def fundraiser(appeal):
    return Fundraiser.objects.create(
        appeal=appeal,
        fundraiser_name='Yusuf',
        title='Run for Relief',
        target_amount_pence=100000,
    )


@pytest.fixture
def stripe_donation(donor, appeal, fundraiser):
    """A completed website donation paid by PaymentIntent."""
    return Donation.objects.create(
        donor=donor,
        appeal=appeal,
        fundraiser=fundraiser,
        amount_pence=2500,
        donation_type='ZAKAT',
        payment_method=PaymentMethod.WEBSITE_STRIPE,
        collected_via=CollectionSource.WEBSITE,
        status=DonationStatus.COMPLETED,
        gift_aid=True,
        transaction_id='pi_refundable',
        order_number='786-112345678',
        completed_at=timezone.now(),
    )


@pytest.fixture
def cash_donation(other_donor, appeal):
    return Donation.objects.create(
        donor=other_donor,
        appeal=appeal,
        amount_pence=1000,
        payment_method=PaymentMethod.CASH,
        collected_via=CollectionSource.OFFICE,
        status=DonationStatus.COMPLETED,
        completed_at=timezone.now(),
    )


@pytest.fixture
def pending_donation(donor, appeal):
    return Donation.objects.create(
        donor=donor,
        appeal=appeal,
        amount_pence=500,
        status=DonationStatus.PENDING,
        order_number='786-187654321',
    )


@pytest.fixture
def recurring_donation(donor, appeal):
    return RecurringDonation.objects.create(
        donor=donor,
        appeal=appeal,
        amount_pence=1500,
        frequency='MONTHLY',
        status=RecurringStatus.ACTIVE,
        subscription_id='sub_live123',
        order_number='786-112345678',
    )
