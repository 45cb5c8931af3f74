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
from apps.masjids.models import Collection, CollectionType, Masjid, OfflineIncome, OfflineSource
from apps.projects.models import (
    ProjectDonationStatus,
    SponsorshipDonation,
    SponsorshipProject,
    SponsorshipProjectCountry,
    SponsorshipProjectType,
    WaterProject,
    WaterProjectCountry,
    WaterProjectDonation,
    WaterProjectType,
)


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(email='admin@example.com', password='TestPass123!', role=UserRole.ADMIN)


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
    return User.objects.create_user(email='viewer@example.com', password='TestPass123!', role=UserRole.VIEWER)


@pytest.fixture
def staff_client(staff_user):
    return client_for(staff_user)


@pytest.fixture
def viewer_client(viewer_user):
    return client_for(viewer_user)


@pytest.fixture
def amina(db):
    return Donor.objects.create(
        title='Mrs',
        first_name='Amina',
        last_name='Khan',
        email='amina@example.com',
        address='12 Park Lane',
        city='Leeds',
        postcode='LS1 4AP',
    )


@pytest.fixture
def bilal(db):
    return Donor.objects.create(first_name='Bilal', last_name='Ahmed', email='bilal@example.com', city='Bradford')


@pytest.fixture
def appeal(db):
    return Appeal.objects.create(title='Emergency Relief', slug='emergency-relief')


@pytest.fixture
def fundraiser(appeal):
    return Fundraiser.objects.create(
        appeal=appeal,
        fundraiser_name='Yusuf',
        title='Run for Relief',
        slug='run-for-relief',
        target_amount_pence=10000,
    )


@pytest.fixture
def online_donations(amina, bilal, appeal, fundraiser):
    """
    Five online donations: three completed (CASH 60 + CASH 40 + Stripe 2500),
    one refunded and one failed.
    """
    now = timezone.now()
    return [
        Donation.objects.create(
            donor=amina, appeal=appeal, fundraiser=fundraiser, amount_pence=60,
            payment_method=PaymentMethod.CASH, collected_via=CollectionSource.OFFICE,
            status=DonationStatus.COMPLETED, gift_aid=True, completed_at=now,
        ),
        Donation.objects.create(
            donor=bilal, appeal=appeal, amount_pence=40,
            payment_method=PaymentMethod.CASH, collected_via='',
            status=DonationStatus.COMPLETED, completed_at=now,
        ),
        Donation.objects.create(
            donor=amina, appeal=appeal, amount_pence=2500, donation_type='ZAKAT',
            status=DonationStatus.COMPLETED, gift_aid=True, order_number='786-112345678', completed_at=now,
        ),
        Donation.objects.create(donor=bilal, appeal=appeal, amount_pence=700, status=DonationStatus.REFUNDED),
        Donation.objects.create(donor=bilal, amount_pence=300, status=DonationStatus.FAILED),
    ]


@pytest.fixture
def water_donations(bilal, fundraiser, staff_user):
    project = WaterProject.objects.create(project_type=WaterProjectType.WATER_WELL)
    country = WaterProjectCountry.objects.create(
        project_type=WaterProjectType.WATER_WELL,
        country='Pakistan',
        price_pence=45000,
    )
    return [
        WaterProjectDonation.objects.create(
            water_project=project, country=country, donor=bilal, fundraiser=fundraiser, added_by=staff_user,
            amount_pence=50, payment_method=PaymentMethod.CASH, collected_via=CollectionSource.OFFICE,
            status=ProjectDonationStatus.COMPLETE, donation_number='786-100000001',
        ),
        WaterProjectDonation.objects.create(
            water_project=project, country=country, donor=bilal, added_by=staff_user,
            amount_pence=45000, status=ProjectDonationStatus.WAITING_TO_REVIEW, donation_number='786-100000002',
        ),
    ]


@pytest.fixture
def sponsorship_donation(amina):
    project = SponsorshipProject.objects.create(project_type=SponsorshipProjectType.ORPHANS)
    country = SponsorshipProjectCountry.objects.create(
        project_type=SponsorshipProjectType.ORPHANS,
        country='Gambia',
        price_pence=3000,
    )
    return SponsorshipDonation.objects.create(
        sponsorship_project=project, country=country, donor=amina, amount_pence=3000,
        status=ProjectDonationStatus.COMPLETE, report_sent=True, donation_number='786-100000003',
    )


@pytest.fixture
def office_income(appeal, staff_user, admin_user):
    """Offline income 1200 and collections 800 (Makkah Masjid) + 200 (no masjid, no appeal)."""
    now = timezone.now()
    masjid = Masjid.objects.create(name='Makkah Masjid', address='1 Brudenell Road', city='Leeds', added_by=staff_user)
    return {
        'offline': OfflineIncome.objects.create(
            appeal=appeal, amount_pence=1200, source=OfflineSource.CASH, received_at=now,
            donation_number='786-100000004', added_by=staff_user,
        ),
        'jummah': Collection.objects.create(
            masjid=masjid, appeal=appeal, amount_pence=800, type=CollectionType.JUMMAH,
            collected_at=now, added_by=staff_user,
        ),
        'eid': Collection.objects.create(
            amount_pence=200, type=CollectionType.EID, collected_at=now, added_by=admin_user,
        ),
    }


@pytest.fixture
def recurring_donations(amina, appeal):
    return [
        RecurringDonation.objects.create(
            donor=amina, appeal=appeal, amount_pence=1500, frequency='MONTHLY',
            status=RecurringStatus.ACTIVE, subscription_id='sub_active', next_payment_date=timezone.now(),
        ),
        RecurringDonation.objects.create(
            donor=amina, appeal=appeal, amount_pence=1000, frequency='YEARLY',
            status=RecurringStatus.CANCELLED, subscription_id='sub_cancelled',
        ),
    ]


@pytest.fixture
def report_data(online_donations, water_donations, sponsorship_donation, office_income, recurring_donations):
    """Every income source populated for the current month."""
    return {
        'online': online_donations,
        'water': water_donations,
        'sponsorship': sponsorship_donation,
        'office': office_income,
        'recurring': recurring_donations,
    }


@pytest.fixture
def this_month():
    today = timezone.localdate()
    return today.replace(day=1), today
