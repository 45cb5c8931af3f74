import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.donations.models import Donor
from apps.projects.models import (
    ProjectDonationStatus,
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
def completion_images():
    return [f'https://cdn.example.org/well/{n}.jpg' for n in range(1, 5)]


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


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
def donor(db):
    return Donor.objects.create(first_name='Amina', last_name='Khan', email='amina@example.com')


@pytest.fixture
def water_project(db):
    return WaterProject.objects.create(
        project_type=WaterProjectType.WATER_WELL,
        location='Sindh',
        plaque_available=True,
    )


@pytest.fixture
def water_country(db):
    return WaterProjectCountry.objects.create(
        project_type=WaterProjectType.WATER_WELL,
        country='Pakistan',
        price_pence=45000,
    )


@pytest.fixture
def pump_country(db):
    return WaterProjectCountry.objects.create(
        project_type=WaterProjectType.WATER_PUMP,
        country='Bangladesh',
        price_pence=15000,
    )


@pytest.fixture
def inactive_country(db):
    return WaterProjectCountry.objects.create(
        project_type=WaterProjectType.WATER_WELL,
        country='Somalia',
        price_pence=50000,
        is_active=False,
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
def water_donation(donor, water_project, water_country):
    return WaterProjectDonation.objects.create(
        water_project=water_project,
        country=water_country,
        donor=donor,
        amount_pence=45000,
        donation_number='786-100000001',
        status=ProjectDonationStatus.WAITING_TO_REVIEW,
        plaque_name='In memory of Fatima',
    )
