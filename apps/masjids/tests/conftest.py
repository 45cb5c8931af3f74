import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.donations.models import Appeal
from apps.masjids.models import Collection, CollectionType, Masjid


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


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
def other_staff_user(db):
    return User.objects.create_user(email='other@example.com', password='TestPass123!', role=UserRole.STAFF)


@pytest.fixture
def viewer_user(db):
    return User.objects.create_user(email='viewer@example.com', password='TestPass123!', role=UserRole.VIEWER)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def staff_client(staff_user):
    return client_for(staff_user)


@pytest.fixture
def other_staff_client(other_staff_user):
    return client_for(other_staff_user)


@pytest.fixture
def viewer_client(viewer_user):
    return client_for(viewer_user)


@pytest.fixture
def appeal(db):
    return Appeal.objects.create(title='Emergency Relief')


@pytest.fixture
def masjid(staff_user):
    return Masjid.objects.create(
        name='Makkah Masjid',
        address='3 Thornville Rd',
        city='Leeds',
        postcode='LS6 1JY',
        added_by=staff_user,
    )


@pytest.fixture
def collection(masjid, appeal, staff_user):
    return Collection.objects.create(
        masjid=masjid,
        appeal=appeal,
        amount_pence=12000,
        type=CollectionType.JUMMAH,
        collected_at=timezone.now(),
        added_by=staff_user,
    )
