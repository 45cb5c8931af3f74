import pytest
from rest_framework.test import APIClient, APIRequestFactory
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def factory():
    return APIRequestFactory()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        first_name='Aisha',
        last_name='Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(email='staff@example.com', password='TestPass123!', role=UserRole.STAFF)


@pytest.fixture
def viewer_user(db):
    return User.objects.create_user(email='viewer@example.com', password='TestPass123!', role=UserRole.VIEWER)


@pytest.fixture
def inactive_user(db):
    return User.objects.create_user(
        email='former@example.com',
        password='TestPass123!',
        role=UserRole.STAFF,
        is_active=False,
    )


@pytest.fixture
def viewer_client(viewer_user):
    return client_for(viewer_user)
