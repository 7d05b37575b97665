import itertools

import pytest
from django.db import DatabaseError
from rest_framework.test import APIClient

from marketplace.exceptions import DependencyFailure
from marketplace.models import (
    User, ServiceCategory, ArtisanProfile, ArtisanServiceCategory, Job, Device
)
from marketplace.services.notifications import DeliveryResult, PushProvider
from marketplace.services.store import DjangoMatchingStore

LAGOS = (6.5244, 3.3792)

_seq = itertools.count(1)


class RecordingPushProvider(PushProvider):
    def __init__(self):
        self.calls = []

    def send_multicast(self, tokens, payload):
        self.calls.append((list(tokens), payload))
        return DeliveryResult(success_count=len(tokens))


class FailingPushProvider(PushProvider):
    def send_multicast(self, tokens, payload):
        raise DependencyFailure("push backend down")


class FailingLogStore(DjangoMatchingStore):
    def bulk_insert_matching_logs(self, rows):
        raise DatabaseError("matching log table unavailable")


@pytest.fixture
def api_client(db):
    return APIClient()


@pytest.fixture
def customer(db):
    return User.objects.create_user(
        username="ada", email="ada@example.com", password="pass1234", user_type="customer",
    )


@pytest.fixture
def other_customer(db):
    return User.objects.create_user(
        username="bayo", email="bayo@example.com", password="pass1234", user_type="customer",
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username="ops", email="ops@example.com", password="pass1234", user_type="admin",
    )


@pytest.fixture
def category(db):
    return ServiceCategory.objects.create(name="Plumbing", slug="plumbing", description="Pipes and leaks")


@pytest.fixture
def other_category(db):
    return ServiceCategory.objects.create(name="Electrical", slug="electrical")


@pytest.fixture
def make_artisan(db, category):
    """Fabrique un artisan (profil via le signal) rattaché à une catégorie."""

    def _make(lat=6.5245, lon=3.3793, radius=10, rating=4.5, level=4, online=True,
              service=None, token=None, first_name="Tunde"):
        n = next(_seq)
        user = User.objects.create_user(
            username=f"artisan{n}", email=f"artisan{n}@example.com", password="pass1234",
            first_name=first_name, last_name=f"N{n}", user_type="artisan",
        )
        profile = ArtisanProfile.objects.get(user=user)
        profile.latitude, profile.longitude = lat, lon
        profile.service_radius_km = radius
        profile.average_rating = rating
        profile.is_online = online
        profile.save()
        ArtisanServiceCategory.objects.create(
            artisan=profile, category=service or category, specialization_level=level,
        )
        if token:
            Device.objects.create(user=user, device_token=token, device_type="android")
        return profile

    return _make


@pytest.fixture
def artisan_profile(make_artisan):
    return make_artisan(token="artisan-device-token")


@pytest.fixture
def job(db, customer, category):
    return Job.objects.create(
        user=customer,
        service=category,
        description="Kitchen sink is leaking under the cabinet",
        latitude=LAGOS[0],
        longitude=LAGOS[1],
    )


@pytest.fixture
def recording_provider():
    return RecordingPushProvider()


@pytest.fixture
def failing_provider():
    return FailingPushProvider()


@pytest.fixture
def failing_log_store():
    return FailingLogStore()


@pytest.fixture
def customer_client(api_client, customer):
    api_client.force_authenticate(user=customer)
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client
