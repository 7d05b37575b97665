from io import StringIO

import pytest
from django.core.management import call_command

from marketplace.management.commands.seed_marketplace import LAGOS_LAT, LAGOS_LNG
from marketplace.models import ArtisanProfile, ArtisanServiceCategory, Device, ServiceCategory, User
from marketplace.services.geolocation import calculate_distance
from marketplace.services.pricing import BASES


@pytest.mark.django_db
def test_load_service_categories_is_idempotent():
    call_command("load_service_categories", stdout=StringIO())
    call_command("load_service_categories", stdout=StringIO())

    names = set(ServiceCategory.objects.values_list("name", flat=True))
    assert names == set(BASES)
    assert ServiceCategory.objects.get(name="General Maintenance").slug == "general-maintenance"


@pytest.mark.django_db
def test_seed_marketplace():
    out = StringIO()
    call_command("seed_marketplace", customers=2, artisans=4, radius_km=10, seed=7, stdout=out)

    assert User.objects.filter(user_type="customer").count() == 2
    assert ArtisanProfile.objects.count() == 4
    assert Device.objects.count() == 4
    for profile in ArtisanProfile.objects.all():
        assert ArtisanServiceCategory.objects.filter(artisan=profile).exists()
        assert calculate_distance(LAGOS_LAT, LAGOS_LNG, profile.latitude, profile.longitude) <= 11
    assert "Seeded 2 customer(s) and 4 artisan(s)." in out.getvalue()


@pytest.mark.django_db
def test_artisan_profile_created_with_artisan_user():
    user = User.objects.create_user(username="kemi", email="kemi@example.com", password="x", user_type="artisan")
    customer = User.objects.create_user(username="uche", email="uche@example.com", password="x")

    assert ArtisanProfile.objects.filter(user=user).exists()
    assert not ArtisanProfile.objects.filter(user=customer).exists()
