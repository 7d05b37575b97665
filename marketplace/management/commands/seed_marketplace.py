# marketplace/management/commands/seed_marketplace.py
from __future__ import annotations

import math
import random
from typing import List, Tuple

from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.db import transaction

from faker import Faker

from marketplace.models import ArtisanProfile, ArtisanServiceCategory, Device, ServiceCategory, User
from marketplace.services.geolocation import KM_PER_DEGREE

fake = Faker("en_US")

LAGOS_LAT, LAGOS_LNG = 6.5244, 3.3792


def seed_all(seed: int | None):
    if seed is None:
        return
    random.seed(seed)
    Faker.seed(seed)


def random_point_around(lat0: float, lng0: float, max_km: float = 12.0) -> Tuple[float, float]:
    """Point tiré uniformément dans le disque de rayon max_km autour de (lat0, lng0)."""
    r_km = max_km * math.sqrt(random.random())
    bearing = math.radians(random.uniform(0.0, 360.0))
    cos_lat = max(0.1, abs(math.cos(math.radians(lat0))))
    lat = lat0 + r_km * math.cos(bearing) / KM_PER_DEGREE
    lng = lng0 + r_km * math.sin(bearing) / (KM_PER_DEGREE * cos_lat)
    return lat, lng


class Command(BaseCommand):
    help = "Génère des clients et artisans de démonstration autour de Lagos."

    def add_arguments(self, parser):
        parser.add_argument("--customers", type=int, default=10)
        parser.add_argument("--artisans", type=int, default=30)
        parser.add_argument("--radius-km", type=float, default=15.0)
        parser.add_argument("--seed", type=int, default=None)

    @transaction.atomic
    def handle(self, *args, **opt):
        seed_all(opt.get("seed"))
        fake.unique.clear()

        call_command("load_service_categories", stdout=self.stdout)
        categories = list(ServiceCategory.objects.filter(is_active=True))

        customers = self._create_users(opt["customers"], "customer")
        artisans = self._create_artisans(opt["artisans"], categories, opt["radius_km"])

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(customers)} customer(s) and {len(artisans)} artisan(s)."
        ))

    def _create_users(self, count: int, user_type: str) -> List[User]:
        users = []
        for _ in range(count):
            email = fake.unique.email()
            users.append(User.objects.create_user(
                username=email.split("@")[0][:30] + fake.unique.numerify("###"),
                email=email,
                password="password123",
                first_name=fake.first_name(),
                last_name=fake.last_name(),
                user_type=user_type,
            ))
        return users

    def _create_artisans(self, count: int, categories: List[ServiceCategory], radius_km: float):
        profiles = []
        for user in self._create_users(count, "artisan"):
            # profil créé par le signal post_save
            profile = ArtisanProfile.objects.get(user=user)
            lat, lng = random_point_around(LAGOS_LAT, LAGOS_LNG, radius_km)
            profile.bio = fake.sentence(nb_words=12)
            profile.experience_years = random.randint(0, 25)
            profile.average_rating = round(random.uniform(2.5, 5.0), 1)
            profile.service_radius_km = random.choice([5, 10, 15, 20])
            profile.latitude, profile.longitude = lat, lng
            profile.is_online = random.random() < 0.7
            profile.save()

            for category in random.sample(categories, k=min(len(categories), random.randint(1, 3))):
                ArtisanServiceCategory.objects.create(
                    artisan=profile, category=category, specialization_level=random.randint(1, 5)
                )
            Device.objects.create(
                user=user, device_token=fake.unique.sha256(), device_type=random.choice(["android", "ios"])
            )
            profiles.append(profile)
        return profiles
