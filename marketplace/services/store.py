# services/store.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from django.db import transaction
from django.db.models import Max

from marketplace.models import ArtisanServiceCategory, Device, Job, JobMatchingLog
from marketplace.services.geolocation import BoundingBox, get_bounding_box, longitude_reach

# marge sur la boîte: 111.32 km/deg vs rayon haversine 6371 km, plus l'arrondi à 0.01 km
BBOX_PADDING_RATIO = 1.01
BBOX_PADDING_KM = 0.01


@dataclass(frozen=True)
class Candidate:
    id: int
    user_id: int
    name: str
    photo_url: Optional[str]
    is_online: bool
    latitude: float
    longitude: float
    average_rating: float
    service_radius_km: float
    specialization_level: int


class MatchingStore(ABC):
    @abstractmethod
    def find_job_by_id(self, job_id) -> Optional[Job]: ...
    @abstractmethod
    def find_eligible_artisans(self, service_category_id, near=None) -> List[Candidate]: ...
    @abstractmethod
    def bulk_insert_matching_logs(self, rows: List[JobMatchingLog]) -> None: ...
    @abstractmethod
    def find_push_tokens(self, user_ids) -> List[str]: ...
    @abstractmethod
    def create_job(self, **data) -> Job: ...
    @abstractmethod
    def update_job(self, job_id, **patch) -> Job: ...


class DjangoMatchingStore(MatchingStore):
    """Implémentation ORM; les requêtes passent par les index (is_online, latitude, longitude)."""

    def find_job_by_id(self, job_id):
        return Job.objects.select_related("service", "user").filter(pk=job_id).first()

    def _eligible_links(self, service_category_id):
        return ArtisanServiceCategory.objects.filter(
            category_id=service_category_id,
            artisan__is_online=True,
            artisan__latitude__isnull=False,
            artisan__longitude__isnull=False,
        )

    def bounding_box_for(self, service_category_id, lat, lon) -> Optional[BoundingBox]:
        max_radius = self._eligible_links(service_category_id).aggregate(
            r=Max("artisan__service_radius_km"))["r"]
        if max_radius is None:
            return None
        radius = max_radius * BBOX_PADDING_RATIO + BBOX_PADDING_KM
        box = get_bounding_box(lat, lon, radius)
        # loin de l'équateur le cercle déborde la largeur r / (111.32 cos lat)
        reach = longitude_reach(lat, radius)
        if reach is None:
            # cercle autour d'un pôle: toutes les longitudes
            return box._replace(min_lon=lon - 180, max_lon=lon + 180)
        lon_delta = max(reach, box.max_lon - lon)
        return box._replace(min_lon=lon - lon_delta, max_lon=lon + lon_delta)

    def find_eligible_artisans(self, service_category_id, near=None):
        """
        near: (lat, lon) optionnel -> pré-filtre par boîte englobante,
        calculée sur le plus grand rayon de service des artisans éligibles.
        """
        qs = self._eligible_links(service_category_id)
        if near is not None:
            box = self.bounding_box_for(service_category_id, *near)
            if box is None:
                return []
            qs = qs.filter(artisan__latitude__gte=box.min_lat, artisan__latitude__lte=box.max_lat)
            if not box.wraps_antimeridian:
                qs = qs.filter(artisan__longitude__gte=box.min_lon, artisan__longitude__lte=box.max_lon)

        qs = qs.select_related("artisan", "artisan__user").order_by("artisan_id")
        return [
            Candidate(
                id=link.artisan.id,
                user_id=link.artisan.user_id,
                name=link.artisan.display_name,
                photo_url=link.artisan.photo_url or None,
                is_online=link.artisan.is_online,
                latitude=link.artisan.latitude,
                longitude=link.artisan.longitude,
                average_rating=link.artisan.average_rating,
                service_radius_km=link.artisan.service_radius_km,
                specialization_level=link.specialization_level or 1,
            )
            for link in qs
        ]

    def bulk_insert_matching_logs(self, rows):
        if not rows:
            return
        # savepoint: un échec ici ne casse pas la transaction englobante
        with transaction.atomic():
            JobMatchingLog.objects.bulk_create(rows)

    def find_push_tokens(self, user_ids):
        return list(
            Device.objects.filter(user_id__in=list(user_ids), is_active=True)
            .order_by("id")
            .values_list("device_token", flat=True)
        )

    def create_job(self, **data):
        return Job.objects.create(**data)

    def update_job(self, job_id, **patch):
        job = Job.objects.select_related("service", "user", "assigned_artisan__user").get(pk=job_id)
        for field, value in patch.items():
            setattr(job, field, value)
        job.save(update_fields=[*patch.keys(), "updated_at"])
        return job
