# services/jobs.py
import logging
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from marketplace.exceptions import InvalidInput, NotFound
from marketplace.models import ArtisanProfile, Job, JobStatus, ServiceCategory, TERMINAL_STATUSES
from marketplace.services.geolocation import validate_coordinates
from marketplace.services.matching import MatchingOutcome, match_artisans_for_job
from marketplace.services.store import DjangoMatchingStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    JobStatus.PENDING: {JobStatus.ASSIGNED, JobStatus.CANCELLED, JobStatus.EXPIRED},
    JobStatus.ASSIGNED: {JobStatus.IN_PROGRESS, JobStatus.CANCELLED, JobStatus.EXPIRED},
    JobStatus.IN_PROGRESS: {JobStatus.COMPLETED, JobStatus.CANCELLED, JobStatus.EXPIRED},
    JobStatus.COMPLETED: set(),
    JobStatus.CANCELLED: set(),
    JobStatus.EXPIRED: set(),
}


@dataclass
class JobCreated:
    job: Job
    matching: MatchingOutcome


def can_transition(current, new) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, set())


def _parse_status(value) -> JobStatus:
    try:
        return JobStatus(value)
    except ValueError:
        raise InvalidInput(f"Unknown job status: {value!r}.")


def _get_job(job_id, store) -> Job:
    job = store.find_job_by_id(job_id)
    if job is None:
        raise NotFound(f"Job {job_id} not found.")
    return job


def create_job(user, data, store=None, push_provider=None) -> JobCreated:
    """
    data: service_id, description, photo_urls, latitude, longitude, preferred_time (optionnel).
    Le matching tourne de façon synchrone avant le retour.
    """
    store = store or DjangoMatchingStore()
    if not validate_coordinates(data.get("latitude"), data.get("longitude")):
        raise InvalidInput("Invalid coordinates provided.")

    service_id = data.get("service_id")
    if not ServiceCategory.objects.filter(pk=service_id).exists():
        raise NotFound("Service category not found.")

    job = store.create_job(
        user=user,
        service_id=service_id,
        description=data.get("description", ""),
        photo_urls=list(data.get("photo_urls") or []),
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        preferred_time=data.get("preferred_time"),
        status=JobStatus.PENDING,
    )
    logger.info("job #%s created by user #%s (service #%s)", job.id, user.pk, service_id)

    outcome = match_artisans_for_job(job.id, store=store, push_provider=push_provider)
    return JobCreated(job=job, matching=outcome)


def update_job_status(job_id, new_status, store=None) -> Job:
    """completed_at est posé pour COMPLETED et effacé sinon."""
    store = store or DjangoMatchingStore()
    new_status = _parse_status(new_status)
    job = _get_job(job_id, store)

    if not can_transition(job.status, new_status):
        raise InvalidInput(f"Cannot move job from {job.status} to {new_status}.")

    job = store.update_job(
        job.id,
        status=new_status,
        completed_at=timezone.now() if new_status == JobStatus.COMPLETED else None,
    )
    logger.info("job #%s status -> %s", job.id, new_status)
    return job


def assign_artisan_to_job(job_id, artisan_id, store=None) -> Job:
    """Force ASSIGNED quel que soit le statut courant, sauf statut terminal."""
    store = store or DjangoMatchingStore()
    job = _get_job(job_id, store)
    if job.status in TERMINAL_STATUSES:
        raise InvalidInput(f"Job {job.id} is {job.status} and can no longer be assigned.")

    artisan = ArtisanProfile.objects.filter(pk=artisan_id).first()
    if artisan is None:
        raise NotFound(f"Artisan {artisan_id} not found.")

    job = store.update_job(job.id, assigned_artisan=artisan, status=JobStatus.ASSIGNED)
    logger.info("job #%s assigned to artisan #%s", job.id, artisan.id)
    return job


def expire_pending_jobs(older_than_hours=None, store=None) -> int:
    hours = older_than_hours or settings.MARKETPLACE["JOB_EXPIRY_HOURS"]
    cutoff = timezone.now() - timedelta(hours=hours)
    stale = Job.objects.filter(status=JobStatus.PENDING, created_at__lt=cutoff).values_list("id", flat=True)
    count = 0
    for job_id in list(stale):
        try:
            update_job_status(job_id, JobStatus.EXPIRED, store=store)
        except InvalidInput:
            # le job a changé de statut entre-temps
            logger.info("job #%s left PENDING before expiry, skipped", job_id)
            continue
        count += 1
    if count:
        logger.info("%d stale job(s) expired (older than %sh)", count, hours)
    return count
