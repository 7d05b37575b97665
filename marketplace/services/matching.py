# services/matching.py
import logging
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from django.conf import settings

from marketplace.exceptions import InvalidInput, NotFound
from marketplace.services.geolocation import calculate_distance
from marketplace.services.matching_log import log_matching_results
from marketplace.services.notifications import dispatch_job_notifications
from marketplace.services.scoring import calculate_match_score, rank_results
from marketplace.services.store import DjangoMatchingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    artisan_id: int
    user_id: int
    artisan_name: str
    artisan_photo_url: Optional[str]
    match_score: float
    distance_km: float
    rating: float
    specialization_level: int
    is_online: bool
    service_radius_km: float
    within_radius: bool = True


@dataclass
class MatchingOutcome:
    job_id: int
    run_id: uuid.UUID
    matches: List[MatchResult] = field(default_factory=list)
    evaluated: List[MatchResult] = field(default_factory=list)
    log_error: Optional[Exception] = None
    notify_error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.log_error is None and self.notify_error is None


def score_candidate(job, candidate) -> MatchResult:
    distance_km = calculate_distance(job.latitude, job.longitude, candidate.latitude, candidate.longitude)
    return MatchResult(
        artisan_id=candidate.id,
        user_id=candidate.user_id,
        artisan_name=candidate.name,
        artisan_photo_url=candidate.photo_url,
        match_score=calculate_match_score(
            distance_km, candidate.average_rating, candidate.specialization_level, candidate.is_online
        ),
        distance_km=distance_km,
        rating=candidate.average_rating,
        specialization_level=candidate.specialization_level,
        is_online=candidate.is_online,
        # rayon propre à chaque artisan, pas de seuil global
        within_radius=distance_km <= candidate.service_radius_km,
        service_radius_km=candidate.service_radius_km,
    )


def _log_stage(outcome, job, store, push_provider):
    log_matching_results(job.id, outcome.evaluated, outcome.matches, store, run_id=outcome.run_id)


def _notify_stage(outcome, job, store, push_provider):
    dispatch_job_notifications(job, outcome.matches, store, provider=push_provider)


# ordre garanti: journal avant notification
POST_MATCH_STAGES = (
    ("log_error", _log_stage),
    ("notify_error", _notify_stage),
)


def match_artisans_for_job(job_id, limit=None, store=None, push_provider=None) -> MatchingOutcome:
    """
    Classe les artisans en ligne de la catégorie du job, garde les `limit`
    meilleurs, journalise tous les candidats évalués puis notifie les retenus.

    Les étapes journal/notification sont isolées: leurs erreurs sont
    enregistrées sur le résultat, jamais propagées.
    """
    if limit is None:
        limit = settings.MARKETPLACE["MATCH_LIMIT_DEFAULT"]
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise InvalidInput("limit must be a positive integer.")

    store = store or DjangoMatchingStore()
    job = store.find_job_by_id(job_id)
    if job is None:
        raise NotFound(f"Job {job_id} not found.")

    candidates = store.find_eligible_artisans(job.service_id, near=(job.latitude, job.longitude))
    evaluated = rank_results(score_candidate(job, candidate) for candidate in candidates)
    eligible = [match for match in evaluated if match.within_radius]

    outcome = MatchingOutcome(
        job_id=job.id,
        run_id=uuid.uuid4(),
        matches=eligible[:limit],
        evaluated=evaluated,
    )

    for error_attr, stage in POST_MATCH_STAGES:
        try:
            stage(outcome, job, store, push_provider)
        except Exception as exc:
            logger.exception("job #%s: matching stage %s failed", job.id, stage.__name__)
            setattr(outcome, error_attr, exc)

    logger.info("job #%s: %d candidate(s) evaluated, %d selected",
                job.id, len(outcome.evaluated), len(outcome.matches))
    return outcome
