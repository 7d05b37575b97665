# services/matching_log.py
import uuid

from django.db.models import Avg, Count, Q
from django.utils import timezone

from marketplace.models import JobMatchingLog


def build_log_rows(job_id, evaluated, selected, run_id=None, now=None):
    """Une ligne par candidat évalué; is_selected/notification_sent par appartenance au top-K."""
    run_id = run_id or uuid.uuid4()
    now = now or timezone.now()
    selected_ids = {match.artisan_id for match in selected}
    rows = []
    for match in evaluated:
        chosen = match.artisan_id in selected_ids
        rows.append(JobMatchingLog(
            run_id=run_id,
            job_id=job_id,
            artisan_id=match.artisan_id,
            match_score=match.match_score,
            distance_km=match.distance_km,
            rating=match.rating,
            specialization_level=match.specialization_level,
            within_radius=match.within_radius,
            is_selected=chosen,
            notification_sent=chosen,
            notification_sent_at=now if chosen else None,
            created_at=now,
        ))
    return rows


def log_matching_results(job_id, evaluated, selected, store, run_id=None):
    rows = build_log_rows(job_id, evaluated, selected, run_id=run_id)
    store.bulk_insert_matching_logs(rows)
    return len(rows)


def matching_analytics(start_date=None, end_date=None, service_id=None):
    qs = JobMatchingLog.objects.all()
    if start_date and end_date:
        qs = qs.filter(created_at__gte=start_date, created_at__lte=end_date)
    if service_id:
        qs = qs.filter(job__service_id=service_id)

    agg = qs.aggregate(
        total=Count("id"),
        selected=Count("id", filter=Q(is_selected=True)),
        avg_score=Avg("match_score"),
        avg_distance=Avg("distance_km"),
        avg_rating=Avg("rating"),
    )
    total = agg["total"]
    return {
        "total_matches": total,
        "selected_matches": agg["selected"],
        "selection_rate": (agg["selected"] / total) * 100 if total else 0,
        "average_match_score": agg["avg_score"] or 0,
        "average_distance": agg["avg_distance"] or 0,
        "average_rating": agg["avg_rating"] or 0,
    }
