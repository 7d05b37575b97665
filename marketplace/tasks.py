from celery import shared_task

from marketplace.services.jobs import expire_pending_jobs


@shared_task
def expire_stale_jobs(older_than_hours=None):
    """Passe en EXPIRED les jobs restés PENDING trop longtemps (planifié par celery beat)."""
    return expire_pending_jobs(older_than_hours=older_than_hours)
