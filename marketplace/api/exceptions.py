import logging

from django.db import DatabaseError
from rest_framework.views import exception_handler

from marketplace.exceptions import DependencyFailure

logger = logging.getLogger(__name__)


def marketplace_exception_handler(exc, context):
    """Une erreur base de données sur une opération primaire devient DependencyFailure."""
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.error("database failure in %s", view.__class__.__name__ if view else "unknown view", exc_info=exc)
        exc = DependencyFailure()
    return exception_handler(exc, context)
