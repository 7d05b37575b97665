# services/notifications.py
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List

import requests
from django.conf import settings
from django.utils.module_loading import import_string

from marketplace.exceptions import DependencyFailure

logger = logging.getLogger(__name__)

FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
DESCRIPTION_PREVIEW_CHARS = 100


@dataclass
class PushPayload:
    title: str
    body: str
    data: Dict[str, str] = field(default_factory=dict)


@dataclass
class DeliveryResult:
    success_count: int = 0
    failure_count: int = 0
    message_ids: List[str] = field(default_factory=list)


class PushProvider(ABC):
    @abstractmethod
    def send_multicast(self, tokens: List[str], payload: PushPayload) -> DeliveryResult: ...


class ConsolePushProvider(PushProvider):
    """N'envoie rien: trace le message (dev / tests)."""

    def send_multicast(self, tokens, payload):
        logger.info("push to %d device(s): %s | %s", len(tokens), payload.title, payload.body)
        return DeliveryResult(success_count=len(tokens))


class FCMProvider(PushProvider):
    """
    FCM HTTP v1: un appel par token, comme sendEachForMulticast.

    Les jetons OAuth FCM expirent (~1 h): FCM_ACCESS_TOKEN ne convient qu'en dev.
    En prod, FCM_TOKEN_SOURCE pointe vers un callable qui renvoie un jeton frais;
    il est appelé à chaque envoi groupé.
    """

    def __init__(self, project_id=None, access_token=None, timeout=None, session=None, token_source=None):
        conf = settings.MARKETPLACE
        self.project_id = project_id or conf["FCM_PROJECT_ID"]
        self.access_token = access_token or conf["FCM_ACCESS_TOKEN"]
        source = token_source or conf.get("FCM_TOKEN_SOURCE") or None
        self.token_source = import_string(source) if isinstance(source, str) else source
        self.timeout = timeout or conf["FCM_TIMEOUT"]
        self.session = session or requests.Session()

    def _message(self, token, payload):
        return {
            "message": {
                "token": token,
                "notification": {"title": payload.title, "body": payload.body},
                "data": payload.data,
                "android": {
                    "priority": "high",
                    "notification": {"sound": "default", "channel_id": "handyman_jobs"},
                },
                "apns": {"payload": {"aps": {"sound": "default", "badge": 1}}},
            }
        }

    def _bearer(self):
        if self.token_source is not None:
            return self.token_source()
        return self.access_token

    def send_multicast(self, tokens, payload):
        bearer = self._bearer() if self.project_id else None
        if not bearer:
            raise DependencyFailure("FCM is not configured.")

        url = FCM_SEND_URL.format(project_id=self.project_id)
        headers = {"Authorization": f"Bearer {bearer}"}
        result = DeliveryResult()
        for token in tokens:
            try:
                response = self.session.post(
                    url, json=self._message(token, payload), headers=headers, timeout=self.timeout
                )
                response.raise_for_status()
            except requests.RequestException as exc:
                logger.warning("FCM delivery failed for token %s…: %s", token[:12], exc)
                result.failure_count += 1
                continue
            result.success_count += 1
            result.message_ids.append(_message_name(response))

        if tokens and result.success_count == 0:
            raise DependencyFailure(f"FCM rejected all {len(tokens)} message(s).")
        return result


def _message_name(response) -> str:
    # livré même si le corps n'est pas du JSON
    try:
        return response.json().get("name", "")
    except ValueError:
        return ""


def get_push_provider() -> PushProvider:
    return import_string(settings.MARKETPLACE["PUSH_PROVIDER"])()


def build_job_payload(job, distance_km: float) -> PushPayload:
    service_name = job.service.name
    description = job.description or ""
    preview = description[:DESCRIPTION_PREVIEW_CHARS]
    if len(description) > DESCRIPTION_PREVIEW_CHARS:
        preview += "..."
    return PushPayload(
        title=f"New {service_name} Job Available",
        body=f"{preview} • {distance_km:.1f}km away",
        data={
            "jobId": str(job.id),
            "serviceName": service_name,
            "distanceKm": str(distance_km),
            "estimatedCost": str(job.estimated_cost) if job.estimated_cost is not None else "",
            "type": "new_job",
        },
    )


def dispatch_job_notifications(job, selected, store, provider=None):
    """
    Pousse l'offre aux artisans retenus. Retourne None si aucun token.
    Les erreurs remontent: c'est l'appelant qui les isole.
    """
    if not selected:
        return None
    tokens = store.find_push_tokens(match.user_id for match in selected)
    if not tokens:
        logger.debug("job #%s: no push token for %d selected artisan(s)", job.id, len(selected))
        return None

    provider = provider or get_push_provider()
    payload = build_job_payload(job, min(match.distance_km for match in selected))
    result = provider.send_multicast(tokens, payload)
    logger.info("job #%s: push sent (%d ok, %d failed)", job.id, result.success_count, result.failure_count)
    return result
