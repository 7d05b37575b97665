# services/pricing.py
import random

from django.conf import settings

from marketplace.exceptions import NotFound
from marketplace.models import ServiceCategory

# estimations de base par catégorie (NGN), durée en heures
BASES = {
    'Plumbing': {'min': 5000, 'max': 25000, 'duration': {'min': 1, 'max': 4}},
    'Electrical': {'min': 8000, 'max': 35000, 'duration': {'min': 2, 'max': 6}},
    'Carpentry': {'min': 10000, 'max': 50000, 'duration': {'min': 3, 'max': 8}},
    'Cleaning': {'min': 3000, 'max': 15000, 'duration': {'min': 2, 'max': 6}},
    'Painting': {'min': 15000, 'max': 80000, 'duration': {'min': 4, 'max': 12}},
    'Gardening': {'min': 5000, 'max': 20000, 'duration': {'min': 2, 'max': 5}},
    'General Maintenance': {'min': 8000, 'max': 40000, 'duration': {'min': 2, 'max': 8}},
}
DEFAULT_BASE = {'min': 5000, 'max': 15000, 'duration': {'min': 1, 'max': 4}}


def estimate_cost(service_id, description=None, photo_urls=None, rng=random):
    """
    Fourchette heuristique en attendant un vrai modèle d'estimation.
    Seule la forme du résultat est stable (fourchette, confiance, facteurs, durée).
    """
    service = ServiceCategory.objects.filter(pk=service_id).first()
    if service is None:
        raise NotFound("Service category not found.")

    base = BASES.get(service.name, DEFAULT_BASE)
    factor = 0.8 + rng.random() * 0.4
    factors = ['Service type complexity', 'Market rates', 'Location factors']
    if description:
        factors.append('Job description analysis')
    if photo_urls:
        factors.append('Photo-based assessment')

    return {
        'service_id': service.id,
        'service_name': service.name,
        'estimated_range': {
            'min': round(base['min'] * factor),
            'max': round(base['max'] * factor),
            'currency': settings.MARKETPLACE['ESTIMATE_CURRENCY'],
        },
        'confidence': 0.7 + rng.random() * 0.2,
        'factors': factors,
        'estimated_duration': dict(base['duration']),
    }
