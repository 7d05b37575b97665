# services/scoring.py
from marketplace.services.geolocation import round2

MAX_DISTANCE_POINTS = 5
RATING_WEIGHT = 2
ONLINE_BONUS = 2


def calculate_match_score(distance_km: float, rating: float, specialization_level: int,
                          is_online: bool = True) -> float:
    """
    Score = proximité (0-5, nul au-delà de 5 km) + note x2 (0-10)
            + niveau de spécialisation (1-5) + bonus en ligne (2).
    """
    distance_score = max(0.0, MAX_DISTANCE_POINTS - distance_km)
    rating_score = rating * RATING_WEIGHT
    online_bonus = ONLINE_BONUS if is_online else 0
    return round2(distance_score + rating_score + specialization_level + online_bonus)


def ranking_key(result):
    # score desc, puis plus proche, puis mieux noté, puis id
    return (-result.match_score, result.distance_km, -result.rating, result.artisan_id)


def rank_results(results):
    return sorted(results, key=ranking_key)
