# services/geolocation.py
import math
from decimal import Decimal, ROUND_HALF_UP
from numbers import Real
from typing import NamedTuple

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.32


class BoundingBox(NamedTuple):
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def wraps_antimeridian(self) -> bool:
        return self.min_lon < -180 or self.max_lon > 180


def round2(value: float) -> float:
    """Arrondi à 2 décimales, moitié vers le haut (pas d'arrondi bancaire)."""
    return float(Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in km, rounded to 2 decimals."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (math.sin(d_lat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2)
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round2(EARTH_RADIUS_KM * c)


def validate_coordinates(lat, lon) -> bool:
    for value in (lat, lon):
        if isinstance(value, Decimal):
            if not value.is_finite():
                return False
        elif isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
            return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def is_within_radius(center_lat: float, center_lon: float, lat: float, lon: float, radius_km: float) -> bool:
    return calculate_distance(center_lat, center_lon, lat, lon) <= radius_km


def get_bounding_box(center_lat: float, center_lon: float, radius_km: float) -> BoundingBox:
    """
    Boîte approximative autour d'un point, pour pré-filtrer en base
    avant le calcul exact (faux positifs possibles près des bords).
    """
    lat_delta = radius_km / KM_PER_DEGREE
    lon_delta = radius_km / (KM_PER_DEGREE * math.cos(math.radians(center_lat)))
    return BoundingBox(
        min_lat=center_lat - lat_delta,
        max_lat=center_lat + lat_delta,
        min_lon=center_lon - lon_delta,
        max_lon=center_lon + lon_delta,
    )


def longitude_reach(center_lat: float, radius_km: float):
    """
    Demi-largeur exacte (degrés) d'un cercle sur la sphère:
    asin(sin(r/R) / cos(lat)). None si le cercle contient un pôle.
    """
    angular = radius_km / EARTH_RADIUS_KM
    if angular >= math.pi / 2:
        return None
    ratio = math.sin(angular) / math.cos(math.radians(center_lat))
    if ratio >= 1:
        return None
    return math.degrees(math.asin(ratio))
