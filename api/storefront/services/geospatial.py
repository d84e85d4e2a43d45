from __future__ import annotations

import math

EARTH_RADIUS_KM = 6371.0
DEFAULT_WALKING_SPEED_KMH = 5.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    lat1_rad, lon1_rad = math.radians(lat1), math.radians(lon1)
    lat2_rad, lon2_rad = math.radians(lat2), math.radians(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    # Clamp floating-point drift; NaN is left alone so it cannot pass as 0 km.
    if math.isfinite(a):
        a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def _round_half_up(value: float, digits: int = 1) -> float:
    # Python's round() is banker's rounding; display distances round half up.
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km, rounded to one decimal place."""
    return _round_half_up(haversine_distance(lat1, lon1, lat2, lon2))


def format_distance(distance_km: float) -> str:
    """Render a distance for display: metres below 1 km, kilometres otherwise.

    >>> format_distance(0.5)
    '500m'
    >>> format_distance(2.3)
    '2.3km'
    """
    if distance_km < 1:
        return f"{int(_round_half_up(distance_km * 1000, 0))}m"
    if float(distance_km).is_integer():
        return f"{int(distance_km)}km"
    return f"{distance_km}km"


def calculate_duration(distance_km: float, average_speed_kmh: float = DEFAULT_WALKING_SPEED_KMH) -> int:
    """Estimated travel time in whole minutes (walking pace by default)."""
    if average_speed_kmh <= 0:
        raise ValueError("average_speed_kmh must be positive")
    return int(_round_half_up(distance_km / average_speed_kmh * 60, 0))


__all__ = [
    "EARTH_RADIUS_KM",
    "calculate_distance",
    "calculate_duration",
    "format_distance",
    "haversine_distance",
]
