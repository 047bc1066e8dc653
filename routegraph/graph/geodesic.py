"""Great-circle distance between two latitude/longitude points."""

import math

EARTH_RADIUS_KM = 6371.0


def haversine_km(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """Compute the haversine distance between two points on a sphere.

    Args:
        lat1: Latitude of the first point, in degrees
        lon1: Longitude of the first point, in degrees
        lat2: Latitude of the second point, in degrees
        lon2: Longitude of the second point, in degrees
        radius_km: Sphere radius in kilometers

    Returns:
        Distance in kilometers
    """
    lat1_r = math.radians(lat1)
    lat2_r = math.radians(lat2)
    u = math.sin((lat2_r - lat1_r) / 2)
    v = math.sin(math.radians(lon2 - lon1) / 2)
    h = u * u + math.cos(lat1_r) * math.cos(lat2_r) * v * v
    # Rounding can push h marginally above 1 for antipodal points
    return 2.0 * radius_km * math.asin(math.sqrt(min(h, 1.0)))
