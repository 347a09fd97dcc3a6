"""
Geospatial primitives: great-circle distance and point-in-polygon
"""
import math
from dataclasses import dataclass

import numpy as np

EARTH_RADIUS_KM = 6371.0

# Guards the ray-casting denominator against horizontal edges
_EPSILON = 1e-12


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float

    def to_dict(self):
        return {'lat': self.lat, 'lon': self.lon}


def haversine_km(a_lat, a_lon, b_lat, b_lon):
    """Great-circle distance in kilometres on a sphere of mean Earth radius"""
    d_lat = math.radians(b_lat - a_lat)
    d_lon = math.radians(b_lon - a_lon)
    s = (math.sin(d_lat / 2) ** 2
         + math.cos(math.radians(a_lat)) * math.cos(math.radians(b_lat)) * math.sin(d_lon / 2) ** 2)
    # Clamp rounding noise for antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, s)))


def haversine_km_many(lat, lon, lats, lons):
    """
    Vectorised haversine from one point to many

    Args:
        lat, lon: Query point in degrees
        lats, lons: Sequences of equal length in degrees

    Returns:
        numpy.ndarray: Distances in kilometres, same order as the input
    """
    lats = np.radians(np.asarray(lats, dtype=float))
    lons = np.radians(np.asarray(lons, dtype=float))
    lat_r = math.radians(lat)
    lon_r = math.radians(lon)
    s = (np.sin((lats - lat_r) / 2) ** 2
         + math.cos(lat_r) * np.cos(lats) * np.sin((lons - lon_r) / 2) ** 2)
    return 2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(np.minimum(1.0, s)))


def point_in_polygon(lat, lon, ring):
    """
    Ray-casting containment test

    Args:
        lat, lon: Test point
        ring: Sequence of (lon, lat) vertices; closing vertex optional

    Returns:
        bool: True if the point lies inside the ring
    """
    inside = False
    n = len(ring)
    j = n - 1
    for i in range(n):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > lat) != (yj > lat):
            denom = yj - yi
            if abs(denom) < _EPSILON:
                denom = _EPSILON
            if lon < (xj - xi) * (lat - yi) / denom + xi:
                inside = not inside
        j = i
    return inside
