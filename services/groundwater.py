"""
Groundwater depth and aquifer resolution
"""
import logging

import numpy as np

from services.geo import haversine_km_many, point_in_polygon

logger = logging.getLogger(__name__)

ALLUVIAL_MARKER = 'Alluvium'


def classify_aquifer(name):
    """Alluvial aquifers are treated as unconfined; nothing else is inferred"""
    return 'Unconfined' if ALLUVIAL_MARKER in name else 'Unknown'


def lookup_aquifer_polygon(lat, lon, polygons, default):
    """
    First aquifer polygon (in listed order) containing the point

    Args:
        lat, lon: Query point
        polygons: Sequence of AquiferPolygon
        default: Mapping returned when no polygon contains the point

    Returns:
        dict: {'name', 'type'}
    """
    for polygon in polygons:
        if point_in_polygon(lat, lon, polygon.ring):
            return {'name': polygon.name, 'type': polygon.type}
    return dict(default)


class GroundwaterResolver:
    """
    Nearest-sample groundwater lookup over the static reference set

    The scan is a brute-force O(n) distance pass; it is the first thing to
    replace with a spatial index if the sample file grows large.
    """

    def __init__(self, reference):
        self.reference = reference
        samples = reference.groundwater_samples
        self._lats = np.array([s.lat for s in samples], dtype=float)
        self._lons = np.array([s.lon for s in samples], dtype=float)

    def nearest_sample(self, lat, lon):
        """Closest sample and its distance in km, or (None, None) when there are no samples"""
        samples = self.reference.groundwater_samples
        if not samples:
            return None, None
        distances = haversine_km_many(lat, lon, self._lats, self._lons)
        # argmin returns the first index on ties
        idx = int(np.argmin(distances))
        return samples[idx], float(distances[idx])

    def resolve(self, lat, lon):
        """
        Returns:
            dict: {'depth_m': float, 'aquifer': {'name', 'type'} or None}
        """
        sample, distance_km = self.nearest_sample(lat, lon)
        if sample is None:
            defaults = self.reference.defaults
            logger.debug(f"No groundwater samples loaded, using fallback depth {defaults.groundwater_depth_m}m")
            return {'depth_m': defaults.groundwater_depth_m, 'aquifer': dict(defaults.aquifer)}

        logger.debug(f"Nearest groundwater sample at {distance_km:.1f}km: "
                     f"{sample.depth_m}m ({sample.aquifer_name or 'unnamed aquifer'})")
        aquifer = None
        if sample.aquifer_name:
            aquifer = {'name': sample.aquifer_name, 'type': classify_aquifer(sample.aquifer_name)}
        return {'depth_m': sample.depth_m, 'aquifer': aquifer}

    def resolve_with_polygons(self, lat, lon):
        """resolve(), consulting the aquifer polygons when the sample carries no aquifer"""
        result = self.resolve(lat, lon)
        if result['aquifer'] is None:
            result['aquifer'] = lookup_aquifer_polygon(
                lat, lon, self.reference.aquifer_polygons, self.reference.defaults.aquifer)
        return result
