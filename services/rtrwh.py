"""
RTRWH Assessment Service
Resolves site context (rainfall, groundwater, aquifer) and runs feasibility assessments
"""
import logging

from services.assessment import region_costs_for, run_assessment
from services.errors import AssessmentError, InputValidationError
from services.groundwater import GroundwaterResolver
from services.rainfall import build_default_chain
from services.validation import (
    validate_assessment_input,
    validate_coordinates,
    validate_cost,
    validate_data_quality,
    validate_harvest_volume,
    validate_structure_recommendation,
)

logger = logging.getLogger(__name__)


class RtrwhService:
    """
    Caller-facing operations over injected reference data

    Each call re-fetches rainfall and re-resolves groundwater; nothing is
    cached between requests.
    """

    def __init__(self, reference, rainfall_chain=None):
        self.reference = reference
        self.rainfall_chain = rainfall_chain or build_default_chain(reference.defaults.rainfall_mm_year)
        self.groundwater = GroundwaterResolver(reference)

    def _check_location(self, lat, lon):
        result = validate_coordinates(lat, lon)
        if not result.is_valid:
            raise InputValidationError(result.error.split('; '))
        return result.value

    def get_rainfall(self, lat, lon):
        point = self._check_location(lat, lon)
        return self.rainfall_chain.resolve(point.lat, point.lon)

    def get_groundwater(self, lat, lon):
        point = self._check_location(lat, lon)
        return self.groundwater.resolve_with_polygons(point.lat, point.lon)

    def resolve_context(self, lat, lon):
        """
        Rainfall, groundwater depth and aquifer for a point

        Returns:
            dict: ResolvedContext with advisory 'warnings' (None when clean)
        """
        point = self._check_location(lat, lon)
        logger.info(f"Resolving context for ({point.lat:.4f}, {point.lon:.4f})")

        rain = self.rainfall_chain.resolve(point.lat, point.lon)
        gw = self.groundwater.resolve_with_polygons(point.lat, point.lon)
        defaults = self.reference.defaults

        context = {
            'location': point.to_dict(),
            'rainfall_mm_year': rain.annual_mm,
            'monthly_rainfall_mm': list(rain.monthly_mm),
            'rainfall_data_period': rain.data_period,
            'rainfall_years_count': rain.years_count,
            'rainfall_source': rain.source,
            'groundwater_depth_m': gw['depth_m'],
            'aquifer': gw['aquifer'],
            'runoff_coeff_default': defaults.runoff_coeff_default,
            'admin': dict(defaults.admin),
        }
        return validate_data_quality(context).value

    def assess(self, payload):
        """
        Validate an assessment payload and compute the feasibility result

        Raises:
            InputValidationError: one or more fields failed (all are reported)
            AssessmentError: unexpected failure during computation
        """
        validation = validate_assessment_input(payload)
        if not validation.is_valid:
            logger.info(f"Rejected assessment input: {validation.error}")
            raise InputValidationError(validation.error.split('; '))
        inp = validation.value

        lat, lon = inp.location.lat, inp.location.lon
        logger.info(f"Assessing {inp.roof_area_m2}m² {inp.roof_type} roof at ({lat:.4f}, {lon:.4f})")

        try:
            rain = self.rainfall_chain.resolve(lat, lon)
            gw = self.groundwater.resolve(lat, lon)
            # Costing uses the configured context region regardless of location
            region_costs = region_costs_for(self.reference.cost_table, self.reference.defaults.admin_code)
            result = run_assessment(inp, rain, gw['depth_m'], region_costs)
        except Exception as e:
            logger.error(f"Assessment computation failed: {e}", exc_info=True)
            raise AssessmentError("Assessment computation failed") from e

        self._sanity_check(result)
        logger.info(f"Assessment: {result['feasibility']}, {result['suggested_structures']}, "
                    f"{result['volumes']['annual_harvest_m3']}m³/year, ₹{result['cost_estimate_inr']}")
        return result

    def _sanity_check(self, result):
        checks = (
            validate_harvest_volume(result['volumes']['annual_harvest_m3']),
            validate_structure_recommendation(result['suggested_structures']),
            validate_cost(result['cost_estimate_inr']),
        )
        for check in checks:
            if not check.is_valid:
                logger.warning(f"Assessment output outside expected range: {check.error}")
