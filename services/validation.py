"""
Input validation with boundaries and limits

Every check returns a ValidationResult instead of raising, so callers can
collect all problems before rejecting a request.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from services.geo import GeoPoint

logger = logging.getLogger(__name__)

ROOF_TYPES = ('concrete', 'tile', 'metal', 'asbestos')
AQUIFER_TYPES = ('Unconfined', 'Confined', 'Semi-confined', 'Unknown')
STRUCTURE_TYPES = ('recharge_pit', 'recharge_trench', 'recharge_shaft', 'modular_tank')

ASSESSMENT_DEFAULTS = {
    'roof_type': 'concrete',
    'open_space_m2': 0,
    'occupiers': 4,
    'collection_efficiency': 0.9,
}

BOUNDARIES = {
    'latitude': {'min': -90, 'max': 90},
    'longitude': {'min': -180, 'max': 180},
    'roofArea': {'min': 1, 'max': 10000, 'unit': 'm²'},
    'collectionEfficiency': {'min': 0.1, 'max': 1.0},
    'openSpace': {'min': 0, 'max': 1000, 'unit': 'm²'},
    'rainfall': {'min': 0, 'max': 5000, 'unit': 'mm/year'},
    'groundwaterDepth': {'min': 0.5, 'max': 100, 'unit': 'meters'},
    'cost': {'min': 0, 'max': 1000000, 'unit': 'INR'},
    'harvestVolume': {'min': 0, 'max': 10000, 'unit': 'm³/year'},
}


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None
    value: Any = None


@dataclass(frozen=True)
class AssessmentInput:
    location: GeoPoint
    roof_area_m2: float
    roof_type: str
    open_space_m2: float
    occupiers: int
    collection_efficiency: float


def _ok(value):
    return ValidationResult(True, value=value)


def _fail(message):
    return ValidationResult(False, error=message)


def _is_number(value):
    # bool is an int subclass but never a meaningful measurement here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _check_range(value, label, low, high, low_msg=None, high_msg=None):
    if not _is_number(value):
        return _fail(f'{label} must be a valid number')
    if value < low:
        return _fail(low_msg or f'{label} cannot be less than {low}')
    if value > high:
        return _fail(high_msg or f'{label} cannot exceed {high}')
    return _ok(value)


def validate_latitude(lat):
    return _check_range(lat, 'Latitude', -90, 90,
                        'Latitude must be between -90 and 90 degrees',
                        'Latitude must be between -90 and 90 degrees')


def validate_longitude(lon):
    return _check_range(lon, 'Longitude', -180, 180,
                        'Longitude must be between -180 and 180 degrees',
                        'Longitude must be between -180 and 180 degrees')


def validate_roof_area(area):
    if not _is_number(area):
        return _fail('Roof area must be a valid number')
    if area < 1:
        return _fail('Roof area must be at least 1 m²')
    if area > 10000:
        return _fail('Roof area cannot exceed 10,000 m²')
    return _ok(area)


def validate_collection_efficiency(eff):
    return _check_range(eff, 'Collection efficiency', 0.1, 1.0,
                        'Collection efficiency cannot be less than 0.1 (10%)',
                        'Collection efficiency cannot exceed 1.0 (100%)')


def validate_open_space(space):
    return _check_range(space, 'Open space', 0, 1000,
                        'Open space cannot be negative',
                        'Open space cannot exceed 1,000 m²')


def validate_roof_type(roof_type):
    if not isinstance(roof_type, str):
        return _fail('Roof type must be a string')
    if roof_type not in ROOF_TYPES:
        return _fail(f"Roof type must be one of: {', '.join(ROOF_TYPES)}")
    return _ok(roof_type)


def validate_occupiers(occupiers):
    if isinstance(occupiers, bool) or not isinstance(occupiers, int):
        return _fail('Occupiers must be a whole number')
    if occupiers <= 0:
        return _fail('Occupiers must be greater than 0')
    return _ok(occupiers)


def validate_rainfall_data(rainfall):
    return _check_range(rainfall, 'Rainfall', 0, 5000,
                        'Rainfall cannot be negative',
                        'Rainfall cannot exceed 5,000 mm/year')


def validate_monthly_rainfall(monthly):
    if not isinstance(monthly, (list, tuple)):
        return _fail('Monthly rainfall must be an array')
    if len(monthly) != 12:
        return _fail('Monthly rainfall must have exactly 12 values')
    for i, value in enumerate(monthly):
        if not _is_number(value):
            return _fail(f'Monthly rainfall value at index {i} must be a valid number')
        if value < 0:
            return _fail(f'Monthly rainfall value at index {i} cannot be negative')
        if value > 1000:
            return _fail(f'Monthly rainfall value at index {i} cannot exceed 1,000 mm')
    return _ok(list(monthly))


def validate_groundwater_depth(depth):
    return _check_range(depth, 'Groundwater depth', 0.5, 100,
                        'Groundwater depth cannot be less than 0.5 meters',
                        'Groundwater depth cannot exceed 100 meters')


def validate_aquifer_type(aquifer_type):
    if not isinstance(aquifer_type, str):
        return _fail('Aquifer type must be a string')
    if aquifer_type not in AQUIFER_TYPES:
        return _fail(f"Aquifer type must be one of: {', '.join(AQUIFER_TYPES)}")
    return _ok(aquifer_type)


def validate_structure_recommendation(structures):
    if not isinstance(structures, (list, tuple)):
        return _fail('Structures must be an array')
    for structure in structures:
        if structure not in STRUCTURE_TYPES:
            return _fail(f'Invalid structure type: {structure}')
    return _ok(list(structures))


def validate_cost(cost):
    return _check_range(cost, 'Cost', 0, 1000000,
                        'Cost cannot be negative',
                        'Cost cannot exceed ₹1,000,000')


def validate_harvest_volume(volume):
    return _check_range(volume, 'Harvest volume', 0, 10000,
                        'Harvest volume cannot be negative',
                        'Harvest volume cannot exceed 10,000 m³/year')


def validate_coordinates(lat, lon):
    """Check both coordinates; errors from both are reported together"""
    errors = [r.error for r in (validate_latitude(lat), validate_longitude(lon)) if not r.is_valid]
    if errors:
        return _fail('; '.join(errors))
    return _ok(GeoPoint(lat=float(lat), lon=float(lon)))


def validate_assessment_input(payload):
    """
    Run every field check on an assessment payload

    Omitted optional fields take their defaults before checking. All failures
    are collected, not just the first one.

    Args:
        payload: Mapping as received from the caller

    Returns:
        ValidationResult: value is an AssessmentInput on success, error is the
        '; '-joined list of messages on failure
    """
    if not isinstance(payload, dict):
        return _fail('Assessment input must be an object')

    data = dict(ASSESSMENT_DEFAULTS)
    data.update({k: v for k, v in payload.items() if v is not None})

    location = data.get('location')
    if not isinstance(location, dict):
        location = {}

    checks = [
        validate_latitude(location.get('lat')),
        validate_longitude(location.get('lon')),
        validate_roof_area(data.get('roof_area_m2')),
        validate_roof_type(data.get('roof_type')),
        validate_open_space(data.get('open_space_m2')),
        validate_occupiers(data.get('occupiers')),
        validate_collection_efficiency(data.get('collection_efficiency')),
    ]
    errors = [c.error for c in checks if not c.is_valid]
    if errors:
        return _fail('; '.join(errors))

    return _ok(AssessmentInput(
        location=GeoPoint(lat=float(location['lat']), lon=float(location['lon'])),
        roof_area_m2=float(data['roof_area_m2']),
        roof_type=data['roof_type'],
        open_space_m2=float(data['open_space_m2']),
        occupiers=data['occupiers'],
        collection_efficiency=float(data['collection_efficiency']),
    ))


def validate_data_quality(context):
    """
    Annotate a resolved context with advisory warnings

    Never rejects. The returned value is a copy of the context with a
    'warnings' list, or None when nothing looks unusual.
    """
    warnings = []

    rainfall = context.get('rainfall_mm_year')
    if rainfall is not None:
        if rainfall < 100:
            warnings.append('Very low rainfall detected - may affect feasibility')
        if rainfall > 3000:
            warnings.append('Very high rainfall detected - ensure proper drainage')

    depth = context.get('groundwater_depth_m')
    if depth is not None:
        if depth < 2:
            warnings.append('Very shallow water table - consider flood risk')
        if depth > 50:
            warnings.append('Very deep water table - recharge may be challenging')

    monthly = context.get('monthly_rainfall_mm')
    if monthly:
        max_month = max(monthly)
        min_month = min(monthly)
        # A dry month against any rain is unbounded variation
        if min_month > 0:
            extreme = max_month / min_month > 20
        else:
            extreme = max_month > 0
        if extreme:
            warnings.append('Extreme seasonal variation in rainfall')

    value = dict(context)
    value['warnings'] = warnings or None
    return _ok(value)


def run_boundary_checks():
    """Exercise the edges of the main input ranges and log each outcome"""
    cases = [
        ('Latitude -90', validate_latitude(-90), True),
        ('Latitude 90', validate_latitude(90), True),
        ('Latitude -91', validate_latitude(-91), False),
        ('Latitude 91', validate_latitude(91), False),
        ('Roof area 1', validate_roof_area(1), True),
        ('Roof area 10000', validate_roof_area(10000), True),
        ('Roof area 0', validate_roof_area(0), False),
        ('Roof area 10001', validate_roof_area(10001), False),
        ('Efficiency 0.1', validate_collection_efficiency(0.1), True),
        ('Efficiency 1.0', validate_collection_efficiency(1.0), True),
        ('Efficiency 0.05', validate_collection_efficiency(0.05), False),
        ('Efficiency 1.1', validate_collection_efficiency(1.1), False),
    ]

    logger.info("Testing boundary values...")
    results = []
    for name, result, expected in cases:
        passed = result.is_valid == expected
        log = logger.info if passed else logger.error
        log(f"{name}: valid={result.is_valid} (expected {expected})")
        results.append({'case': name, 'valid': result.is_valid, 'expected': expected, 'passed': passed})
    return results
