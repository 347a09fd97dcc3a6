import pytest

from services.geo import GeoPoint
from services.validation import (
    AssessmentInput,
    run_boundary_checks,
    validate_assessment_input,
    validate_collection_efficiency,
    validate_coordinates,
    validate_data_quality,
    validate_groundwater_depth,
    validate_latitude,
    validate_monthly_rainfall,
    validate_occupiers,
    validate_roof_area,
    validate_roof_type,
    validate_structure_recommendation,
)

VALID_PAYLOAD = {
    'location': {'lat': 28.6139, 'lon': 77.209},
    'roof_area_m2': 120,
    'roof_type': 'concrete',
    'open_space_m2': 20,
    'collection_efficiency': 0.9,
}


@pytest.mark.parametrize('lat,valid', [(-90, True), (90, True), (0, True), (-91, False), (91, False)])
def test_latitude_boundaries(lat, valid):
    assert validate_latitude(lat).is_valid is valid


@pytest.mark.parametrize('area,valid', [(1, True), (10000, True), (0, False), (10001, False), (0.5, False)])
def test_roof_area_boundaries(area, valid):
    assert validate_roof_area(area).is_valid is valid


@pytest.mark.parametrize('eff,valid', [(0.1, True), (1.0, True), (0.05, False), (1.1, False)])
def test_efficiency_boundaries(eff, valid):
    assert validate_collection_efficiency(eff).is_valid is valid


@pytest.mark.parametrize('value', ['12', None, True, float('nan')])
def test_non_numbers_rejected(value):
    result = validate_roof_area(value)
    assert not result.is_valid
    assert result.error == 'Roof area must be a valid number'


def test_roof_type_enum():
    assert validate_roof_type('metal').is_valid
    result = validate_roof_type('thatch')
    assert not result.is_valid
    assert 'concrete, tile, metal, asbestos' in result.error


@pytest.mark.parametrize('occupiers,valid', [(1, True), (12, True), (0, False), (-2, False), (2.5, False), (True, False)])
def test_occupiers_positive_integer(occupiers, valid):
    assert validate_occupiers(occupiers).is_valid is valid


def test_groundwater_depth_range():
    assert validate_groundwater_depth(0.5).is_valid
    assert validate_groundwater_depth(100).is_valid
    assert not validate_groundwater_depth(0.4).is_valid
    assert not validate_groundwater_depth(101).is_valid


def test_monthly_rainfall_shape():
    assert validate_monthly_rainfall([10] * 12).is_valid
    assert not validate_monthly_rainfall([10] * 11).is_valid
    assert not validate_monthly_rainfall([10] * 11 + [-1]).is_valid
    assert not validate_monthly_rainfall([10] * 11 + [1001]).is_valid


def test_structure_tags():
    assert validate_structure_recommendation(['recharge_pit', 'modular_tank']).is_valid
    assert not validate_structure_recommendation(['swale']).is_valid


def test_coordinates_report_both_errors():
    result = validate_coordinates(91, 181)
    assert not result.is_valid
    assert 'Latitude' in result.error and 'Longitude' in result.error
    assert validate_coordinates(28.6, 77.2).value == GeoPoint(28.6, 77.2)


def test_composite_reports_every_error():
    result = validate_assessment_input({'location': {'lat': 91}, 'roof_area_m2': 0})
    assert not result.is_valid
    errors = result.error.split('; ')
    assert len(set(errors)) >= 2
    assert 'Latitude must be between -90 and 90 degrees' in errors
    assert 'Roof area must be at least 1 m²' in errors


def test_composite_applies_defaults():
    result = validate_assessment_input({'location': {'lat': 28.6, 'lon': 77.2}, 'roof_area_m2': 100})
    assert result.is_valid
    inp = result.value
    assert isinstance(inp, AssessmentInput)
    assert inp.roof_type == 'concrete'
    assert inp.open_space_m2 == 0
    assert inp.occupiers == 4
    assert inp.collection_efficiency == 0.9


def test_composite_valid_payload():
    inp = validate_assessment_input(VALID_PAYLOAD).value
    assert inp.location == GeoPoint(28.6139, 77.209)
    assert inp.roof_area_m2 == 120
    assert inp.open_space_m2 == 20


def test_composite_rejects_non_object():
    assert not validate_assessment_input(['not', 'a', 'dict']).is_valid


def test_data_quality_clean_context_has_no_warnings():
    context = {'rainfall_mm_year': 800, 'groundwater_depth_m': 10, 'monthly_rainfall_mm': [50] * 12}
    result = validate_data_quality(context)
    assert result.is_valid
    assert result.value['warnings'] is None
    assert 'warnings' not in context


@pytest.mark.parametrize('context,expected', [
    ({'rainfall_mm_year': 50}, 'Very low rainfall detected - may affect feasibility'),
    ({'rainfall_mm_year': 3500}, 'Very high rainfall detected - ensure proper drainage'),
    ({'groundwater_depth_m': 1.5}, 'Very shallow water table - consider flood risk'),
    ({'groundwater_depth_m': 60}, 'Very deep water table - recharge may be challenging'),
    ({'monthly_rainfall_mm': [1] * 11 + [30]}, 'Extreme seasonal variation in rainfall'),
    ({'monthly_rainfall_mm': [0] * 11 + [10]}, 'Extreme seasonal variation in rainfall'),
])
def test_data_quality_warnings(context, expected):
    result = validate_data_quality(context)
    assert result.is_valid
    assert expected in result.value['warnings']


def test_all_dry_months_are_not_seasonal():
    result = validate_data_quality({'monthly_rainfall_mm': [0] * 12})
    assert result.value['warnings'] is None


def test_boundary_checks_all_pass():
    results = run_boundary_checks()
    assert len(results) == 12
    assert all(r['passed'] for r in results)
