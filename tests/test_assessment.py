import pytest

from services.assessment import (
    compute_harvest_volume_m3,
    estimate_cost_inr,
    feasibility_verdict,
    region_costs_for,
    run_assessment,
    size_structures,
    suggest_structures,
)
from services.geo import GeoPoint
from services.rainfall import RainfallResult
from services.validation import AssessmentInput


def test_harvest_volume_example():
    assert compute_harvest_volume_m3(120, 'concrete', 0.9, 800) == 77.76


def test_harvest_volume_unknown_roof_uses_default_coefficient():
    assert compute_harvest_volume_m3(100, 'thatch', 1.0, 1000) == 85.0


def test_harvest_volume_is_monotonic():
    base = compute_harvest_volume_m3(100, 'tile', 0.8, 700)
    assert compute_harvest_volume_m3(200, 'tile', 0.8, 700) > base
    assert compute_harvest_volume_m3(100, 'tile', 0.8, 900) > base
    assert compute_harvest_volume_m3(100, 'tile', 0.9, 700) > base


def test_zero_rainfall_harvests_nothing():
    assert compute_harvest_volume_m3(500, 'metal', 0.9, 0) == 0


@pytest.mark.parametrize('depth,space,expected', [
    (10, 25, ['recharge_pit', 'recharge_trench', 'recharge_shaft']),
    (40, 0, ['modular_tank']),
    (10, 0, ['recharge_shaft']),
    (5, 10, ['recharge_pit']),
    (15, 10, ['recharge_pit', 'recharge_shaft']),
    (3, 100, ['modular_tank']),
    (12, 20, ['recharge_pit', 'recharge_trench', 'recharge_shaft']),
    (30, 0, ['recharge_shaft']),
])
def test_suggest_structures(depth, space, expected):
    assert suggest_structures(depth, space) == expected


def test_sizing_covers_every_tag():
    sizing = size_structures(['recharge_pit', 'recharge_shaft'], 77.76)
    assert sizing['recharge_pit'] == {'diameter_m': 1.2, 'depth_m': 2.5}
    assert sizing['recharge_shaft'] == {'diameter_m': 0.45, 'depth_m': 10}
    assert sizing['recharge_trench'] is None
    assert sizing['modular_tank'] is None


@pytest.mark.parametrize('harvest,volume', [(10, 10), (20, 20), (50, 20)])
def test_tank_volume_is_capped(harvest, volume):
    assert size_structures(['modular_tank'], harvest)['modular_tank'] == {'volume_m3': volume}


def test_cost_all_recharge_structures(default_costs):
    suggestions = ['recharge_pit', 'recharge_trench', 'recharge_shaft']
    assert estimate_cost_inr(suggestions, 77.76, default_costs) == 86000


@pytest.mark.parametrize('harvest,cost', [(10, 71000), (50, 131000)])
def test_cost_modular_tank(harvest, cost, default_costs):
    assert estimate_cost_inr(['modular_tank'], harvest, default_costs) == cost


def test_cost_is_whole_rupees(default_costs):
    cost = estimate_cost_inr(['modular_tank'], 3.33, default_costs)
    assert isinstance(cost, int)
    assert cost == 30980


def test_region_costs_fall_back_to_default(default_costs):
    table = {'default': default_costs, 'IN-MH': dict(default_costs, recharge_pit_base_inr=1)}
    assert region_costs_for(table, 'IN-MH')['recharge_pit_base_inr'] == 1
    assert region_costs_for(table, 'IN-ZZ') is default_costs


def test_feasibility_verdict():
    assert feasibility_verdict(['modular_tank']) == 'Yes'
    assert feasibility_verdict([]) == 'Conditional'


def test_run_assessment_end_to_end(default_costs):
    inp = AssessmentInput(
        location=GeoPoint(28.6139, 77.209),
        roof_area_m2=120,
        roof_type='concrete',
        open_space_m2=20,
        occupiers=4,
        collection_efficiency=0.9,
    )
    rain = RainfallResult(annual_mm=800, monthly_mm=(67,) * 12, data_period='static',
                          years_count=1, source='static_fallback')

    result = run_assessment(inp, rain, 10, default_costs)

    assert result['feasibility'] == 'Yes'
    assert result['suggested_structures'] == ['recharge_pit', 'recharge_trench', 'recharge_shaft']
    assert result['volumes'] == {'annual_harvest_m3': 77.76, 'monthly_rainfall_mm': [67] * 12}
    assert result['cost_estimate_inr'] == 86000
    assert result['sizing']['recharge_trench'] == {'length_m': 6, 'width_m': 0.9, 'depth_m': 1.5}
    assert result['sizing']['modular_tank'] is None
