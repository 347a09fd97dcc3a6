"""
Shared fixtures for the RTRWH backend tests
"""
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import requests

from services.rainfall import RainfallChain, StaticRainfallProvider
from services.reference_data import (
    GroundwaterSample,
    ReferenceData,
    build_aquifer_polygons,
    build_context_defaults,
    build_cost_table,
)
from services.rtrwh import RtrwhService

DEFAULT_COSTS = {
    'recharge_pit_base_inr': 15000,
    'recharge_trench_per_meter_inr': 2500,
    'recharge_shaft_base_inr': 45000,
    'modular_tank_per_m3_inr': 6000,
    'filtration_unit_base_inr': 8000,
    'conveyance_per_meter_inr': 300,
}

CONTEXT = {
    'rainfall_mm_year': 800,
    'groundwater_depth_m': 12,
    'aquifer': {'name': 'Fallback Aquifer', 'type': 'Unknown'},
    'runoff_coeff_default': 0.85,
    'admin': {'code': 'IN-XX', 'name': 'Test Region'},
}

AQUIFERS = {
    'type': 'FeatureCollection',
    'features': [
        {
            'type': 'Feature',
            'properties': {'name': 'Peninsular Gneiss', 'type': 'Confined'},
            'geometry': {
                'type': 'Polygon',
                'coordinates': [[[74.5, 8.5], [79.8, 8.5], [79.8, 16.0], [74.5, 16.0], [74.5, 8.5]]],
            },
        },
    ],
}


@pytest.fixture
def samples():
    return (
        GroundwaterSample(lat=28.6139, lon=77.2090, depth_m=10.0, aquifer_name='Yamuna Alluvium'),
        GroundwaterSample(lat=19.0760, lon=72.8777, depth_m=6.1, aquifer_name='Deccan Basalt'),
        GroundwaterSample(lat=12.9716, lon=77.5946, depth_m=28.4, aquifer_name=''),
        GroundwaterSample(lat=26.9124, lon=75.7873, depth_m=60.0, aquifer_name='Aeolian Sands'),
    )


@pytest.fixture
def reference(samples):
    return ReferenceData(
        defaults=build_context_defaults(CONTEXT),
        cost_table=build_cost_table({'default': DEFAULT_COSTS}),
        aquifer_polygons=build_aquifer_polygons(AQUIFERS),
        groundwater_samples=samples,
    )


@pytest.fixture
def empty_reference():
    return ReferenceData(
        defaults=build_context_defaults(CONTEXT),
        cost_table=build_cost_table({'default': DEFAULT_COSTS}),
    )


@pytest.fixture
def static_chain():
    return RainfallChain([StaticRainfallProvider(800)])


@pytest.fixture
def service(reference, static_chain):
    return RtrwhService(reference, static_chain)


@pytest.fixture
def clock():
    return lambda: datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_response():
    def _make(payload=None, status=200):
        response = Mock()
        response.status_code = status
        response.json.return_value = payload
        if status >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
        else:
            response.raise_for_status.return_value = None
        return response
    return _make


@pytest.fixture
def default_costs():
    return dict(DEFAULT_COSTS)
