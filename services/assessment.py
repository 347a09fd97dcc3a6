"""
Assessment engine: harvest volume, recharge structures, sizing and cost

Pure functions. Inputs are expected to have passed validation already.
"""

RUNOFF_COEFFICIENTS = {
    'concrete': 0.90,
    'tile': 0.80,
    'metal': 0.85,
    'asbestos': 0.75,
}
DEFAULT_RUNOFF_COEFFICIENT = 0.85

# Fixed dimensional templates
PIT_DIMENSIONS = {'diameter_m': 1.2, 'depth_m': 2.5}
TRENCH_DIMENSIONS = {'length_m': 6, 'width_m': 0.9, 'depth_m': 1.5}
SHAFT_DIMENSIONS = {'diameter_m': 0.45, 'depth_m': 10}

TRENCH_LENGTH_M = 6
CONVEYANCE_LENGTH_M = 10
MAX_TANK_VOLUME_M3 = 20


def runoff_coefficient(roof_type):
    return RUNOFF_COEFFICIENTS.get(roof_type, DEFAULT_RUNOFF_COEFFICIENT)


def compute_harvest_volume_m3(roof_area_m2, roof_type, collection_efficiency, rainfall_mm):
    """Annual harvest in m³: area × rainfall × runoff × efficiency / 1000"""
    volume = roof_area_m2 * rainfall_mm * runoff_coefficient(roof_type) * collection_efficiency * 1e-3
    return round(volume, 2)


def suggest_structures(depth_m, open_space_m2):
    """
    Recharge structures suited to the water table depth and available space

    Rules are independent; a modular storage tank is suggested only when no
    recharge structure qualifies.
    """
    suggestions = []

    # Recharge pit: needs minimum 10m² space and water table 5-15m deep
    if open_space_m2 >= 10 and 5 <= depth_m <= 15:
        suggestions.append('recharge_pit')

    # Recharge trench: needs minimum 20m² space and water table 5-12m deep
    if open_space_m2 >= 20 and 5 <= depth_m <= 12:
        suggestions.append('recharge_trench')

    # Recharge shaft: deeper water tables, space-independent
    if 8 <= depth_m <= 30:
        suggestions.append('recharge_shaft')

    if not suggestions:
        suggestions.append('modular_tank')

    return suggestions


def tank_volume_m3(harvest_m3):
    return min(harvest_m3, MAX_TANK_VOLUME_M3)


def size_structures(suggestions, harvest_m3):
    """Dimensions for every structure tag; None for those not suggested"""
    return {
        'recharge_pit': dict(PIT_DIMENSIONS) if 'recharge_pit' in suggestions else None,
        'recharge_trench': dict(TRENCH_DIMENSIONS) if 'recharge_trench' in suggestions else None,
        'recharge_shaft': dict(SHAFT_DIMENSIONS) if 'recharge_shaft' in suggestions else None,
        'modular_tank': {'volume_m3': tank_volume_m3(harvest_m3)} if 'modular_tank' in suggestions else None,
    }


def region_costs_for(cost_table, region_code):
    return cost_table.get(region_code) or cost_table['default']


def estimate_cost_inr(suggestions, harvest_m3, region_costs):
    """Structure costs plus a filtration unit and 10m of conveyance, in whole rupees"""
    cost = 0

    if 'recharge_pit' in suggestions:
        cost += region_costs['recharge_pit_base_inr']

    if 'recharge_trench' in suggestions:
        cost += region_costs['recharge_trench_per_meter_inr'] * TRENCH_LENGTH_M

    if 'recharge_shaft' in suggestions:
        cost += region_costs['recharge_shaft_base_inr']

    if 'modular_tank' in suggestions:
        cost += region_costs['modular_tank_per_m3_inr'] * tank_volume_m3(harvest_m3)

    # Always include filtration unit and conveyance
    cost += region_costs['filtration_unit_base_inr']
    cost += region_costs['conveyance_per_meter_inr'] * CONVEYANCE_LENGTH_M

    return int(round(cost))


def feasibility_verdict(suggestions):
    # NOTE: 'Conditional' is unreachable while suggest_structures() always
    # falls back to modular_tank; kept until the intended rule is decided.
    return 'Yes' if suggestions else 'Conditional'


def run_assessment(inp, rainfall, depth_m, region_costs):
    """
    Combine validated input, resolved rainfall and groundwater depth

    Args:
        inp: AssessmentInput
        rainfall: RainfallResult
        depth_m: Depth to water table in metres
        region_costs: One entry of the region cost table

    Returns:
        dict: AssessmentResult
    """
    harvest_m3 = compute_harvest_volume_m3(
        inp.roof_area_m2, inp.roof_type, inp.collection_efficiency, rainfall.annual_mm)
    suggestions = suggest_structures(depth_m, inp.open_space_m2)

    return {
        'feasibility': feasibility_verdict(suggestions),
        'suggested_structures': suggestions,
        'sizing': size_structures(suggestions, harvest_m3),
        'volumes': {
            'annual_harvest_m3': harvest_m3,
            'monthly_rainfall_mm': list(rainfall.monthly_mm),
        },
        'cost_estimate_inr': estimate_cost_inr(suggestions, harvest_m3, region_costs),
    }
