"""
Static reference tables: region costs, aquifer polygons, groundwater samples

Everything is loaded once at startup into an immutable ReferenceData object
that is handed to the resolvers. Nothing here is mutated after load.
"""
import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from shapely.geometry import shape

from services.errors import ReferenceDataError
from services.validation import (
    validate_groundwater_depth,
    validate_latitude,
    validate_longitude,
)

logger = logging.getLogger(__name__)

CONTEXT_FILE = 'mock_context.json'
COST_TABLE_FILE = 'cost_table.json'
AQUIFERS_FILE = 'aquifers.geojson'
GROUNDWATER_FILE = 'groundwater_sample.csv'

COST_KEYS = (
    'recharge_pit_base_inr',
    'recharge_trench_per_meter_inr',
    'recharge_shaft_base_inr',
    'modular_tank_per_m3_inr',
    'filtration_unit_base_inr',
    'conveyance_per_meter_inr',
)

# Used when the data files are absent
BUILTIN_CONTEXT = {
    'rainfall_mm_year': 800,
    'groundwater_depth_m': 12,
    'aquifer': {'name': 'Indo-Gangetic Alluvium', 'type': 'Unconfined'},
    'runoff_coeff_default': 0.85,
    'admin': {'code': 'IN-DL', 'name': 'Delhi'},
}

BUILTIN_REGION_COSTS = {
    'recharge_pit_base_inr': 15000,
    'recharge_trench_per_meter_inr': 2500,
    'recharge_shaft_base_inr': 45000,
    'modular_tank_per_m3_inr': 6000,
    'filtration_unit_base_inr': 8000,
    'conveyance_per_meter_inr': 300,
}


@dataclass(frozen=True)
class GroundwaterSample:
    lat: float
    lon: float
    depth_m: float
    aquifer_name: str


@dataclass(frozen=True)
class AquiferPolygon:
    name: str
    type: str
    ring: Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class ContextDefaults:
    rainfall_mm_year: float
    groundwater_depth_m: float
    aquifer: Mapping[str, str]
    runoff_coeff_default: float
    admin: Mapping[str, str]

    @property
    def admin_code(self):
        return self.admin.get('code', 'default')


@dataclass(frozen=True)
class ReferenceData:
    defaults: ContextDefaults
    cost_table: Mapping[str, Mapping[str, float]]
    aquifer_polygons: Tuple[AquiferPolygon, ...] = field(default_factory=tuple)
    groundwater_samples: Tuple[GroundwaterSample, ...] = field(default_factory=tuple)


def _read_json(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def build_context_defaults(raw):
    """Turn a decoded context mapping into ContextDefaults"""
    try:
        aquifer = raw['aquifer']
        admin = raw.get('admin') or {'code': 'default', 'name': 'Unknown'}
        return ContextDefaults(
            rainfall_mm_year=float(raw['rainfall_mm_year']),
            groundwater_depth_m=float(raw['groundwater_depth_m']),
            aquifer=MappingProxyType({'name': str(aquifer['name']), 'type': str(aquifer['type'])}),
            runoff_coeff_default=float(raw.get('runoff_coeff_default', 0.85)),
            admin=MappingProxyType(dict(admin)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ReferenceDataError(f"Malformed context defaults: {e}") from e


def load_context_defaults(path):
    path = Path(path)
    if not path.exists():
        logger.warning(f"Context defaults file not found: {path}, using built-in defaults")
        return build_context_defaults(BUILTIN_CONTEXT)
    try:
        return build_context_defaults(_read_json(path))
    except (OSError, ValueError, ReferenceDataError) as e:
        logger.warning(f"Unusable context defaults in {path}, using built-in defaults: {e}")
        return build_context_defaults(BUILTIN_CONTEXT)


def build_cost_table(raw):
    """
    Freeze a region cost table

    Each region must carry every cost key; a 'default' region is mandatory
    because it is the fallback for unknown codes.
    """
    if not isinstance(raw, dict) or 'default' not in raw:
        raise ReferenceDataError("Cost table must be an object with a 'default' entry")

    table = {}
    for code, costs in raw.items():
        missing = [k for k in COST_KEYS if not isinstance(costs, dict) or k not in costs]
        if missing:
            raise ReferenceDataError(f"Cost table entry '{code}' missing keys: {', '.join(missing)}")
        table[code] = MappingProxyType({k: float(costs[k]) for k in COST_KEYS})
    return MappingProxyType(table)


def load_cost_table(path):
    path = Path(path)
    if not path.exists():
        logger.warning(f"Cost table not found: {path}, using built-in default costs")
        return build_cost_table({'default': BUILTIN_REGION_COSTS})
    try:
        return build_cost_table(_read_json(path))
    except (OSError, ValueError, ReferenceDataError) as e:
        logger.warning(f"Unusable cost table in {path}, using built-in default costs: {e}")
        return build_cost_table({'default': BUILTIN_REGION_COSTS})


def build_aquifer_polygons(raw):
    """Parse a GeoJSON FeatureCollection into AquiferPolygon rings, in listed order"""
    polygons = []
    for feature in raw.get('features', []):
        props = feature.get('properties') or {}
        try:
            geom = shape(feature['geometry'])
        except Exception as e:
            logger.warning(f"Skipping aquifer feature {props.get('name')!r}: {e}")
            continue

        if geom.geom_type != 'Polygon':
            logger.debug(f"Skipping non-polygon aquifer feature {props.get('name')!r} ({geom.geom_type})")
            continue

        ring = tuple((float(c[0]), float(c[1])) for c in geom.exterior.coords)
        polygons.append(AquiferPolygon(
            name=str(props.get('name', 'Unknown')),
            type=str(props.get('type', 'Unknown')),
            ring=ring,
        ))
    return tuple(polygons)


def load_aquifer_polygons(path):
    path = Path(path)
    try:
        polygons = build_aquifer_polygons(_read_json(path))
    except (OSError, ValueError, AttributeError) as e:
        logger.warning(f"Failed to load aquifer polygons from {path}: {e}")
        return tuple()
    logger.info(f"Loaded {len(polygons)} aquifer polygons")
    return polygons


def parse_groundwater_rows(rows):
    """
    Convert CSV rows (dicts with lat, lon, depth_m, aquifer) into samples

    Rows with unparseable or out-of-range values are skipped with a warning.
    """
    samples = []
    for line_no, row in enumerate(rows, start=2):
        try:
            lat = float(row['lat'])
            lon = float(row['lon'])
            depth = float(row['depth_m'])
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Skipping malformed groundwater row {line_no}: {row}")
            continue

        checks = (validate_latitude(lat), validate_longitude(lon), validate_groundwater_depth(depth))
        errors = [c.error for c in checks if not c.is_valid]
        if errors:
            logger.warning(f"Skipping groundwater row {line_no}: {'; '.join(errors)}")
            continue

        samples.append(GroundwaterSample(
            lat=lat,
            lon=lon,
            depth_m=depth,
            aquifer_name=(row.get('aquifer') or '').strip(),
        ))
    return tuple(samples)


def load_groundwater_samples(path):
    """Load the sample CSV; unreadable or undecodable files degrade to an empty set"""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            samples = parse_groundwater_rows(csv.DictReader(f))
    except (OSError, ValueError, csv.Error) as e:
        logger.warning(f"Failed to load {path.name}, using fallback groundwater values: {e}")
        return tuple()

    if not samples:
        logger.warning(f"No usable groundwater samples in {path}, using fallback groundwater values")
    else:
        logger.info(f"Loaded {len(samples)} groundwater samples")
    return samples


def load_reference_data(data_dir: Optional[Path] = None) -> ReferenceData:
    """
    Load every reference table from a data directory

    Args:
        data_dir: Directory holding the reference files; defaults to DATA_DIR

    Returns:
        ReferenceData: Immutable bundle for injection into the services
    """
    if data_dir is None:
        from utils.config import DATA_DIR
        data_dir = DATA_DIR
    data_dir = Path(data_dir)

    logger.info(f"Loading reference data from {data_dir}")
    return ReferenceData(
        defaults=load_context_defaults(data_dir / CONTEXT_FILE),
        cost_table=load_cost_table(data_dir / COST_TABLE_FILE),
        aquifer_polygons=load_aquifer_polygons(data_dir / AQUIFERS_FILE),
        groundwater_samples=load_groundwater_samples(data_dir / GROUNDWATER_FILE),
    )
