"""
Site context API Routes
Rainfall, groundwater and combined context lookups for a point
"""
import logging

from flask import Blueprint, current_app, request

from services.errors import InputValidationError, RainfallSourceError
from services.rainfall import fetch_nasa_hourly_raw
from utils.cors import jsonify_with_cors

logger = logging.getLogger(__name__)

context_bp = Blueprint('context', __name__)


def _service():
    return current_app.config['RTRWH_SERVICE']


def _coordinates():
    """lat/lon query parameters as floats, or None when missing or not numeric"""
    lat = request.args.get('lat', type=float)
    lon = request.args.get('lon', type=float)
    if lat is None or lon is None:
        return None
    return lat, lon


def _invalid_coordinates():
    return jsonify_with_cors({'error': 'Invalid coordinates - must be valid numbers'}), 400


def _rejected(e):
    return jsonify_with_cors({'error': 'Invalid input', 'details': str(e), 'errors': e.errors}), 400


@context_bp.route('/context', methods=['GET'])
def get_context():
    """
    Resolve rainfall, groundwater depth and aquifer for a point

    Query: ?lat=28.6139&lon=77.209

    Returns:
    {
        "location": {"lat": 28.6139, "lon": 77.209},
        "rainfall_mm_year": 774,
        "monthly_rainfall_mm": [...12 values...],
        "rainfall_data_period": "2023-2024",
        "rainfall_years_count": 2,
        "rainfall_source": "open_meteo_archive",
        "groundwater_depth_m": 10.0,
        "aquifer": {"name": "Yamuna Alluvium", "type": "Unconfined"},
        "runoff_coeff_default": 0.85,
        "admin": {"code": "IN-DL", "name": "Delhi"},
        "warnings": null
    }
    """
    coords = _coordinates()
    if coords is None:
        return _invalid_coordinates()
    try:
        return jsonify_with_cors(_service().resolve_context(*coords)), 200
    except InputValidationError as e:
        return _rejected(e)
    except Exception as e:
        logger.error(f"Error resolving context: {str(e)}", exc_info=True)
        return jsonify_with_cors({'error': 'Failed to resolve site context'}), 500


@context_bp.route('/api/rainfall', methods=['GET'])
def get_rainfall():
    coords = _coordinates()
    if coords is None:
        return _invalid_coordinates()
    try:
        return jsonify_with_cors(_service().get_rainfall(*coords).to_dict()), 200
    except InputValidationError as e:
        return _rejected(e)
    except Exception as e:
        logger.error(f"Error fetching rainfall: {str(e)}", exc_info=True)
        return jsonify_with_cors({'error': 'Failed to fetch rainfall'}), 500


@context_bp.route('/api/groundwater', methods=['GET'])
def get_groundwater():
    coords = _coordinates()
    if coords is None:
        return _invalid_coordinates()
    try:
        return jsonify_with_cors(_service().get_groundwater(*coords)), 200
    except InputValidationError as e:
        return _rejected(e)
    except Exception as e:
        logger.error(f"Error resolving groundwater: {str(e)}", exc_info=True)
        return jsonify_with_cors({'error': 'Failed to resolve groundwater'}), 500


@context_bp.route('/api/rainfall/nasa-hourly', methods=['GET'])
def nasa_hourly_proxy():
    """
    Explicit proxy to the NASA POWER hourly point API

    Required query params: start, end (YYYYMMDD), lat, lon
    Optional: parameters, community, units, format

    NASA's own status and JSON body are passed through; 502 only when the
    request itself fails.
    """
    q = request.args
    start, end, lat, lon = q.get('start'), q.get('end'), q.get('lat'), q.get('lon')
    if not start or not end or not lat or not lon:
        return jsonify_with_cors({'error': 'Missing required query params: start, end, lat, lon'}), 422

    try:
        status, data = fetch_nasa_hourly_raw(
            start, end, lat, lon,
            parameters=q.get('parameters', 'PRECTOT'),
            community=q.get('community', 'ag'),
            fmt=q.get('format', 'json'),
            units=q.get('units'),
        )
    except RainfallSourceError as e:
        logger.warning(f"NASA POWER proxy request failed: {e}")
        return jsonify_with_cors({'error': 'NASA POWER request failed', 'message': str(e)}), 502
    return jsonify_with_cors(data), status
