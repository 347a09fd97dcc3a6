"""
Assessment API Routes
Provides the rooftop rainwater harvesting feasibility endpoint
"""
import logging

from flask import Blueprint, current_app, request

from services.errors import AssessmentError, InputValidationError
from utils.cors import jsonify_with_cors

logger = logging.getLogger(__name__)

assessment_bp = Blueprint('assessment', __name__)


@assessment_bp.route('/assess', methods=['POST'])
def assess():
    """
    Assess rooftop rainwater harvesting feasibility

    Expected JSON payload:
    {
        "location": {"lat": 28.6139, "lon": 77.209},
        "roof_area_m2": 120,
        "roof_type": "concrete",           // OPTIONAL - concrete|tile|metal|asbestos
        "open_space_m2": 20,               // OPTIONAL - default 0
        "occupiers": 4,                    // OPTIONAL - default 4
        "collection_efficiency": 0.9       // OPTIONAL - default 0.9
    }

    Returns:
    {
        "feasibility": "Yes",
        "suggested_structures": ["recharge_pit", "recharge_trench", "recharge_shaft"],
        "sizing": {"recharge_pit": {"diameter_m": 1.2, "depth_m": 2.5}, ...},
        "volumes": {"annual_harvest_m3": 77.76, "monthly_rainfall_mm": [...]},
        "cost_estimate_inr": 97300
    }
    """
    data = request.get_json(silent=True)
    if data is None:
        return jsonify_with_cors({'error': 'No JSON data provided'}), 400

    try:
        result = current_app.config['RTRWH_SERVICE'].assess(data)
    except InputValidationError as e:
        return jsonify_with_cors({
            'error': 'Invalid input',
            'details': str(e),
            'errors': e.errors
        }), 400
    except AssessmentError as e:
        return jsonify_with_cors({'error': str(e)}), 500
    except Exception as e:
        logger.error(f"Error in assessment: {str(e)}", exc_info=True)
        return jsonify_with_cors({'error': 'Assessment failed'}), 500

    return jsonify_with_cors(result), 200
