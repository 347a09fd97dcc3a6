"""
Core routes for the application (API metadata, health check, boundary self-test)
"""
import logging
import os
import time
from datetime import datetime, timezone

from services.validation import BOUNDARIES, run_boundary_checks
from utils.cors import jsonify_with_cors

logger = logging.getLogger(__name__)

API_VERSION = '1.0.0'

ENDPOINTS = [
    'GET /',
    'GET /health',
    'GET /test/boundaries',
    'GET /context?lat=..&lon=..',
    'GET /api/rainfall?lat=..&lon=..',
    'GET /api/groundwater?lat=..&lon=..',
    'GET /api/rainfall/nasa-hourly?...',
    'POST /assess',
]


def register_routes(app):
    """
    Register core application routes

    Args:
        app: Flask application instance
    """
    @app.route('/')
    def index():
        return jsonify_with_cors({
            'name': 'RTRWH & AR API',
            'version': API_VERSION,
            'environment': os.environ.get('FLASK_ENV', 'development'),
            'time': datetime.now(timezone.utc).isoformat(),
            'endpoints': ENDPOINTS
        }), 200

    @app.route('/health')
    def health_check():
        """Simple health check endpoint that doesn't depend on external services"""
        return jsonify_with_cors({
            'status': 'ok',
            'timestamp': time.time()
        }), 200

    @app.route('/test/boundaries')
    def test_boundaries():
        results = run_boundary_checks()
        failed = [r['case'] for r in results if not r['passed']]
        if failed:
            logger.error(f"Boundary checks failed: {failed}")
        return jsonify_with_cors({
            'status': 'Boundary tests completed',
            'message': 'Check server logs for test results',
            'results': results,
            'boundaries': BOUNDARIES
        }), 200
