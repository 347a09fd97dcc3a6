"""
Main entry point for the RTRWH assessment backend
"""
import logging

from flask import Flask
from flask_cors import CORS

from routes import register_all_routes
from services.rtrwh import RtrwhService
from services.reference_data import load_reference_data
from utils.config import CORS_ORIGIN, DEBUG, HOST, PORT
from utils.cors import jsonify_with_cors, parse_cors_origins

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Build the Flask application

    Args:
        service: Optional RtrwhService; built from the data directory when omitted

    Returns:
        Flask application instance
    """
    app = Flask(__name__)

    cors_origins = parse_cors_origins(CORS_ORIGIN)
    logger.info(f"CORS configured with origins: {cors_origins}")
    CORS(app,
         supports_credentials=True,
         origins=cors_origins,
         allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
         methods=["GET", "POST", "OPTIONS"])

    if service is None:
        # Reference tables are loaded once and shared read-only by every request
        service = RtrwhService(load_reference_data())
    app.config['RTRWH_SERVICE'] = service

    register_all_routes(app)

    @app.errorhandler(404)
    def not_found(e):
        return jsonify_with_cors({'error': 'Not found'}), 404

    logger.debug("=== FLASK ROUTE MAP ===")
    for rule in app.url_map.iter_rules():
        logger.debug(f"Route: {rule.rule} | Methods: {rule.methods} | Endpoint: {rule.endpoint}")

    return app


if __name__ == '__main__':
    try:
        app = create_app()
        logger.info(f"Starting RTRWH API server on http://{HOST}:{PORT}")
        app.run(debug=DEBUG, host=HOST, port=PORT)
    except Exception as e:
        logger.error(f"Failed to start Flask server: {str(e)}")
        raise
