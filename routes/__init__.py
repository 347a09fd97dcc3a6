"""
Route handlers for the RTRWH assessment application
"""
import logging

from routes import core
from routes.assessment import assessment_bp
from routes.context import context_bp

logger = logging.getLogger(__name__)


def register_all_routes(app):
    """
    Register all application routes with the Flask app

    Args:
        app: Flask application instance
    """
    core.register_routes(app)
    app.register_blueprint(context_bp)
    app.register_blueprint(assessment_bp)
    logger.info("All routes registered successfully")
