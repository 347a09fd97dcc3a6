"""
Configuration settings for the RTRWH assessment backend
"""
import os
import logging
from pathlib import Path

# Configure logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO),
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.environ.get('DATA_DIR', BASE_DIR / 'data'))
logger.info(f"Reference data directory set to: {DATA_DIR.absolute()}")

# Upstream weather providers
OPEN_METEO_ARCHIVE_URL = os.environ.get(
    'OPEN_METEO_ARCHIVE_URL', 'https://archive-api.open-meteo.com/v1/archive')
NASA_POWER_HOURLY_URL = os.environ.get(
    'NASA_POWER_HOURLY_URL', 'https://power.larc.nasa.gov/api/temporal/hourly/point')
USER_AGENT = os.environ.get('USER_AGENT', 'rtrwh-app/1.0')

# Per-stage network timeout in seconds
API_TIMEOUT = float(os.environ.get('API_TIMEOUT', 15))

# CORS configuration
CORS_ORIGIN = os.environ.get('CORS_ORIGIN', '*')
logger.info(f"CORS origin set to: {CORS_ORIGIN}")

# Server
HOST = os.environ.get('HOST', '0.0.0.0')
PORT = int(os.environ.get('PORT', 4000))
DEBUG = os.environ.get('DEBUG', 'false').lower() == 'true'
logger.info(f"Server configured for {HOST}:{PORT} (debug={DEBUG})")
