"""
CORS utility functions to simplify adding CORS headers to Flask responses
"""
from flask import jsonify, request

from utils.config import CORS_ORIGIN


def parse_cors_origins(cors_origin):
    """'*' (or anything containing it) allows all; otherwise a comma-separated list"""
    if cors_origin == '*' or '*' in cors_origin:
        return '*'
    return [origin.strip() for origin in cors_origin.split(',') if origin.strip()]


def add_cors_headers(response, cors_origin=CORS_ORIGIN):
    """
    Add CORS headers to a Flask response object.

    Args:
        response: Flask Response object from jsonify() or make_response()
        cors_origin: Configured origin string

    Returns:
        Response object with CORS headers added
    """
    origins = parse_cors_origins(cors_origin)
    if origins == '*':
        response.headers['Access-Control-Allow-Origin'] = '*'
    else:
        request_origin = request.headers.get('Origin')
        if request_origin and request_origin in origins:
            response.headers['Access-Control-Allow-Origin'] = request_origin
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization, X-Requested-With'
    response.headers['Access-Control-Allow-Credentials'] = 'true'
    return response


def jsonify_with_cors(*args, **kwargs):
    """
    Create a JSON response with CORS headers already added.

    Usage:
        return jsonify_with_cors({'status': 'success', 'data': ...})
    """
    response = jsonify(*args, **kwargs)
    return add_cors_headers(response)
