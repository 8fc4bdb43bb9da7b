"""
API Blueprint - Remote procedure transport
Handles: GET /api/<entity>.<procedure> (queries), POST (mutations)
"""

from flask import Blueprint

api_bp = Blueprint('api', __name__, url_prefix='/api')

from . import routes
