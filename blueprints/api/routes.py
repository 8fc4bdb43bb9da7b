"""
API Routes - Dispatches ``<entity>.<procedure>`` calls to the routers
"""

import json
from flask import request, jsonify, current_app
from werkzeug.exceptions import HTTPException
from extensions import db
from routers import Context, QUERY, MUTATION, resolve
from utils.decorators import get_current_session
from utils.errors import ApiError
from . import api_bp


def _read_input(procedure):
    """Queries carry ``?input=<json>``, mutations a JSON body"""
    if procedure.kind == QUERY:
        raw = request.args.get('input')
        if raw is None or raw == '':
            return None
        try:
            return json.loads(raw)
        except ValueError:
            raise ApiError('BAD_REQUEST', 'Query input is not valid JSON')

    if not request.get_data():
        return None
    payload = request.get_json(silent=True)
    if payload is None:
        raise ApiError('BAD_REQUEST', 'Request body is not valid JSON')
    return payload


def _error_response(error):
    return jsonify({'error': error.to_dict()}), error.status_code


@api_bp.route('/<path:path>', methods=['GET', 'POST'])
def call(path):
    """Run one procedure and wrap its result"""
    procedure = resolve(path)
    if procedure is None:
        return _error_response(ApiError('NOT_FOUND', f"No procedure {path}"))

    expected = 'GET' if procedure.kind == QUERY else 'POST'
    if request.method != expected:
        return _error_response(ApiError(
            'METHOD_NOT_SUPPORTED', f"{path} is a {procedure.kind}, use {expected}"))

    try:
        raw_input = _read_input(procedure)
        data = procedure(Context(get_current_session()), raw_input)
    except ApiError as e:
        if e.code == 'INTERNAL_SERVER_ERROR':
            current_app.logger.error(f"{path} failed: {e.message}")
        elif procedure.kind == MUTATION:
            current_app.logger.info(f"{path} rejected: {e.code} {e.message}")
        return _error_response(e)

    return jsonify({'result': {'data': data}})


@api_bp.errorhandler(Exception)
def unexpected_error(e):
    """Anything a procedure did not map itself becomes INTERNAL_SERVER_ERROR"""
    if isinstance(e, HTTPException):
        return e
    current_app.logger.error(f"Unhandled API error: {str(e)}")
    db.session.rollback()
    return _error_response(ApiError('INTERNAL_SERVER_ERROR', 'Internal server error'))
