"""
Utils Package - Centralized utility modules initialization
"""

from .accesscontrol import can, format_role, normalize_role, GLOBAL_ROLES
from .decorators import login_required, admin_required, get_current_session, Session
from .errors import ApiError, ERROR_STATUS
from .security import (
    hash_password,
    verify_password,
    log_audit_event,
    get_client_ip,
    check_rate_limit
)
from .cv_layout import parse_section_order, compose_cv

__all__ = [
    # Access control
    'can',
    'format_role',
    'normalize_role',
    'GLOBAL_ROLES',

    # Decorators
    'login_required',
    'admin_required',
    'get_current_session',
    'Session',

    # Errors
    'ApiError',
    'ERROR_STATUS',

    # Security
    'hash_password',
    'verify_password',
    'log_audit_event',
    'get_client_ip',
    'check_rate_limit',

    # CV layout
    'parse_section_order',
    'compose_cv'
]
