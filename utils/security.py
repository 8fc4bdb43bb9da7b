"""
Security Module - Password hashing, audit trail, IP tracking and rate limiting
"""

import time
from flask import request, current_app
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db


# Rate Limiting
RATE_LIMIT_REQUESTS = {}  # {ip: [(timestamp, endpoint), ...]}


def hash_password(password):
    """Hash a plaintext password for storage"""
    return generate_password_hash(password)


def verify_password(password, password_hash):
    """Verify password against hash"""
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def log_audit_event(action, target_type, target_id, author_id=None, meta=None):
    """
    Append an AuditLog row to the current transaction

    The caller commits, so the audit entry lands together with the change
    it records (or not at all).
    """
    from models import AuditLog, AuditAction, AuditTargetType

    entry = AuditLog(
        action=AuditAction(action),
        target_type=AuditTargetType(target_type),
        target_id=target_id,
        author_id=author_id,
        meta=meta or {}
    )
    db.session.add(entry)
    current_app.logger.info(
        f"Audit: {entry.action.value} {entry.target_type.value} {target_id} by {author_id or 'system'}")
    return entry


def get_client_ip():
    """Get real client IP address"""
    forwarded = request.environ.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.environ.get('REMOTE_ADDR', 'unknown')


def check_rate_limit(endpoint='login'):
    """Check if IP is within rate limit"""
    max_requests = current_app.config.get('LOGIN_RATE_LIMIT', 10)
    window = current_app.config.get('LOGIN_RATE_WINDOW', 60)
    client_ip = get_client_ip()
    current_time = time.time()

    # Clean old requests outside the window, forgetting idle IPs
    for ip in list(RATE_LIMIT_REQUESTS):
        recent = [(ts, ep) for ts, ep in RATE_LIMIT_REQUESTS[ip] if current_time - ts < window]
        if recent:
            RATE_LIMIT_REQUESTS[ip] = recent
        else:
            del RATE_LIMIT_REQUESTS[ip]

    # Check if limit exceeded
    endpoint_requests = [
        ep for ts, ep in RATE_LIMIT_REQUESTS.get(client_ip, []) if ep == endpoint
    ]
    if len(endpoint_requests) >= max_requests:
        return False

    # Add current request
    RATE_LIMIT_REQUESTS.setdefault(client_ip, []).append((current_time, endpoint))
    return True


__all__ = [
    'hash_password',
    'verify_password',
    'log_audit_event',
    'get_client_ip',
    'check_rate_limit',
]
