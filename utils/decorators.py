"""
Decorators Module - Authentication and authorization decorators
"""

from functools import wraps
from flask import redirect, url_for, flash, abort
from flask_login import current_user
from .accesscontrol import can


class Session:
    """Authenticated caller as seen by procedures and the access policy"""

    __slots__ = ('user_id', 'name', 'email', 'role', 'image')

    def __init__(self, user_id, email, role, name=None, image=None):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.name = name
        self.image = image

    @classmethod
    def from_user(cls, user):
        return cls(user.id, user.email, user.role, name=user.name, image=user.image)

    def to_dict(self):
        return {
            'user': {
                'id': self.user_id,
                'name': self.name,
                'email': self.email,
                'role': self.role,
                'image': self.image,
            }
        }

    def __repr__(self):
        return f"Session(user_id={self.user_id!r}, role={self.role!r})"


def get_current_session():
    """Session for the logged-in Flask-Login user, or None"""
    if current_user and current_user.is_authenticated:
        return Session.from_user(current_user)
    return None


def login_required(f):
    """Decorator to require a logged-in user on pages"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_current_session() is None:
            flash('Please login to access this page.', 'error')
            return redirect(url_for('auth.login'))
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator to require the admin role (read access on users)"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not can(get_current_session()).read_any('user').granted:
            abort(403)
        return f(*args, **kwargs)
    return decorated_function
