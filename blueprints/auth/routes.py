"""
Auth Routes - Email and password sign in backed by Flask-Login
"""

from flask import render_template, redirect, url_for, request, flash, jsonify, current_app
from flask_login import login_user, logout_user, current_user
from sqlalchemy import func
from models import User
from utils.security import get_client_ip, check_rate_limit, verify_password
from . import auth_bp


def _credentials():
    if request.is_json:
        payload = request.get_json(silent=True) or {}
        return (payload.get('email') or '').strip().lower(), payload.get('password') or ''
    return (request.form.get('email') or '').strip().lower(), request.form.get('password') or ''


def _failed(message, status):
    if request.is_json:
        return jsonify({'error': {'code': 'UNAUTHORIZED' if status == 401 else 'TOO_MANY_REQUESTS',
                                  'message': message}}), status
    flash(message, 'error')
    return render_template('auth/login.html'), status


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login"""
    if request.method == 'GET':
        if current_user.is_authenticated:
            return redirect(url_for('dashboard.index'))
        return render_template('auth/login.html')

    client_ip = get_client_ip()
    if not check_rate_limit('login'):
        current_app.logger.warning(f"Login rate limit hit from {client_ip}")
        return _failed('Too many login attempts. Please try again later.', 429)

    email, password = _credentials()
    user = User.query.filter(func.lower(User.email) == email).first() if email else None
    if user is None or not verify_password(password, user.password_hash):
        current_app.logger.warning(f"Failed login for {email or '<empty>'} from {client_ip}")
        return _failed('Invalid credentials. Please try again.', 401)

    login_user(user)
    current_app.logger.info(f"User logged in: {user.email} from {client_ip}")

    if request.is_json:
        return jsonify({'result': {'data': {'user': user.to_dict()}}})
    flash(f'Welcome back, {user.name or user.email}!', 'success')
    return redirect(url_for('dashboard.index'))


@auth_bp.route('/logout')
def logout():
    """Logout current user"""
    if current_user.is_authenticated:
        current_app.logger.info(f"User logged out: {current_user.email}")
        logout_user()
        flash('Logged out successfully', 'success')
    return redirect(url_for('auth.login'))
