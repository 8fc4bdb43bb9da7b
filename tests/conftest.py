"""Test configuration and fixtures for the portfolio app."""

import os
import sys

import pytest

# Make the flat top-level modules importable without installation
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from extensions import db
from models import User
from routers import Context
from utils.decorators import Session
from utils.security import hash_password

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'correct-horse-battery'


# ==============================================================================
# Application fixtures
# ==============================================================================

@pytest.fixture
def app():
    """Fresh app on an in-memory database."""
    app = create_app('testing')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    """Application context for calling procedures directly."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(email=ADMIN_EMAIL, password=ADMIN_PASSWORD, role='admin', name='Admin'):
    user = User(name=name, email=email, role=role, password_hash=hash_password(password))
    db.session.add(user)
    db.session.commit()
    return user


# ==============================================================================
# Procedure contexts
# ==============================================================================

@pytest.fixture
def admin_user(app_ctx):
    return make_user()


@pytest.fixture
def admin_ctx(admin_user):
    """Context of a signed-in admin."""
    return Context(Session.from_user(admin_user))


@pytest.fixture
def viewer_ctx(app_ctx):
    """Context of a signed-in viewer (no stored row needed)."""
    return Context(Session('viewer-id', 'viewer@example.com', 'viewer', name='Viewer'))


@pytest.fixture
def anon_ctx(app_ctx):
    """Context without a session."""
    return Context(None)


# ==============================================================================
# HTTP fixtures
# ==============================================================================

@pytest.fixture
def admin_account(app):
    """Stored admin row created outside of any request."""
    with app.app_context():
        user = make_user()
        return {'id': user.id, 'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD}


@pytest.fixture
def auth_client(client, admin_account):
    """Test client logged in as the admin."""
    response = client.post('/admin/login', data={
        'email': admin_account['email'],
        'password': admin_account['password'],
    })
    assert response.status_code == 302
    return client


# ==============================================================================
# Sample inputs
# ==============================================================================

@pytest.fixture
def experience_input():
    return {
        'company': 'Acme',
        'companyUrl': 'https://acme.example.com',
        'role': 'Backend developer',
        'startDate': '2021-09-01',
        'endDate': '2023-06-30',
        'location': 'Lyon',
        'summaryMd': 'Built **things**.',
        'type': 'INTERNSHIP',
    }


@pytest.fixture
def project_input():
    return {'name': 'Portfolio', 'previewText': 'This site', 'url': 'https://example.com'}
