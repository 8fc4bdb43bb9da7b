"""Tests for login, admin and public pages."""

from extensions import db
from models import User
from routers import Context, app_router
from utils.decorators import Session
from utils.security import RATE_LIMIT_REQUESTS, hash_password


def seed_content(app):
    """Store a profile, a project and a CV through the routers."""
    with app.app_context():
        ctx = Context(Session('seed', 'seed@example.com', 'admin'))
        app_router['profile'].call('upsert', ctx, {'fullName': 'Jane Doe', 'jobTitle': 'Engineer'})
        ids = {entity: app_router[entity].call('create', ctx, payload)['id'] for entity, payload in [
            ('experience', {'company': 'Acme', 'role': 'Dev', 'startDate': '2020-01-01'}),
            ('project', {'name': 'Portfolio site', 'previewText': 'This site'}),
            ('skill', {'name': 'Python'}),
            ('education', {'school': 'INSA', 'degree': 'MSc'}),
        ]}
        app_router['cv'].call('create', ctx, {
            'title': 'Backend CV', 'slug': 'backend', 'sectionOrder': 'project,experience',
            'experiencesIds': [ids['experience']], 'projectsIds': [ids['project']],
            'skillsIds': [ids['skill']], 'educationsIds': [ids['education']],
        })
        return ids


class TestAuth:
    """Tests for /admin/login and /admin/logout."""

    def test_login_page_renders(self, client):
        assert client.get('/admin/login').status_code == 200

    def test_valid_login_redirects_to_dashboard(self, client, admin_account):
        response = client.post('/admin/login', data={
            'email': admin_account['email'], 'password': admin_account['password']})

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/admin/')

    def test_wrong_password_is_rejected(self, client, admin_account):
        response = client.post('/admin/login', data={
            'email': admin_account['email'], 'password': 'wrong-password'})
        assert response.status_code == 401

    def test_json_login(self, client, admin_account):
        response = client.post('/admin/login', json={
            'email': admin_account['email'].upper(), 'password': admin_account['password']})

        assert response.status_code == 200
        assert response.get_json()['result']['data']['user']['email'] == admin_account['email']

    def test_login_is_rate_limited(self, app, client, admin_account, monkeypatch):
        monkeypatch.setitem(app.config, 'LOGIN_RATE_LIMIT', 2)
        RATE_LIMIT_REQUESTS.clear()

        for _ in range(2):
            client.post('/admin/login', data={'email': 'x@example.com', 'password': 'nope'})
        response = client.post('/admin/login', data={
            'email': admin_account['email'], 'password': admin_account['password']})

        assert response.status_code == 429
        RATE_LIMIT_REQUESTS.clear()

    def test_logout_ends_session(self, auth_client):
        auth_client.get('/admin/logout')

        response = auth_client.get('/admin/')
        assert response.status_code == 302
        assert '/admin/login' in response.headers['Location']


class TestAdminPages:
    """Tests for the dashboard."""

    def test_dashboard_requires_login(self, client):
        assert client.get('/admin/').status_code == 302

    def test_dashboard_shows_counts(self, auth_client):
        response = auth_client.get('/admin/')

        assert response.status_code == 200
        assert b'Admin' in response.data

    def test_users_page_for_admin(self, auth_client, admin_account):
        response = auth_client.get('/admin/users')

        assert response.status_code == 200
        assert admin_account['email'].encode() in response.data

    def test_users_page_forbidden_for_viewer(self, app, client):
        with app.app_context():
            db.session.add(User(name='Viewer', email='viewer@example.com', role='viewer',
                                password_hash=hash_password('viewer-password')))
            db.session.commit()
        client.post('/admin/login', data={'email': 'viewer@example.com', 'password': 'viewer-password'})

        assert client.get('/admin/users').status_code == 403


class TestPublicPages:
    """Tests for the public site."""

    def test_home_renders_profile(self, app, client):
        seed_content(app)
        response = client.get('/')

        assert response.status_code == 200
        assert b'Jane Doe' in response.data
        assert b'Portfolio site' in response.data

    def test_experience_type_is_labelled(self, app, client):
        with app.app_context():
            ctx = Context(Session('seed', 'seed@example.com', 'admin'))
            app_router['experience'].call('create', ctx, {
                'company': 'Acme', 'role': 'Intern', 'type': 'INTERNSHIP'})

        assert b'(Internship)' in client.get('/').data

    def test_empty_home_renders(self, client):
        assert client.get('/').status_code == 200

    def test_project_pages(self, app, client):
        ids = seed_content(app)

        assert client.get('/projects').status_code == 200
        assert b'This site' in client.get(f"/projects/{ids['project']}").data
        assert client.get('/projects/missing').status_code == 404

    def test_cv_pages(self, app, client):
        seed_content(app)

        assert b'Backend CV' in client.get('/cv').data
        page = client.get('/cv/backend')
        assert page.status_code == 200
        assert page.data.index(b'id="project"') < page.data.index(b'id="experience"')
        assert b'id="skill"' not in page.data
        assert client.get('/cv/unknown').status_code == 404

    def test_health(self, client):
        assert client.get('/health').get_json()['status'] == 'ok'

    def test_security_headers(self, client):
        assert client.get('/health').headers['X-Content-Type-Options'] == 'nosniff'
