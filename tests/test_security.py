"""Tests for the login rate limiter."""

import time

from utils.security import RATE_LIMIT_REQUESTS, check_rate_limit


class TestRateLimit:
    """Tests for check_rate_limit."""

    def setup_method(self):
        RATE_LIMIT_REQUESTS.clear()

    def teardown_method(self):
        RATE_LIMIT_REQUESTS.clear()

    def test_limit_is_per_endpoint_and_ip(self, app):
        app.config['LOGIN_RATE_LIMIT'] = 2
        with app.test_request_context(environ_base={'REMOTE_ADDR': '10.0.0.1'}):
            assert check_rate_limit('login')
            assert check_rate_limit('login')
            assert not check_rate_limit('login')
            assert check_rate_limit('other')

    def test_idle_ips_are_forgotten(self, app):
        app.config['LOGIN_RATE_WINDOW'] = 60
        RATE_LIMIT_REQUESTS['10.0.0.9'] = [(time.time() - 3600, 'login')]

        with app.test_request_context(environ_base={'REMOTE_ADDR': '10.0.0.1'}):
            assert check_rate_limit('login')

        assert '10.0.0.9' not in RATE_LIMIT_REQUESTS
        assert list(RATE_LIMIT_REQUESTS) == ['10.0.0.1']

    def test_forwarded_for_header_wins(self, app):
        app.config['LOGIN_RATE_LIMIT'] = 1
        with app.test_request_context(headers={'X-Forwarded-For': '203.0.113.5, 10.0.0.1'}):
            assert check_rate_limit('login')
        assert '203.0.113.5' in RATE_LIMIT_REQUESTS
