"""Tests for the static role/resource grant table."""

import pytest

from utils.accesscontrol import (
    GLOBAL_ROLES, Role, can, format_role, is_granted, normalize_role, resolve_role,
)
from utils.decorators import Session

PROTECTED_RESOURCES = ['user', 'education', 'project', 'skill', 'experience', 'profile']


def session(role):
    return Session('id-1', 'someone@example.com', role)


class TestGrants:
    """Tests for create/update/delete-any decisions."""

    @pytest.mark.parametrize('resource', PROTECTED_RESOURCES)
    @pytest.mark.parametrize('who', [None, session('viewer'), session('editor')])
    def test_non_admin_cannot_write(self, who, resource):
        query = can(who)
        assert not query.create_any(resource).granted
        assert not query.update_any(resource).granted
        assert not query.delete_any(resource).granted

    @pytest.mark.parametrize('resource', PROTECTED_RESOURCES + ['cv', 'link'])
    def test_admin_can_write(self, resource):
        query = can(session('admin'))
        assert query.create_any(resource).granted
        assert query.update_any(resource).granted
        assert query.delete_any(resource).granted

    @pytest.mark.parametrize('resource', ['public', 'cv', 'education', 'experience',
                                          'project', 'skill', 'profile', 'link'])
    def test_viewer_reads_public_resources(self, resource):
        assert can(None).read_any(resource).granted

    def test_viewer_cannot_read_users(self):
        assert not can(session('viewer')).read_any('user').granted

    def test_viewer_may_create_own_cv_only(self):
        query = can(session('viewer'))
        assert query.create_own('cv').granted
        assert not query.create_any('cv').granted

    def test_any_grant_covers_own(self):
        assert can(session('admin')).delete_own('user').granted

    def test_unknown_pairs_are_denied(self):
        assert not is_granted('admin', 'income', 'read', 'any')
        assert not is_granted('superuser', 'user', 'read', 'any')

    def test_permission_is_truthy_when_granted(self):
        assert can(session('admin')).read_any('user')
        assert not can(None).read_any('user')


class TestRoles:
    """Tests for role helpers."""

    def test_role_containing_admin_resolves_to_admin(self):
        assert resolve_role(session('super-admin')) == Role.ADMIN

    def test_missing_session_resolves_to_viewer(self):
        assert resolve_role(None) == Role.VIEWER

    def test_global_roles(self):
        assert GLOBAL_ROLES == ['viewer', 'admin']

    def test_format_role(self):
        assert format_role('aidant-particulier') == 'Aidant Particulier'
        assert format_role('admin') == 'Admin'

    def test_normalize_role(self):
        assert normalize_role('Aidant-Particulièr') == 'aidant-particulier'
