"""Tests for CV versions and their selection join tables."""

from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from extensions import db
from models import (
    AuditLog, CvVersion, CvVersionEducation, CvVersionExperience, CvVersionProject,
    CvVersionSkill,
)
from routers import app_router
from routers import cv as cv_module
from utils.errors import ApiError

cvs = app_router['cv']


@pytest.fixture
def records(admin_ctx):
    """Two rows of every selectable entity."""
    def create(entity, payloads):
        return [app_router[entity].call('create', admin_ctx, payload)['id'] for payload in payloads]

    return {
        'experience': create('experience', [
            {'company': 'Acme', 'role': 'Dev', 'startDate': '2019-01-01'},
            {'company': 'Globex', 'role': 'Lead', 'startDate': '2022-01-01'},
        ]),
        'project': create('project', [{'name': 'One'}, {'name': 'Two'}]),
        'skill': create('skill', [{'name': 'Python'}, {'name': 'SQL'}]),
        'education': create('education', [
            {'school': 'INSA', 'degree': 'MSc', 'startDate': '2016-09-01'},
            {'school': 'IUT', 'degree': 'DUT', 'startDate': '2014-09-01'},
        ]),
    }


@pytest.fixture
def cv_input(records):
    return {
        'title': 'Backend CV',
        'slug': 'backend',
        'sectionOrder': 'experience,project,skill,education',
        'experiencesIds': [records['experience'][0]],
        'projectsIds': [records['project'][0]],
        'skillsIds': [records['skill'][0]],
        'educationsIds': [records['education'][0]],
    }


def join_counts():
    return tuple(db.session.query(model).count() for model in (
        CvVersionExperience, CvVersionProject, CvVersionSkill, CvVersionEducation))


def api_error(name, ctx, raw_input=None):
    with pytest.raises(ApiError) as exc_info:
        cvs.call(name, ctx, raw_input)
    return exc_info.value


class TestCreate:
    """Tests for cv.create."""

    def test_one_id_per_category_yields_one_join_row_each(self, admin_ctx, cv_input):
        created = cvs.call('create', admin_ctx, cv_input)

        assert join_counts() == (1, 1, 1, 1)
        assert created['counts'] == {'experiences': 1, 'projects': 1, 'skills': 1, 'educations': 1}
        assert created['experiencesIds'] == cv_input['experiencesIds']
        assert created['theme'] == 'modern'

    def test_create_is_audited(self, admin_ctx, cv_input):
        created = cvs.call('create', admin_ctx, cv_input)

        entry = AuditLog.query.filter_by(target_id=created['id']).one()
        assert entry.target_type.value == 'CV'

    def test_duplicate_slug_is_conflict(self, admin_ctx, cv_input):
        cvs.call('create', admin_ctx, cv_input)

        assert api_error('create', admin_ctx, cv_input).code == 'CONFLICT'
        assert db.session.query(CvVersion).count() == 1

    def test_unknown_reference_is_bad_request(self, admin_ctx, cv_input):
        cv_input['skillsIds'] = ['missing']

        error = api_error('create', admin_ctx, cv_input)

        assert error.code == 'BAD_REQUEST'
        assert error.issues[0]['field'] == 'skillsIds'
        assert join_counts() == (0, 0, 0, 0)

    def test_viewer_cannot_create(self, viewer_ctx):
        assert api_error('create', viewer_ctx, {}).code == 'FORBIDDEN'


class TestUpdate:
    """Tests for the wholesale join replacement."""

    def test_replacing_experience_leaves_only_the_new_one(self, admin_ctx, cv_input, records):
        created = cvs.call('create', admin_ctx, cv_input)
        e1, e2 = records['experience']

        updated = cvs.call('update', admin_ctx, dict(cv_input, id=created['id'], experiencesIds=[e2]))

        rows = CvVersionExperience.query.filter_by(cv_id=created['id']).all()
        assert [row.experience_id for row in rows] == [e2]
        assert updated['experiencesIds'] == [e2]
        assert e1 not in updated['experiencesIds']

    def test_update_changes_scalars_and_grows_sets(self, admin_ctx, cv_input, records):
        created = cvs.call('create', admin_ctx, cv_input)

        updated = cvs.call('update', admin_ctx, dict(
            cv_input, id=created['id'], title='Data CV', slug='data',
            skillsIds=records['skill']))

        assert updated['title'] == 'Data CV'
        assert updated['slug'] == 'data'
        assert updated['counts']['skills'] == 2
        assert join_counts() == (1, 1, 2, 1)

    def test_failed_update_keeps_previous_selection(self, admin_ctx, cv_input):
        created = cvs.call('create', admin_ctx, cv_input)

        error = api_error('update', admin_ctx, dict(
            cv_input, id=created['id'], projectsIds=['missing']))

        assert error.code == 'BAD_REQUEST'
        assert join_counts() == (1, 1, 1, 1)

    def test_storage_failure_mid_update_rolls_back_everything(self, admin_ctx, cv_input,
                                                             records, monkeypatch):
        created = cvs.call('create', admin_ctx, cv_input)

        def broken_insert(cv_id, data):
            raise OperationalError('INSERT INTO cv_version_experiences', {}, Exception('disk I/O error'))

        # Join sets are already cleared when the insert fails
        monkeypatch.setattr(cv_module, 'add_selections', broken_insert)
        error = api_error('update', admin_ctx, dict(
            cv_input, id=created['id'], title='Changed', experiencesIds=[records['experience'][1]]))

        assert error.code == 'INTERNAL_SERVER_ERROR'
        assert join_counts() == (1, 1, 1, 1)
        stored = cvs.call('getById', admin_ctx, {'id': created['id']})
        assert stored['title'] == 'Backend CV'
        assert stored['experiencesIds'] == cv_input['experiencesIds']

    def test_slug_taken_by_another_cv_is_conflict(self, admin_ctx, cv_input):
        cvs.call('create', admin_ctx, cv_input)
        other = cvs.call('create', admin_ctx, dict(cv_input, slug='other'))

        error = api_error('update', admin_ctx, dict(cv_input, id=other['id']))
        assert error.code == 'CONFLICT'

    def test_update_unknown_cv_is_not_found(self, admin_ctx, cv_input):
        assert api_error('update', admin_ctx, dict(cv_input, id='missing')).code == 'NOT_FOUND'


class TestReadAndDelete:
    """Tests for cv queries and cv.delete."""

    def test_get_by_slug(self, admin_ctx, anon_ctx, cv_input):
        created = cvs.call('create', admin_ctx, cv_input)

        assert cvs.call('getBySlug', anon_ctx, {'slug': 'backend'})['id'] == created['id']
        assert api_error('getBySlug', anon_ctx, {'slug': 'nope'}).code == 'NOT_FOUND'

    def test_get_all_lists_newest_first(self, admin_ctx, anon_ctx, cv_input):
        oldest = cvs.call('create', admin_ctx, cv_input)
        db.session.get(CvVersion, oldest['id']).created_at = datetime(2020, 1, 1)
        db.session.commit()
        newest = cvs.call('create', admin_ctx, dict(cv_input, slug='newest'))

        listed = cvs.call('getAll', anon_ctx)
        assert [row['id'] for row in listed] == [newest['id'], oldest['id']]

    def test_delete_removes_join_rows(self, admin_ctx, cv_input):
        created = cvs.call('create', admin_ctx, cv_input)

        deleted = cvs.call('delete', admin_ctx, {'id': created['id']})

        assert deleted['slug'] == 'backend'
        assert db.session.query(CvVersion).count() == 0
        assert join_counts() == (0, 0, 0, 0)

    def test_deleting_a_selected_experience_drops_its_join_row(self, admin_ctx, cv_input, records):
        created = cvs.call('create', admin_ctx, cv_input)

        app_router['experience'].call('delete', admin_ctx, {'id': records['experience'][0]})

        assert cvs.call('getById', admin_ctx, {'id': created['id']})['counts']['experiences'] == 0

    def test_delete_unknown_cv_is_not_found(self, admin_ctx):
        assert api_error('delete', admin_ctx, {'id': 'missing'}).code == 'NOT_FOUND'
