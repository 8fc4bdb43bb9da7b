"""
CV router - CV versions and their four selection join tables

A CV owns its join rows. Create inserts them after the CvVersion row; update
replaces every set wholesale (delete scoped rows, then insert the new ones);
both happen inside a single transaction so a failure leaves the previous
selection untouched.
"""

from flask import current_app
from sqlalchemy import delete

from extensions import db
from models import (
    CvVersion, CvVersionExperience, CvVersionProject, CvVersionSkill,
    CvVersionEducation, Experience, Project, Skill, Education,
    AuditAction, AuditTargetType
)
from schemas import CvInput, CvUpdate, IdInput, SlugInput, parse
from utils.errors import ApiError
from utils.security import log_audit_event
from .base import Router, get_or_404, require, transaction

cv_router = Router('cv')

# input field -> (join model, join column, referenced model)
SELECTIONS = {
    'experiences_ids': (CvVersionExperience, 'experience_id', Experience),
    'projects_ids': (CvVersionProject, 'project_id', Project),
    'skills_ids': (CvVersionSkill, 'skill_id', Skill),
    'educations_ids': (CvVersionEducation, 'education_id', Education),
}

_FIELD_ALIASES = {
    'experiences_ids': 'experiencesIds',
    'projects_ids': 'projectsIds',
    'skills_ids': 'skillsIds',
    'educations_ids': 'educationsIds',
}


def _check_references(data):
    """Every selected id must point at an existing row"""
    issues = []
    for field, (_, _, target) in SELECTIONS.items():
        ids = getattr(data, field)
        found = {row_id for (row_id,) in db.session.query(target.id).filter(target.id.in_(ids))}
        missing = [row_id for row_id in ids if row_id not in found]
        if missing:
            issues.append({
                'field': _FIELD_ALIASES[field],
                'message': f"Unknown id(s): {', '.join(missing)}",
            })
    if issues:
        raise ApiError('BAD_REQUEST', 'CV references unknown records', issues=issues)


def _check_slug_free(slug, cv_id=None):
    query = CvVersion.query.filter(CvVersion.slug == slug)
    if cv_id is not None:
        query = query.filter(CvVersion.id != cv_id)
    if query.first() is not None:
        raise ApiError('CONFLICT', f"A CV with slug '{slug}' already exists")


def _scalar_values(data):
    return {
        'title': data.title,
        'slug': data.slug,
        'theme': data.theme,
        'section_order': data.section_order,
    }


def add_selections(cv_id, data):
    """Bulk insert one join row per selected id; empty lists are skipped"""
    for field, (join_model, column, _) in SELECTIONS.items():
        ids = getattr(data, field)
        if not ids:
            continue
        db.session.add_all([join_model(cv_id=cv_id, **{column: row_id}) for row_id in ids])


def clear_selections(cv_id):
    """Delete all four join sets of a CV"""
    for join_model, _, _ in SELECTIONS.values():
        db.session.execute(delete(join_model).where(join_model.cv_id == cv_id))


def _load(cv_id):
    cv = db.session.get(CvVersion, cv_id, populate_existing=True)
    return cv.to_dict()


@cv_router.query('getAll')
def get_all(ctx, raw_input=None):
    cvs = CvVersion.query.order_by(CvVersion.created_at.desc()).all()
    return [cv.to_dict() for cv in cvs]


@cv_router.query('getById')
def get_by_id(ctx, raw_input):
    data = parse(IdInput, raw_input)
    return get_or_404(CvVersion, data.id, 'CV').to_dict()


@cv_router.query('getBySlug')
def get_by_slug(ctx, raw_input):
    data = parse(SlugInput, raw_input)
    cv = CvVersion.query.filter_by(slug=data.slug).first()
    if cv is None:
        raise ApiError('NOT_FOUND', 'CV not found')
    return cv.to_dict()


@cv_router.mutation('create')
def create_cv(ctx, raw_input):
    require(ctx.can.create_any('cv'), 'You are not authorized to create CV records.')
    data = parse(CvInput, raw_input)
    _check_slug_free(data.slug)
    _check_references(data)

    with transaction('CV'):
        cv = CvVersion(**_scalar_values(data))
        db.session.add(cv)
        db.session.flush()
        add_selections(cv.id, data)
        log_audit_event(AuditAction.CREATE, AuditTargetType.CV, cv.id,
                        author_id=ctx.user_id, meta={'slug': data.slug})

    current_app.logger.info(f"Created CV {cv.id} ({data.slug})")
    return _load(cv.id)


@cv_router.mutation('update')
def update_cv(ctx, raw_input):
    require(ctx.can.update_any('cv'), 'You are not authorized to update CV records.')
    data = parse(CvUpdate, raw_input)
    get_or_404(CvVersion, data.id, 'CV')
    _check_slug_free(data.slug, cv_id=data.id)
    _check_references(data)

    with transaction('CV'):
        cv = get_or_404(CvVersion, data.id, 'CV')
        clear_selections(cv.id)
        for key, value in _scalar_values(data).items():
            setattr(cv, key, value)
        add_selections(cv.id, data)

    current_app.logger.info(f"Updated CV {data.id}")
    return _load(data.id)


@cv_router.mutation('delete')
def delete_cv(ctx, raw_input):
    require(ctx.can.delete_any('cv'), 'You are not authorized to delete CV records.')
    data = parse(IdInput, raw_input)
    with transaction('CV'):
        cv = get_or_404(CvVersion, data.id, 'CV')
        payload = cv.to_dict()
        db.session.delete(cv)
    current_app.logger.info(f"Deleted CV {data.id}")
    return payload
