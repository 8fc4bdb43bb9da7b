from datetime import datetime

from flask import current_app
from sqlalchemy.dialects import postgresql, sqlite

from extensions import db
from models import Profile, PROFILE_ID, AuditAction, AuditTargetType
from schemas import ProfileInput, parse
from utils.security import log_audit_event
from .base import Router, require, transaction

profile_router = Router('profile')

_UPSERT_DIALECTS = {
    'sqlite': sqlite.insert,
    'postgresql': postgresql.insert,
}


def _upsert_statement(values):
    insert = _UPSERT_DIALECTS.get(db.engine.dialect.name)
    if insert is None:
        return None
    stmt = insert(Profile).values(id=PROFILE_ID, **values)
    return stmt.on_conflict_do_update(index_elements=['id'], set_=values)


@profile_router.query('get')
def get_profile(ctx, raw_input=None):
    profile = db.session.get(Profile, PROFILE_ID)
    return profile.to_dict() if profile else None


@profile_router.mutation('upsert')
def upsert_profile(ctx, raw_input):
    """Create the singleton on first save, overwrite it in place afterwards"""
    require(ctx.can.update_any('profile'), 'You are not authorized to update profile.')
    require(ctx.can.create_any('profile'), 'You are not authorized to update profile.')
    data = parse(ProfileInput, raw_input)
    values = data.to_columns()
    values['updated_at'] = datetime.utcnow()

    with transaction('Profile'):
        stmt = _upsert_statement(values)
        if stmt is not None:
            db.session.execute(stmt)
        else:
            db.session.merge(Profile(id=PROFILE_ID, **values))
        log_audit_event(AuditAction.UPDATE, AuditTargetType.PROFILE, PROFILE_ID,
                        author_id=ctx.user_id)

    # The core statement bypasses the identity map
    profile = db.session.get(Profile, PROFILE_ID, populate_existing=True)
    current_app.logger.info(f"Profile saved by {ctx.user_id}")
    return profile.to_dict()
