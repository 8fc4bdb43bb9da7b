from flask import current_app
from sqlalchemy import func

from extensions import db
from models import User, AuditAction, AuditTargetType
from schemas import IdInput, UserCreate, UserUpdate, parse
from utils.errors import ApiError
from utils.security import hash_password, log_audit_event
from .base import Router, get_or_404, require, transaction

user_router = Router('user')


@user_router.query('getActual', protected=True)
def get_actual(ctx, raw_input=None):
    """Row of the signed-in user"""
    user = db.session.get(User, ctx.session.user_id)
    if user is None:
        raise ApiError('NOT_FOUND', 'User not found')
    return user.to_dict()


@user_router.query('getSession', protected=True)
def get_session(ctx, raw_input=None):
    return ctx.session.to_dict()


@user_router.query('getAll', protected=True)
def get_all(ctx, raw_input=None):
    require(ctx.can.read_any('user'), 'Unsufficient privileges')
    return [user.to_dict() for user in User.query.order_by(User.created_at.asc()).all()]


@user_router.mutation('create')
def create_user(ctx, raw_input):
    require(ctx.can.create_any('user'), 'Unsufficient privileges')
    data = parse(UserCreate, raw_input)

    if User.query.filter(func.lower(User.email) == data.email).first():
        raise ApiError('CONFLICT', 'User already exists')

    with transaction('User'):
        user = User(
            name=data.name,
            email=data.email,
            role=data.role.value,
            password_hash=hash_password(data.password),
            image=data.image
        )
        db.session.add(user)
        db.session.flush()
        log_audit_event(AuditAction.CREATE, AuditTargetType.USER, user.id,
                        author_id=ctx.user_id, meta={'role': user.role})

    current_app.logger.info(f"User created: {user.name} ({user.email})")
    return user.to_dict()


@user_router.mutation('update')
def update_user(ctx, raw_input):
    require(ctx.can.update_any('user'), 'Unsufficient privileges')
    data = parse(UserUpdate, raw_input)
    with transaction('User'):
        user = get_or_404(User, data.id, 'User')
        user.name = data.name
        user.image = data.image
    return user.to_dict()


@user_router.mutation('delete')
def delete_user(ctx, raw_input):
    require(ctx.can.delete_own('user'), 'Unsufficient privileges')
    data = parse(IdInput, raw_input)
    with transaction('User'):
        user = get_or_404(User, data.id, 'User')
        payload = user.to_dict()
        db.session.delete(user)
        log_audit_event(AuditAction.DELETE, AuditTargetType.USER, data.id,
                        author_id=ctx.user_id, meta={'email': payload['email']})
    current_app.logger.info(f"User deleted: {payload['email']}")
    return payload
