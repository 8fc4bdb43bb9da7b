"""
Procedure framework shared by every entity router

A Router groups named procedures. Queries are public by default, mutations
require an authenticated session. Handlers receive ``(ctx, raw_input)`` and
are responsible for the access-control check, validation and storage, in
that order.
"""

from contextlib import contextmanager

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from schemas import IdInput, parse
from utils.accesscontrol import can
from utils.errors import ApiError

QUERY = 'query'
MUTATION = 'mutation'


class Context:
    """Per-call state handed to every procedure"""

    def __init__(self, session=None):
        self.session = session

    @property
    def can(self):
        return can(self.session)

    @property
    def user_id(self):
        return self.session.user_id if self.session else None


class Procedure:
    def __init__(self, name, kind, handler, protected):
        self.name = name
        self.kind = kind
        self.handler = handler
        self.protected = protected

    def __call__(self, ctx, raw_input=None):
        if self.protected and ctx.session is None:
            raise ApiError('UNAUTHORIZED', 'You must be signed in to do this.')
        return self.handler(ctx, raw_input)

    def __repr__(self):
        return f"Procedure({self.name!r}, {self.kind}, protected={self.protected})"


class Router:
    """Named collection of procedures, e.g. ``experience.getAll``"""

    def __init__(self, name):
        self.name = name
        self.procedures = {}

    def _register(self, name, kind, protected):
        def decorator(handler):
            self.procedures[name] = Procedure(name, kind, handler, protected)
            return handler
        return decorator

    def query(self, name, protected=False):
        return self._register(name, QUERY, protected)

    def mutation(self, name, protected=True):
        return self._register(name, MUTATION, protected)

    def get(self, name):
        return self.procedures.get(name)

    def __getitem__(self, name):
        return self.procedures[name]

    def __contains__(self, name):
        return name in self.procedures

    def call(self, name, ctx, raw_input=None):
        procedure = self.get(name)
        if procedure is None:
            raise ApiError('NOT_FOUND', f"No procedure {self.name}.{name}")
        return procedure(ctx, raw_input)


def require(permission, message):
    """Raise FORBIDDEN unless the policy granted the permission"""
    if not permission.granted:
        current_app.logger.warning(f"Denied {permission!r}")
        raise ApiError('FORBIDDEN', message)


def get_or_404(model, row_id, label):
    row = db.session.get(model, row_id)
    if row is None:
        raise ApiError('NOT_FOUND', f"{label} not found")
    return row


def next_order_index(model):
    """Append-to-end position: max(order_index) + 1, or 0 for an empty table"""
    current = db.session.query(func.max(model.order_index)).scalar()
    return 0 if current is None else current + 1


@contextmanager
def transaction(label):
    """Commit once on success, roll back and map storage errors otherwise"""
    try:
        yield db.session
        db.session.commit()
    except ApiError:
        db.session.rollback()
        raise
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.warning(f"Integrity error on {label}: {str(e.orig)}")
        raise ApiError('CONFLICT', f"{label} conflicts with an existing record",
                       cause=str(e.orig)) from e
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Storage error on {label}: {str(e)}")
        raise ApiError('INTERNAL_SERVER_ERROR', f"Failed to save {label}") from e


def crud_router(name, model, input_schema, update_schema, label=None):
    """
    Build the uniform getAll/getById/create/update/delete router for an
    entity carrying an ``order_index`` column.

    Args:
        name (str): router and access-control resource name
        model: SQLAlchemy model class
        input_schema: schema validating create input
        update_schema: schema validating update input (with ``id``)
        label (str, optional): human name used in messages

    Returns:
        Router
    """
    label = label or name.capitalize()
    router = Router(name)

    @router.query('getAll')
    def get_all(ctx, raw_input=None):
        rows = model.query.order_by(model.order_index.asc(), model.created_at.asc()).all()
        return [row.to_dict() for row in rows]

    @router.query('getById')
    def get_by_id(ctx, raw_input):
        data = parse(IdInput, raw_input)
        return get_or_404(model, data.id, label).to_dict()

    @router.mutation('create')
    def create(ctx, raw_input):
        require(ctx.can.create_any(name), f"You are not authorized to create {name} records.")
        data = parse(input_schema, raw_input)
        values = data.to_columns()
        with transaction(label):
            if values.get('order_index') is None:
                values['order_index'] = next_order_index(model)
            row = model(**values)
            db.session.add(row)
        current_app.logger.info(f"Created {name} {row.id} at index {row.order_index}")
        return row.to_dict()

    @router.mutation('update')
    def update(ctx, raw_input):
        require(ctx.can.update_any(name), f"You are not authorized to update {name} records.")
        data = parse(update_schema, raw_input)
        values = data.to_columns()
        # Full replace: omitted optionals are cleared, the position is kept
        if values.get('order_index') is None:
            values.pop('order_index', None)
        with transaction(label):
            row = get_or_404(model, data.id, label)
            for key, value in values.items():
                setattr(row, key, value)
        current_app.logger.info(f"Updated {name} {row.id}")
        return row.to_dict()

    @router.mutation('delete')
    def delete(ctx, raw_input):
        require(ctx.can.delete_any(name), f"You are not authorized to delete {name} records.")
        data = parse(IdInput, raw_input)
        with transaction(label):
            row = get_or_404(model, data.id, label)
            payload = row.to_dict()
            db.session.delete(row)
        current_app.logger.info(f"Deleted {name} {data.id}")
        return payload

    return router
