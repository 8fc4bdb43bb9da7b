"""
Dashboard Routes - Admin overview of stored records
"""

from flask import render_template, request
from extensions import db
from models import (
    User, Experience, Education, Project, Skill, Link, CvVersion, AuditLog
)
from utils.accesscontrol import can, format_role
from utils.decorators import login_required, admin_required, get_current_session
from utils.income import DEFAULT_RATES, compute_income, to_number
from . import dashboard_bp

COUNTED_MODELS = (
    ('experience', Experience),
    ('education', Education),
    ('project', Project),
    ('skill', Skill),
    ('link', Link),
    ('cv', CvVersion),
)


@dashboard_bp.route('/')
@login_required
def index():
    """Counts per entity, plus users and audit trail for admins"""
    session = get_current_session()
    counts = {name: db.session.query(model).count() for name, model in COUNTED_MODELS}

    users = []
    audit = []
    if can(session).read_any('user').granted:
        users = [user.to_dict() for user in User.query.order_by(User.created_at.asc()).all()]
        audit = [entry.to_dict() for entry in
                 AuditLog.query.order_by(AuditLog.created_at.desc()).limit(20).all()]

    return render_template('dashboard/index.html',
                           session_user=session.to_dict()['user'],
                           role_label=format_role(session.role),
                           counts=counts,
                           users=users,
                           audit=audit)


@dashboard_bp.route('/users')
@login_required
@admin_required
def users():
    """User accounts (admins only)"""
    rows = User.query.order_by(User.created_at.asc()).all()
    return render_template('dashboard/users.html',
                           users=[user.to_dict() for user in rows],
                           format_role=format_role)


@dashboard_bp.route('/income')
@login_required
def income():
    """Net pay calculator"""
    args = request.args
    rates = {key: to_number(args[key]) for key in DEFAULT_RATES if args.get(key)}
    result = compute_income(
        to_number(args.get('revenue')),
        purchases=to_number(args.get('purchases')),
        operating_costs=to_number(args.get('costs')),
        progressive_employer_rate=args.get('progressive') in ('1', 'on', 'true'),
        **rates
    )
    return render_template('dashboard/income.html', result=result, form=args)
