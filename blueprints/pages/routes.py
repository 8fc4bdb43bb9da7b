"""
Pages Routes - Public portfolio pages rendered from the routers
"""

from flask import render_template, abort
from models import CvVersion
from routers import create_caller
from utils.cv_layout import compose_cv
from utils.decorators import get_current_session
from utils.errors import ApiError
from . import pages_bp


def _caller():
    return create_caller(get_current_session())


@pages_bp.route('/')
def index():
    """Home page - profile, links and every section"""
    call = _caller()
    return render_template('index.html',
                           profile=call('profile.get'),
                           links=call('link.getAll'),
                           experiences=call('experience.getAll'),
                           projects=call('project.getAll'),
                           skills=call('skill.getAll'),
                           educations=call('education.getAll'))


@pages_bp.route('/projects')
def projects():
    """All projects"""
    return render_template('projects.html', projects=_caller()('project.getAll'))


@pages_bp.route('/projects/<project_id>')
def project_detail(project_id):
    """Single project"""
    try:
        project = _caller()('project.getById', {'id': project_id})
    except ApiError as e:
        if e.code == 'NOT_FOUND':
            abort(404)
        raise
    return render_template('project_detail.html', project=project)


@pages_bp.route('/cv')
def cv_list():
    """Published CV versions"""
    return render_template('cv_list.html', cvs=_caller()('cv.getAll'))


@pages_bp.route('/cv/<slug>')
def cv_detail(slug):
    """Rendered CV version"""
    cv = CvVersion.query.filter_by(slug=slug).first()
    if cv is None:
        abort(404)
    layout = compose_cv(cv)
    return render_template('cv_detail.html',
                           cv=layout['cv'],
                           sections=layout['sections'],
                           profile=_caller()('profile.get'))
