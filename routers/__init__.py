"""
Routers Package - Remote procedures grouped per entity

All routers are registered in ``app_router``; the api blueprint resolves
``<entity>.<procedure>`` against it.
"""

from utils.errors import ApiError
from .base import Context, Procedure, Router, QUERY, MUTATION
from .cv import cv_router
from .education import education_router
from .experience import experience_router
from .link import link_router
from .profile import profile_router
from .project import project_router
from .skill import skill_router
from .user import user_router

app_router = {
    'cv': cv_router,
    'education': education_router,
    'experience': experience_router,
    'link': link_router,
    'profile': profile_router,
    'project': project_router,
    'skill': skill_router,
    'user': user_router,
}


def resolve(path):
    """'experience.getAll' -> Procedure, or None"""
    entity, _, name = path.partition('.')
    router = app_router.get(entity)
    if router is None or not name:
        return None
    return router.get(name)


def create_caller(session=None):
    """Server-side caller: ``call('profile.get')``"""
    ctx = Context(session)

    def call(path, raw_input=None):
        procedure = resolve(path)
        if procedure is None:
            raise ApiError('NOT_FOUND', f"No procedure {path}")
        return procedure(ctx, raw_input)

    return call


__all__ = [
    'Context',
    'Procedure',
    'Router',
    'QUERY',
    'MUTATION',
    'app_router',
    'resolve',
    'create_caller',
]
