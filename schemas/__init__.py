"""
Schemas Package - Input validation for every remote procedure
"""

from .base import BaseSchema, IdInput, parse
from .cv import CvInput, CvUpdate, SlugInput
from .education import EducationInput, EducationUpdate
from .experience import ExperienceInput, ExperienceUpdate, EXPERIENCE_TYPE_LABELS
from .link import LinkInput, LinkUpdate
from .profile import ProfileInput
from .project import ProjectInput, ProjectUpdate
from .skill import SkillInput, SkillUpdate
from .user import UserCreate, UserUpdate

__all__ = [
    'BaseSchema',
    'IdInput',
    'parse',
    'CvInput',
    'CvUpdate',
    'SlugInput',
    'EducationInput',
    'EducationUpdate',
    'ExperienceInput',
    'ExperienceUpdate',
    'EXPERIENCE_TYPE_LABELS',
    'LinkInput',
    'LinkUpdate',
    'ProfileInput',
    'ProjectInput',
    'ProjectUpdate',
    'SkillInput',
    'SkillUpdate',
    'UserCreate',
    'UserUpdate',
]
