import re
from typing import Annotated, List, Optional

from pydantic import field_validator
from pydantic.functional_validators import AfterValidator

from .base import BaseSchema, text

SLUG_PATTERN = re.compile(r'^[a-z0-9-]+$')
DEFAULT_THEME = 'modern'


def _check_slug(value):
    if not SLUG_PATTERN.match(value):
        raise ValueError('Slug may only contain lowercase letters, digits and dashes')
    return value


def _id_list(message):
    def check(values):
        # Keep first occurrence; a duplicate would collide on the join table key
        unique = list(dict.fromkeys(v for v in values if v))
        if not unique:
            raise ValueError(message)
        return unique
    return Annotated[List[str], AfterValidator(check)]


class CvInput(BaseSchema):
    title: text('Title', max_length=100)
    slug: Annotated[text('Slug', max_length=100), AfterValidator(_check_slug)]
    theme: Optional[str] = DEFAULT_THEME
    section_order: text('Section order')

    experiences_ids: _id_list('At least one experience is required')
    projects_ids: _id_list('At least one project is required')
    skills_ids: _id_list('At least one skill is required')
    educations_ids: _id_list('At least one education is required')

    @field_validator('theme')
    @classmethod
    def _default_theme(cls, value):
        return value or DEFAULT_THEME

    @field_validator('section_order', mode='before')
    @classmethod
    def _join_section_list(cls, value):
        if isinstance(value, (list, tuple)):
            return ','.join(str(item).strip() for item in value if str(item).strip())
        return value


class CvUpdate(CvInput):
    id: text('Id')


class SlugInput(BaseSchema):
    slug: text('Slug')
