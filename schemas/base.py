"""
Shared pieces for input schemas

Inputs arrive with camelCase keys (``orderIndex``, ``startDate``) and are
exposed as snake_case attributes that match the ORM column names.
"""

from datetime import date
from typing import Annotated, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic.alias_generators import to_camel
from pydantic.functional_validators import AfterValidator
from pydantic_core import PydanticCustomError

from utils.errors import ApiError, from_validation_error


class BaseSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=False,
        extra='ignore',
    )

    @model_validator(mode='before')
    @classmethod
    def _blank_optionals_to_none(cls, data):
        # HTML forms post "" for untouched optional inputs
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for name, field in cls.model_fields.items():
            if field.is_required():
                continue
            for key in (field.alias, name):
                if key in cleaned and cleaned[key] == '':
                    cleaned[key] = None
        return cleaned

    def to_columns(self, exclude=('id',)):
        """Validated values keyed by ORM column name"""
        return self.model_dump(exclude=set(exclude))


def text(label, min_length=1, max_length=None, allow_blank=True):
    """String type with human readable length messages"""
    def check(value):
        if len(value) < min_length:
            plural = 's' if min_length > 1 else ''
            raise ValueError(f"{label} must contain at least {min_length} character{plural}")
        if max_length is not None and len(value) > max_length:
            raise ValueError(f"{label} cannot exceed {max_length} characters")
        if not allow_blank and not value.strip():
            raise ValueError(f"{label} cannot be empty or whitespace only")
        return value
    return Annotated[str, AfterValidator(check)]


def _check_url(value):
    parsed = urlparse(value)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValueError('Must be a valid absolute URL')
    return value


def _check_order_index(value):
    if value < 0:
        raise ValueError('Order index must be a non-negative integer')
    return value


UrlStr = Annotated[str, AfterValidator(_check_url)]
OrderIndex = Optional[Annotated[int, AfterValidator(_check_order_index)]]


class DateRangeSchema(BaseSchema):
    """endDate may only be given together with startDate"""

    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode='after')
    def _end_requires_start(self):
        if self.end_date is not None and self.start_date is None:
            raise PydanticCustomError(
                'date_range',
                'An end date cannot be set without a start date',
                {'field': 'startDate'},
            )
        return self


class IdInput(BaseSchema):
    id: text('Id')


def parse(schema, data):
    """
    Validate untyped input against a schema

    Args:
        schema: BaseSchema subclass
        data: mapping received from the caller (None is treated as empty)

    Returns:
        schema instance

    Raises:
        ApiError: BAD_REQUEST with one issue per offending field
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ApiError('BAD_REQUEST', 'Input must be an object',
                       issues=[{'field': '_', 'message': 'Input must be an object'}])
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise from_validation_error(exc) from exc
