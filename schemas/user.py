from typing import Optional

from pydantic import EmailStr, field_validator

from utils.accesscontrol import Role
from .base import BaseSchema, UrlStr, text


class _EmailSchema(BaseSchema):
    email: EmailStr

    @field_validator('email')
    @classmethod
    def _lowercase_email(cls, value):
        # Sign in compares lowercased addresses
        return value.lower()


class UserCreate(_EmailSchema):
    name: text('Name', max_length=255)
    password: text('Password', min_length=8, max_length=128)
    role: Role = Role.VIEWER
    image: Optional[UrlStr] = None


class UserUpdate(_EmailSchema):
    id: text('Id')
    name: text('Name', max_length=255)
    image: Optional[UrlStr] = None
