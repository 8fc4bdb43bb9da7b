from typing import Optional

from pydantic import EmailStr

from .base import BaseSchema, UrlStr, text


class ProfileInput(BaseSchema):
    full_name: text('Full name', max_length=255)
    headline: Optional[str] = None
    location: Optional[str] = None
    website: Optional[UrlStr] = None
    job_title: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    about_md: Optional[str] = None
