from typing import Optional

from models import ExperienceType
from .base import DateRangeSchema, OrderIndex, UrlStr, text


class ExperienceInput(DateRangeSchema):
    company: text('Company name', max_length=255)
    company_url: Optional[UrlStr] = None
    role: text('Role', max_length=255)
    location: Optional[str] = None
    summary_md: Optional[str] = None
    order_index: OrderIndex = None
    type: ExperienceType = ExperienceType.WORK


class ExperienceUpdate(ExperienceInput):
    id: text('Id')


EXPERIENCE_TYPE_LABELS = {
    ExperienceType.WORK: 'Other',
    ExperienceType.INTERNSHIP: 'Internship',
    ExperienceType.APPRENTICESHIP: 'Apprenticeship',
    ExperienceType.FREELANCE: 'Freelance',
    ExperienceType.VOLUNTEER: 'Volunteering',
    ExperienceType.FIXED_TERM: 'Fixed-term contract',
    ExperienceType.PERMANENT: 'Permanent contract',
}
