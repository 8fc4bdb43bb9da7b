from typing import Optional

from .base import DateRangeSchema, OrderIndex, text


class EducationInput(DateRangeSchema):
    school: text('School name', max_length=255)
    degree: text('Degree', max_length=255)
    details_md: Optional[str] = None
    order_index: OrderIndex = None


class EducationUpdate(EducationInput):
    id: text('Id')
