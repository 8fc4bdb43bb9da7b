from typing import Optional

from .base import BaseSchema, OrderIndex, text


class SkillInput(BaseSchema):
    name: text('Name', max_length=255)
    level: Optional[str] = None
    order_index: OrderIndex = None


class SkillUpdate(SkillInput):
    id: text('Id')
