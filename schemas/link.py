from typing import Optional

from .base import BaseSchema, OrderIndex, UrlStr, text


class LinkInput(BaseSchema):
    name: text('Name', max_length=100, allow_blank=False)
    icon: Optional[UrlStr] = None
    url: UrlStr
    order_index: OrderIndex = None


class LinkUpdate(LinkInput):
    id: text('Id')
