from typing import Optional

from .base import BaseSchema, OrderIndex, UrlStr, text


class ProjectInput(BaseSchema):
    name: text('Name', max_length=255)
    picture: Optional[UrlStr] = None
    preview_text: Optional[str] = None
    summary_md: Optional[str] = None
    url: Optional[UrlStr] = None
    repo_url: Optional[UrlStr] = None
    order_index: OrderIndex = None


class ProjectUpdate(ProjectInput):
    id: text('Id')
