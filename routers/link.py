from models import Link
from schemas import LinkInput, LinkUpdate
from .base import crud_router

link_router = crud_router('link', Link, LinkInput, LinkUpdate)
