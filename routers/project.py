from models import Project
from schemas import ProjectInput, ProjectUpdate
from .base import crud_router

project_router = crud_router('project', Project, ProjectInput, ProjectUpdate)
