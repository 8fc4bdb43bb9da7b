from models import Experience
from schemas import ExperienceInput, ExperienceUpdate
from .base import crud_router

experience_router = crud_router('experience', Experience, ExperienceInput, ExperienceUpdate)
