from models import Skill
from schemas import SkillInput, SkillUpdate
from .base import crud_router

skill_router = crud_router('skill', Skill, SkillInput, SkillUpdate)
