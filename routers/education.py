from models import Education
from schemas import EducationInput, EducationUpdate
from .base import crud_router

education_router = crud_router('education', Education, EducationInput, EducationUpdate)
