# catalog.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.interest import Interest
from app.models.skills import Skill
from app.schemas.catalog import InterestRead, SkillRead
from app.services.associations import list_named


router = APIRouter()


@router.get("/interests", response_model=list[InterestRead], tags=["interests"])
def list_interests(db: Session = Depends(get_db)) -> list[InterestRead]:
    return [InterestRead.model_validate(item) for item in list_named(db, Interest)]


@router.get("/skills", response_model=list[SkillRead], tags=["skills"])
def list_skills(db: Session = Depends(get_db)) -> list[SkillRead]:
    return [SkillRead.model_validate(item) for item in list_named(db, Skill)]
