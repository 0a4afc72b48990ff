# catalog.py
from pydantic import BaseModel, ConfigDict


class InterestRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class SkillRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
