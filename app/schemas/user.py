# user.py
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class CreateUserInput(BaseModel):
    """Arguments accepted by the create-user interaction."""

    name: StrictStr
    surname: StrictStr
    patronymic: StrictStr
    email: StrictStr
    nationality: StrictStr
    country: StrictStr
    gender: StrictStr
    age: int
    fullname: Optional[StrictStr] = None
    interests: Optional[list[StrictStr]] = None
    skills: Optional[list[StrictStr]] = None

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "Ivan",
                "surname": "Petrov",
                "patronymic": "Sergeevich",
                "email": "ivan.petrov@example.com",
                "age": 34,
                "nationality": "Russian",
                "country": "Russia",
                "gender": "male",
                "interests": ["chess", "hiking"],
                "skills": ["python"],
            }
        },
    )

    @field_validator("age", mode="before")
    @classmethod
    def _reject_bool_age(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("must be an integer")
        return v


class UserRead(BaseModel):
    id: int
    name: str
    surname: Optional[str] = None
    patronymic: str
    fullname: Optional[str] = None
    email: str
    age: int
    nationality: str
    country: str
    gender: str
    interests: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @field_validator("interests", "skills", mode="before")
    @classmethod
    def _names_only(cls, v: Any) -> Any:
        if v is None:
            return []
        return [getattr(item, "name", item) for item in v]


class UserErrors(BaseModel):
    errors: dict[str, list[str]]
