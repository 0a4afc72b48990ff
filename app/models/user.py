# user.py
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


GENDERS = ("male", "female")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    surname = Column(String(255), nullable=True)
    patronymic = Column(String(255), nullable=False)
    fullname = Column(String(767), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    age = Column(Integer, nullable=False)
    nationality = Column(String(255), nullable=False)
    country = Column(String(255), nullable=False)
    gender = Column(String(16), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    interests_users = relationship(
        "InterestsUser",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    skills_users = relationship(
        "SkillsUser",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # Read-only views over the join rows; links are written through app.services.associations.
    interests = relationship("Interest", secondary="interests_users", viewonly=True, order_by="Interest.name")
    skills = relationship("Skill", secondary="skills_users", viewonly=True, order_by="Skill.name")

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
