# skills.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from app.database import Base


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, index=True, nullable=False)

    skills_users = relationship(
        "SkillsUser",
        back_populates="skill",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    users = relationship("User", secondary="skills_users", viewonly=True)

    def __repr__(self) -> str:
        return f"<Skill id={self.id} name={self.name!r}>"
