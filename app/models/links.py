from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base


class InterestsUser(Base):
    __tablename__ = "interests_users"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    interest_id = Column(Integer, ForeignKey("interests.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="interests_users")
    interest = relationship("Interest", back_populates="interests_users")

    __table_args__ = (
        UniqueConstraint("user_id", "interest_id", name="uq_interests_users_user_id_interest_id"),
    )


class SkillsUser(Base):
    __tablename__ = "skills_users"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="skills_users")
    skill = relationship("Skill", back_populates="skills_users")

    __table_args__ = (
        UniqueConstraint("user_id", "skill_id", name="uq_skills_users_user_id_skill_id"),
    )
