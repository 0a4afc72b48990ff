# interest.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from app.database import Base


class Interest(Base):
    __tablename__ = "interests"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, index=True, nullable=False)

    interests_users = relationship(
        "InterestsUser",
        back_populates="interest",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    users = relationship("User", secondary="interests_users", viewonly=True)

    def __repr__(self) -> str:
        return f"<Interest id={self.id} name={self.name!r}>"
