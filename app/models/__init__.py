# __init__.py
from app.models.interest import Interest
from app.models.links import InterestsUser, SkillsUser
from app.models.skills import Skill
from app.models.user import GENDERS, User

__all__ = [
	"GENDERS",
	"Interest",
	"InterestsUser",
	"Skill",
	"SkillsUser",
	"User",
]
