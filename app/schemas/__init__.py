# __init__.py
from app.schemas.catalog import InterestRead, SkillRead
from app.schemas.user import CreateUserInput, UserErrors, UserRead

__all__ = [
	"CreateUserInput",
	"InterestRead",
	"SkillRead",
	"UserErrors",
	"UserRead",
]
