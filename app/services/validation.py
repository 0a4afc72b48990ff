# validation.py
from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Iterator, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.errors import ErrorReport
from app.models.interest import Interest
from app.models.links import InterestsUser, SkillsUser
from app.models.skills import Skill
from app.models.user import GENDERS, User


# A rule inspects one record (optionally querying the store) and yields (field, message) pairs.
Rule = Callable[[Any, "Session | None"], Iterable[tuple[str, str]]]

EMAIL_MAX_LENGTH = 255
TEXT_MAX_LENGTH = 255
FULLNAME_MAX_LENGTH = 767
AGE_MIN = 0
AGE_MAX_EXCLUSIVE = 90

EMAIL_RE = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def normalize_email(value: str | None) -> str | None:
    if value is None:
        return None
    return value.lower()


def normalize_user(user: User) -> User:
    """Rewrite fields that are stored in canonical form. Safe to call repeatedly."""
    user.email = normalize_email(user.email)
    return user


def presence(*fields: str) -> Rule:
    def rule(record: Any, db: Session | None) -> Iterator[tuple[str, str]]:
        for field in fields:
            if _is_blank(getattr(record, field, None)):
                yield field, "can't be blank"

    return rule


def numericality(
    field: str,
    *,
    greater_than_or_equal_to: float | None = None,
    less_than: float | None = None,
    only_integer: bool = False,
) -> Rule:
    def rule(record: Any, db: Session | None) -> Iterator[tuple[str, str]]:
        value = getattr(record, field, None)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            yield field, "is not a number"
            return
        if only_integer and not float(value).is_integer():
            yield field, "must be an integer"
            return
        if greater_than_or_equal_to is not None and value < greater_than_or_equal_to:
            yield field, f"must be greater than or equal to {greater_than_or_equal_to}"
        if less_than is not None and value >= less_than:
            yield field, f"must be less than {less_than}"

    return rule


def inclusion(field: str, choices: Sequence[Any]) -> Rule:
    def rule(record: Any, db: Session | None) -> Iterator[tuple[str, str]]:
        if getattr(record, field, None) not in choices:
            yield field, "is not included in the list"

    return rule


def length(field: str, *, maximum: int) -> Rule:
    def rule(record: Any, db: Session | None) -> Iterator[tuple[str, str]]:
        value = getattr(record, field, None)
        if value is not None and len(value) > maximum:
            yield field, f"is too long (maximum is {maximum} characters)"

    return rule


def format_of(field: str, pattern: re.Pattern[str]) -> Rule:
    def rule(record: Any, db: Session | None) -> Iterator[tuple[str, str]]:
        value = getattr(record, field, None)
        if value is None or not pattern.fullmatch(str(value)):
            yield field, "is invalid"

    return rule


def uniqueness(field: str, *, scope: Sequence[str] = (), case_sensitive: bool = True) -> Rule:
    """Reject a value already stored on another row of the record's table.

    The check is advisory: concurrent writers can both pass it, so the table
    must carry a matching unique constraint.
    """

    def rule(record: Any, db: Session | None) -> Iterator[tuple[str, str]]:
        value = getattr(record, field, None)
        if db is None or value is None:
            return
        model = type(record)
        column = getattr(model, field)
        if case_sensitive or not isinstance(value, str):
            stmt = select(model.id).where(column == value)
        else:
            stmt = select(model.id).where(func.lower(column) == value.lower())
        for scoped in scope:
            stmt = stmt.where(getattr(model, scoped) == getattr(record, scoped, None))
        if record.id is not None:
            stmt = stmt.where(model.id != record.id)
        with db.no_autoflush:
            taken = db.execute(stmt.limit(1)).first() is not None
        if taken:
            yield field, "has already been taken"

    rule.queries_store = True
    return rule


USER_RULES: tuple[Rule, ...] = (
    presence("name", "patronymic", "email", "age", "nationality", "country", "gender"),
    numericality("age", greater_than_or_equal_to=AGE_MIN, less_than=AGE_MAX_EXCLUSIVE, only_integer=True),
    inclusion("gender", GENDERS),
    length("email", maximum=EMAIL_MAX_LENGTH),
    format_of("email", EMAIL_RE),
    uniqueness("email", case_sensitive=False),
    *(length(field, maximum=TEXT_MAX_LENGTH) for field in ("name", "surname", "patronymic", "nationality", "country")),
    length("fullname", maximum=FULLNAME_MAX_LENGTH),
)

INTEREST_RULES: tuple[Rule, ...] = (
    presence("name"),
    length("name", maximum=TEXT_MAX_LENGTH),
    uniqueness("name"),
)

SKILL_RULES: tuple[Rule, ...] = (
    presence("name"),
    length("name", maximum=TEXT_MAX_LENGTH),
    uniqueness("name"),
)

INTERESTS_USER_RULES: tuple[Rule, ...] = (
    uniqueness("user_id", scope=("interest_id",)),
)

SKILLS_USER_RULES: tuple[Rule, ...] = (
    uniqueness("user_id", scope=("skill_id",)),
)

RULES_BY_MODEL: dict[type, tuple[Rule, ...]] = {
    User: USER_RULES,
    Interest: INTEREST_RULES,
    Skill: SKILL_RULES,
    InterestsUser: INTERESTS_USER_RULES,
    SkillsUser: SKILLS_USER_RULES,
}


def validate(record: Any, rules: Iterable[Rule] | None = None, db: Session | None = None) -> ErrorReport:
    """Run every rule against ``record`` and collect all failures."""
    if rules is None:
        rules = RULES_BY_MODEL[type(record)]
    if isinstance(record, User):
        normalize_user(record)
    report = ErrorReport()
    for rule in rules:
        report.extend(rule(record, db))
    return report


def validate_associated(field: str, records: Iterable[Any], db: Session | None = None) -> Iterator[tuple[str, str]]:
    """Yield a single ``(field, "is invalid")`` when any associated record fails its own rules.

    Unsaved records skip uniqueness: a name stored by another writer in the
    meantime is reused at save time by ``resolve_or_create``.
    """
    for record in records:
        rules = RULES_BY_MODEL[type(record)]
        if record.id is None:
            rules = tuple(rule for rule in rules if not getattr(rule, "queries_store", False))
        if validate(record, rules, db=db):
            yield field, "is invalid"
            return
