# user_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import ValidationError
from sqlalchemy import UniqueConstraint
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import Base
from app.errors import ErrorReport, InputError
from app.models.interest import Interest
from app.models.skills import Skill
from app.models.user import User
from app.schemas.user import CreateUserInput
from app.services.associations import PendingAssociations, collect, link, resolve, unlink_all_for
from app.services.validation import validate, validate_associated


logger = logging.getLogger(__name__)


@dataclass
class CreateUserResult:
    user: User
    errors: ErrorReport = field(default_factory=ErrorReport)
    associations: PendingAssociations = field(default_factory=PendingAssociations)

    @property
    def success(self) -> bool:
        return not self.errors and self.user.id is not None

    def as_dict(self) -> dict[str, Any]:
        return {"success": self.success, "user": self.user, "errors": self.errors.as_dict()}


def build_fullname(surname: str | None, name: str | None, patronymic: str | None) -> str:
    return " ".join(part for part in (surname, name, patronymic) if part)


def _input_errors(exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for item in exc.errors():
        loc = item.get("loc") or ()
        key = str(loc[0]) if loc else "base"
        message = "is required" if item.get("type") == "missing" else str(item.get("msg"))
        bucket = errors.setdefault(key, [])
        if message not in bucket:
            bucket.append(message)
    return errors


def parse_create_user_input(payload: CreateUserInput | Mapping[str, Any]) -> CreateUserInput:
    if isinstance(payload, CreateUserInput):
        return payload
    try:
        return CreateUserInput.model_validate(payload)
    except ValidationError as exc:
        raise InputError(_input_errors(exc)) from exc


# table -> (field, message) reported when one of the table's unique keys rejects a write
_UNIQUE_KEY_ERRORS = {
    "users": ("email", "has already been taken"),
    "interests": ("interests", "is invalid"),
    "interests_users": ("interests", "is invalid"),
    "skills": ("skills", "is invalid"),
    "skills_users": ("skills", "is invalid"),
}


def _unique_key_fields() -> dict[str, tuple[str, str]]:
    """Map every declared unique index/constraint to its field error.

    Keys are the declared names (PostgreSQL, MySQL) and SQLite's
    ``UNIQUE constraint failed: table.col, ...`` form, which carries no name.
    """
    keys: dict[str, tuple[str, str]] = {}
    for table_name, outcome in _UNIQUE_KEY_ERRORS.items():
        table = Base.metadata.tables[table_name]
        unique_keys = [index for index in table.indexes if index.unique]
        unique_keys += [c for c in table.constraints if isinstance(c, UniqueConstraint)]
        for key in unique_keys:
            if key.name:
                keys[str(key.name)] = outcome
            columns = ", ".join(f"{table.name}.{column.name}" for column in key.columns)
            keys[f"UNIQUE constraint failed: {columns}"] = outcome
    return keys


def _translate_integrity_error(exc: IntegrityError) -> tuple[str, str]:
    keys = _unique_key_fields()
    orig = getattr(exc, "orig", None)
    constraint_name = getattr(getattr(orig, "diag", None), "constraint_name", None)
    if constraint_name in keys:
        return keys[constraint_name]
    message = str(orig if orig is not None else exc)
    for key in sorted(keys, key=len, reverse=True):
        if key in message:
            return keys[key]
    return "base", "could not be saved"


def save_user(db: Session, user: User, pending: PendingAssociations | None = None) -> ErrorReport:
    """Validate and persist ``user`` with its pending interests and skills in one transaction.

    Returns an empty report on success. On failure nothing is written and the
    user is left unsaved.
    """
    pending = pending or PendingAssociations()
    report = validate(user, db=db)
    report.extend(validate_associated("interests", pending.interests, db))
    report.extend(validate_associated("skills", pending.skills, db))
    if report:
        return report

    try:
        db.add(user)
        db.flush()
        pending.interests = [resolve(db, item) for item in pending.interests]
        for interest in pending.interests:
            link(db, user, interest)
        pending.skills = [resolve(db, item) for item in pending.skills]
        for skill in pending.skills:
            link(db, user, skill)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        user.id = None
        field_name, message = _translate_integrity_error(exc)
        report.add(field_name, message)
        logger.warning("user save rejected by the database field=%s email=%s", field_name, user.email)
        return report

    db.refresh(user)
    return report


def create_user(db: Session, payload: CreateUserInput | Mapping[str, Any]) -> CreateUserResult:
    """Create a user and link the named interests and skills.

    Raises ``InputError`` for malformed arguments before anything is built.
    Entity validation failures do not raise: they are reported on the result,
    which still carries the unsaved user.
    """
    data = parse_create_user_input(payload)

    user = User(
        name=data.name,
        surname=data.surname,
        patronymic=data.patronymic,
        email=data.email,
        nationality=data.nationality,
        country=data.country,
        gender=data.gender,
        age=data.age,
        fullname=data.fullname if data.fullname is not None else build_fullname(data.surname, data.name, data.patronymic),
    )

    pending = PendingAssociations()
    if data.interests:
        collect(db, Interest, data.interests, pending.interests)
    if data.skills:
        collect(db, Skill, data.skills, pending.skills)

    result = CreateUserResult(user=user, associations=pending)
    errors = save_user(db, user, pending)
    if errors:
        result.errors.merge(errors)
        logger.info("user create failed email=%s fields=%s", user.email, ",".join(errors.fields))
    else:
        logger.info("user created id=%s interests=%d skills=%d", user.id, len(pending.interests), len(pending.skills))
    return result


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def delete_user(db: Session, user_id: int) -> bool:
    """Delete a user and its join rows. Shared interests and skills stay."""
    user = db.get(User, user_id)
    if user is None:
        return False
    removed = unlink_all_for(db, user_id)
    db.expire(user)
    db.delete(user)
    db.commit()
    logger.info("user deleted id=%s links_removed=%d", user_id, removed)
    return True
