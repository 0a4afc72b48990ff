# associations.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Type, TypeVar, Union

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.interest import Interest
from app.models.links import InterestsUser, SkillsUser
from app.models.skills import Skill
from app.models.user import User


logger = logging.getLogger(__name__)

Named = TypeVar("Named", Interest, Skill)
Linkable = Union[Interest, Skill]

# entity model -> (join model, relationship name on the join model, collection name on User)
_LINKS = {
    Interest: (InterestsUser, "interest", "interests_users"),
    Skill: (SkillsUser, "skill", "skills_users"),
}


@dataclass
class PendingAssociations:
    """Interests and skills attached to a user that has not been saved yet."""

    interests: list[Interest] = field(default_factory=list)
    skills: list[Skill] = field(default_factory=list)

    def interest_names(self) -> list[str]:
        return [item.name for item in self.interests]

    def skill_names(self) -> list[str]:
        return [item.name for item in self.skills]


def find_by_name(db: Session, model: Type[Named], name: str, *, lock: bool = False) -> Named | None:
    """Look an entity up by name.

    ``lock=True`` issues a locking read, which sees rows committed after the
    transaction's snapshot (REPEATABLE READ on MySQL) instead of the snapshot.
    """
    stmt = select(model).where(model.name == name)
    if lock:
        stmt = stmt.with_for_update()
    with db.no_autoflush:
        return db.execute(stmt).scalars().first()


def find_or_initialize(db: Session, model: Type[Named], name: str) -> Named:
    """Return the stored entity called ``name`` or a new, unsaved one."""
    existing = find_by_name(db, model, name)
    if existing is not None:
        return existing
    return model(name=name)


def resolve_or_create(db: Session, model: Type[Named], name: str) -> Named:
    """Return the stored entity called ``name``, inserting it when missing.

    The insert runs in a SAVEPOINT; losing a race against another writer rolls
    back only that savepoint and the row the other writer stored is returned.
    """
    existing = find_by_name(db, model, name)
    if existing is not None:
        return existing
    created = model(name=name)
    try:
        with db.begin_nested():
            db.add(created)
    except IntegrityError:
        logger.info("%s name=%r was created concurrently, reusing stored row", model.__tablename__, name)
        stored = find_by_name(db, model, name, lock=True)
        if stored is None:
            raise
        return stored
    return created


def resolve(db: Session, entity: Named) -> Named:
    if entity.id is not None:
        return entity
    return resolve_or_create(db, type(entity), entity.name)


def is_linked(db: Session, user_id: int, entity: Linkable) -> bool:
    if user_id is None or entity.id is None:
        return False
    link_model, rel_name, _ = _LINKS[type(entity)]
    column = getattr(link_model, f"{rel_name}_id")
    stmt = select(link_model.id).where(link_model.user_id == user_id, column == entity.id).limit(1)
    with db.no_autoflush:
        return db.execute(stmt).first() is not None


def link(db: Session, user: User, entity: Linkable) -> InterestsUser | SkillsUser | None:
    """Add a join row between ``user`` and ``entity`` unless one already exists.

    Returns the new join row, or None when the pair was already linked.
    """
    link_model, rel_name, collection_name = _LINKS[type(entity)]
    for row in getattr(user, collection_name):
        if getattr(row, rel_name) is entity:
            return None
    if is_linked(db, user.id, entity):
        return None
    row = link_model(user=user, **{rel_name: entity})
    db.add(row)
    return row


def unlink_all_for(db: Session, user_id: int) -> int:
    """Delete every interest and skill join row of a user. Shared entities are kept."""
    removed = 0
    for link_model in (InterestsUser, SkillsUser):
        result = db.execute(
            delete(link_model).where(link_model.user_id == user_id).execution_options(synchronize_session="fetch")
        )
        removed += result.rowcount or 0
    return removed


def _unique_names(names: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result


def collect(db: Session, model: Type[Named], names: Iterable[str], into: list[Named]) -> list[Named]:
    """Find or initialize each distinct name and append it to ``into`` unless already present."""
    held = {item.name for item in into}
    for name in _unique_names(names):
        if name in held:
            continue
        into.append(find_or_initialize(db, model, name))
        held.add(name)
    return into


def _attach(db: Session, user: User, model: Type[Named], names: Iterable[str]) -> list[Named]:
    attached: list[Named] = []
    for name in _unique_names(names):
        entity = resolve_or_create(db, model, name)
        link(db, user, entity)
        attached.append(entity)
    return attached


def attach_interests(db: Session, user: User, names: Iterable[str]) -> list[Interest]:
    """Link a stored user to interests by name. The caller commits."""
    return _attach(db, user, Interest, names)


def attach_skills(db: Session, user: User, names: Iterable[str]) -> list[Skill]:
    """Link a stored user to skills by name. The caller commits."""
    return _attach(db, user, Skill, names)


def list_named(db: Session, model: Type[Named]) -> list[Named]:
    return list(db.execute(select(model).order_by(model.name)).scalars().all())
