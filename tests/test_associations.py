from __future__ import annotations

from sqlalchemy import inspect

from app.models.interest import Interest
from app.models.links import InterestsUser, SkillsUser
from app.models.skills import Skill
from app.services import associations
from app.services.associations import (
    attach_interests,
    attach_skills,
    collect,
    find_or_initialize,
    is_linked,
    link,
    resolve_or_create,
    unlink_all_for,
)
from app.services.user_service import create_user


def test_find_or_initialize_returns_stored_or_unsaved_entity(db) -> None:
    db.add(Interest(name="chess"))
    db.commit()

    stored = find_or_initialize(db, Interest, "chess")
    assert stored.id is not None

    fresh = find_or_initialize(db, Interest, "hiking")
    assert fresh.id is None
    assert inspect(fresh).transient
    assert db.query(Interest).count() == 1


def test_collect_keeps_first_seen_order_without_duplicates(db) -> None:
    held: list[Skill] = []
    collect(db, Skill, ["sql", "python", "sql"], held)
    collect(db, Skill, ["python", "go"], held)
    assert [item.name for item in held] == ["sql", "python", "go"]


def test_resolve_or_create_inserts_once(db) -> None:
    first = resolve_or_create(db, Interest, "hiking")
    db.commit()
    second = resolve_or_create(db, Interest, "hiking")

    assert first.id is not None
    assert second.id == first.id
    assert db.query(Interest).filter(Interest.name == "hiking").count() == 1


def test_resolve_or_create_reuses_row_inserted_by_another_writer(db, monkeypatch) -> None:
    db.add(Interest(name="hiking"))
    db.commit()
    stored_id = db.query(Interest).filter(Interest.name == "hiking").one().id

    real_find = associations.find_by_name
    calls: list[tuple[str, bool]] = []

    def stale_first_lookup(session, model, name, *, lock=False):
        calls.append((name, lock))
        if len(calls) == 1:
            return None
        return real_find(session, model, name, lock=lock)

    monkeypatch.setattr(associations, "find_by_name", stale_first_lookup)

    resolved = resolve_or_create(db, Interest, "hiking")
    db.commit()

    assert resolved.id == stored_id
    assert calls == [("hiking", False), ("hiking", True)]
    assert db.query(Interest).filter(Interest.name == "hiking").count() == 1


def test_link_is_idempotent(db, make_payload) -> None:
    user = create_user(db, make_payload()).user
    chess = resolve_or_create(db, Interest, "chess")

    assert link(db, user, chess) is not None
    assert link(db, user, chess) is None
    db.commit()

    assert link(db, user, chess) is None
    assert is_linked(db, user.id, chess) is True
    assert db.query(InterestsUser).count() == 1


def test_is_linked_is_false_for_unsaved_records(db, make_payload) -> None:
    user = create_user(db, make_payload()).user
    assert is_linked(db, user.id, Interest(name="new")) is False
    assert is_linked(db, None, Skill(name="new")) is False


def test_attach_on_stored_user_adds_only_missing_links(db, make_payload) -> None:
    user = create_user(db, make_payload(interests=["chess"], skills=["python"])).user

    attach_interests(db, user, ["chess", "hiking", "hiking"])
    attach_skills(db, user, ["python", "sql"])
    db.commit()

    assert [item.name for item in user.interests] == ["chess", "hiking"]
    assert [item.name for item in user.skills] == ["python", "sql"]
    assert db.query(InterestsUser).count() == 2
    assert db.query(SkillsUser).count() == 2


def test_unlink_all_for_only_touches_one_user(db, make_payload) -> None:
    first = create_user(db, make_payload(email="a@example.com", interests=["chess", "go"], skills=["python"])).user
    second = create_user(db, make_payload(email="b@example.com", interests=["chess"])).user
    first_id, second_id = first.id, second.id

    removed = unlink_all_for(db, first_id)
    db.commit()

    assert removed == 3
    assert db.query(InterestsUser).filter(InterestsUser.user_id == first_id).count() == 0
    assert db.query(SkillsUser).filter(SkillsUser.user_id == first_id).count() == 0
    assert db.query(InterestsUser).filter(InterestsUser.user_id == second_id).count() == 1
    assert db.query(Interest).count() == 2
    assert db.query(Skill).count() == 1
