from __future__ import annotations

import threading
from typing import Any

from app.database import SessionLocal
from app.models.interest import Interest
from app.models.links import InterestsUser
from app.models.user import User
from app.services.user_service import create_user


def _run_concurrently(payloads: list[dict[str, Any]]) -> list[tuple[bool, dict[str, list[str]]]]:
    barrier = threading.Barrier(len(payloads))
    outcomes: list[Any] = [None] * len(payloads)
    failures: list[BaseException] = []

    def worker(index: int, payload: dict[str, Any]) -> None:
        try:
            barrier.wait(timeout=10)
            with SessionLocal() as session:
                result = create_user(session, payload)
                outcomes[index] = (result.success, result.errors.as_dict())
        except BaseException as exc:  # re-raised in the main thread below
            failures.append(exc)

    threads = [threading.Thread(target=worker, args=(i, p)) for i, p in enumerate(payloads)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    if failures:
        raise failures[0]
    return outcomes


def test_concurrent_creates_share_one_new_interest(make_payload) -> None:
    outcomes = _run_concurrently(
        [
            make_payload(email="first@example.com", interests=["hiking"]),
            make_payload(email="second@example.com", interests=["hiking"]),
        ]
    )

    assert outcomes == [(True, {}), (True, {})]
    with SessionLocal() as session:
        hiking = session.query(Interest).filter(Interest.name == "hiking").all()
        assert len(hiking) == 1
        assert {user.email for user in hiking[0].users} == {"first@example.com", "second@example.com"}
        assert session.query(InterestsUser).count() == 2


def test_concurrent_creates_with_same_email_store_one_user(make_payload) -> None:
    outcomes = _run_concurrently(
        [
            make_payload(email="Same@Example.com", interests=["chess"]),
            make_payload(email="same@example.com", interests=["go"]),
        ]
    )

    assert sorted(success for success, _ in outcomes) == [False, True]
    failed = next(errors for success, errors in outcomes if not success)
    assert failed == {"email": ["has already been taken"]}
    with SessionLocal() as session:
        assert session.query(User).count() == 1
        stored = session.query(User).one()
        assert len(stored.interests) == 1
