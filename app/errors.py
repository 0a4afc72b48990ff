from __future__ import annotations

from typing import Iterable, Iterator, Mapping


class ErrorReport:
    """Per-field collection of validation messages.

    Fields keep the order in which their first message was added, and a
    message is never recorded twice for the same field.
    """

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> None:
        bucket = self._messages.setdefault(field, [])
        if message not in bucket:
            bucket.append(message)

    def extend(self, pairs: Iterable[tuple[str, str]]) -> None:
        for field, message in pairs:
            self.add(field, message)

    def merge(self, other: "ErrorReport | Mapping[str, Iterable[str]]") -> None:
        source = other.as_dict() if isinstance(other, ErrorReport) else other
        for field, messages in source.items():
            for message in messages:
                self.add(field, message)

    def clear(self) -> None:
        self._messages.clear()

    def get(self, field: str) -> list[str]:
        return list(self._messages.get(field, []))

    def as_dict(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._messages.items()}

    def full_messages(self) -> list[str]:
        return [f"{field} {message}" for field, messages in self._messages.items() for message in messages]

    @property
    def fields(self) -> list[str]:
        return list(self._messages)

    def __contains__(self, field: object) -> bool:
        return field in self._messages

    def __iter__(self) -> Iterator[tuple[str, list[str]]]:
        return iter(self.as_dict().items())

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __repr__(self) -> str:
        return f"ErrorReport({self._messages!r})"


class InputError(ValueError):
    """Raised when interaction input is missing or malformed.

    Nothing has been constructed or written when this is raised.
    """

    def __init__(self, errors: Mapping[str, Iterable[str]]) -> None:
        self.errors: dict[str, list[str]] = {field: list(messages) for field, messages in errors.items()}
        summary = "; ".join(f"{field}: {', '.join(messages)}" for field, messages in self.errors.items())
        super().__init__(f"invalid input ({summary})" if summary else "invalid input")
