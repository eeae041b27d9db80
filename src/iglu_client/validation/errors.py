"""Validation messages, non-empty error lists and result objects."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class ErrorKind(str, Enum):
    MALFORMED_ENVELOPE = "MALFORMED_ENVELOPE"
    KEY_PARSE_ERROR = "KEY_PARSE_ERROR"
    SCHEMA_CRITERION_MISMATCH = "SCHEMA_CRITERION_MISMATCH"
    RESOLUTION_FAILURE = "RESOLUTION_FAILURE"
    SCHEMA_COMPILE_FAILURE = "SCHEMA_COMPILE_FAILURE"
    STRUCTURAL_VIOLATION = "STRUCTURAL_VIOLATION"


@dataclass(frozen=True)
class ProcessingMessage:
    """One validation problem, shaped for display or structured logging."""

    message: str
    json_path: str | None = None
    keyword: str | None = None
    targets: tuple[str, ...] | None = None
    kind: ErrorKind | None = None

    def rerooted(self, prefix: str) -> "ProcessingMessage":
        if self.json_path is None:
            return self
        return replace(self, json_path=f"{prefix}{self.json_path}")

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message}
        if self.kind is not None:
            payload["kind"] = self.kind.value
        if self.json_path is not None:
            payload["jsonPath"] = self.json_path
        if self.keyword is not None:
            payload["keyword"] = self.keyword
        if self.targets is not None:
            payload["targets"] = list(self.targets)
        return payload

    def __str__(self) -> str:
        return json.dumps(self.as_dict(), ensure_ascii=True, separators=(",", ":"))


@dataclass(frozen=True)
class NonEmptyList(Generic[T]):
    head: T
    tail: tuple[T, ...] = ()

    @classmethod
    def of(cls, head: T, *tail: T) -> "NonEmptyList[T]":
        return cls(head, tuple(tail))

    @classmethod
    def from_iterable(cls, items: Iterable[T]) -> "NonEmptyList[T] | None":
        values = tuple(items)
        if not values:
            return None
        return cls(values[0], values[1:])

    def map(self, func: Callable[[T], U]) -> "NonEmptyList[U]":
        return NonEmptyList(func(self.head), tuple(func(item) for item in self.tail))

    def to_list(self) -> list[T]:
        return [self.head, *self.tail]

    def __iter__(self) -> Iterator[T]:
        yield self.head
        yield from self.tail

    def __len__(self) -> int:
        return 1 + len(self.tail)

    def __getitem__(self, index: int) -> T:
        return self.to_list()[index]


class ValidationFailed(RuntimeError):
    """Raised by ``ValidationResult.unwrap`` on a failed result."""

    def __init__(self, errors: NonEmptyList[ProcessingMessage]) -> None:
        self.errors = errors
        super().__init__("; ".join(item.message for item in errors))


_MISSING = object()


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Either a value or a non-empty, ordered list of ProcessingMessages."""

    _value: Any = _MISSING
    errors: NonEmptyList[ProcessingMessage] | None = None

    def __post_init__(self) -> None:
        if (self._value is _MISSING) == (self.errors is None):
            raise ValueError("ValidationResult needs exactly one of value or errors")

    @classmethod
    def valid(cls, value: T) -> "ValidationResult[T]":
        return cls(_value=value)

    @classmethod
    def invalid(cls, first: ProcessingMessage, *rest: ProcessingMessage) -> "ValidationResult[T]":
        return cls(errors=NonEmptyList.of(first, *rest))

    @classmethod
    def from_errors(cls, errors: NonEmptyList[ProcessingMessage]) -> "ValidationResult[T]":
        return cls(errors=errors)

    @property
    def is_valid(self) -> bool:
        return self.errors is None

    @property
    def value(self) -> T:
        if self.errors is not None:
            raise ValidationFailed(self.errors)
        return self._value

    def map(self, func: Callable[[T], U]) -> "ValidationResult[U]":
        if self.errors is not None:
            return ValidationResult(errors=self.errors)
        return ValidationResult(_value=func(self._value))

    def map_errors(
        self, func: Callable[[ProcessingMessage], ProcessingMessage]
    ) -> "ValidationResult[T]":
        if self.errors is None:
            return self
        return ValidationResult(errors=self.errors.map(func))

    def unwrap(self) -> T:
        return self.value

    def as_dict(self) -> dict[str, Any]:
        if self.errors is not None:
            return {"valid": False, "errors": [item.as_dict() for item in self.errors]}
        return {"valid": True}
