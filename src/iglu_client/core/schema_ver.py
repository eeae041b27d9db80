"""SchemaVer: MODEL-REVISION-ADDITION versions for Iglu schemas."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

_FULL_PATTERN = re.compile(r"^([1-9][0-9]*)-(0|[1-9][0-9]*)-(0|[1-9][0-9]*)$")
_PARTIAL_PATTERN = re.compile(r"^([1-9][0-9]*|\?)-(0|[1-9][0-9]*|\?)-(0|[1-9][0-9]*|\?)$")


class ParseError(ValueError):
    """Raised when a schema key, version or criterion string is malformed."""


@dataclass(frozen=True, order=True)
class SchemaVerFull:
    model: int
    revision: int
    addition: int

    def as_string(self) -> str:
        return f"{self.model}-{self.revision}-{self.addition}"

    def __str__(self) -> str:
        return self.as_string()


@dataclass(frozen=True)
class SchemaVerPartial:
    """Version with unknown parts, e.g. ``1-?-?``."""

    model: int | None
    revision: int | None
    addition: int | None

    def as_string(self) -> str:
        parts = (self.model, self.revision, self.addition)
        return "-".join("?" if part is None else str(part) for part in parts)

    def __str__(self) -> str:
        return self.as_string()


SchemaVer = Union[SchemaVerFull, SchemaVerPartial]


def parse_schema_ver(text: str) -> SchemaVer:
    """Parse ``M-R-A`` into a full version, or ``M-?-?`` style into a partial one."""
    if not isinstance(text, str):
        raise ParseError(f"SchemaVer must be a string, got {type(text).__name__}")
    match = _FULL_PATTERN.match(text)
    if match:
        return SchemaVerFull(*(int(group) for group in match.groups()))
    match = _PARTIAL_PATTERN.match(text)
    if match:
        return SchemaVerPartial(*(None if group == "?" else int(group) for group in match.groups()))
    raise ParseError(f"Invalid SchemaVer: {text!r}")


def parse_full_schema_ver(text: str) -> SchemaVerFull:
    version = parse_schema_ver(text)
    if not isinstance(version, SchemaVerFull):
        raise ParseError(f"Partial SchemaVer is not allowed here: {text!r}")
    return version
