"""SchemaCriterion: match schema keys by family and version range."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .schema_key import IGLU_PREFIX, SchemaKey
from .schema_ver import ParseError

_VERSION_PATTERN = re.compile(r"^([1-9][0-9]*|\*)-(0|[1-9][0-9]*|\*)-(0|[1-9][0-9]*|\*)$")


@dataclass(frozen=True)
class SchemaCriterion:
    """Partial matcher over a SchemaKey; ``None`` version parts act as ``*``."""

    vendor: str
    name: str
    format: str
    model: int | None = None
    revision: int | None = None
    addition: int | None = None

    def __post_init__(self) -> None:
        parts = (self.model, self.revision, self.addition)
        seen_wildcard = False
        for part in parts:
            if part is None:
                seen_wildcard = True
            elif seen_wildcard:
                raise ParseError(f"Wildcards must be trailing in criterion {self.as_string()!r}")

    @classmethod
    def parse(cls, text: str) -> "SchemaCriterion":
        if not isinstance(text, str):
            raise ParseError(f"Schema criterion must be a string, got {type(text).__name__}")
        body = text[len(IGLU_PREFIX):] if text.startswith(IGLU_PREFIX) else text
        parts = body.split("/")
        if len(parts) != 4 or not all(parts):
            raise ParseError(f"Invalid schema criterion: {text!r}")
        vendor, name, fmt, version = parts
        match = _VERSION_PATTERN.match(version)
        if not match:
            raise ParseError(f"Invalid schema criterion version: {text!r}")
        model, revision, addition = (None if group == "*" else int(group) for group in match.groups())
        return cls(vendor, name, fmt, model, revision, addition)

    def matches(self, key: SchemaKey) -> bool:
        if (self.vendor, self.name, self.format) != (key.vendor, key.name, key.format):
            return False
        expected = (self.model, self.revision, self.addition)
        actual = (key.version.model, key.version.revision, key.version.addition)
        return all(want is None or want == got for want, got in zip(expected, actual))

    def version_string(self) -> str:
        parts = (self.model, self.revision, self.addition)
        return "-".join("*" if part is None else str(part) for part in parts)

    def as_string(self) -> str:
        return f"{IGLU_PREFIX}{self.vendor}/{self.name}/{self.format}/{self.version_string()}"

    def __str__(self) -> str:
        return self.as_string()
