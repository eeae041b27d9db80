"""SchemaKey: the vendor/name/format/version identity of a schema."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .schema_ver import ParseError, SchemaVerFull, parse_full_schema_ver

IGLU_PREFIX = "iglu:"

_VENDOR_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")
_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


@dataclass(frozen=True)
class SchemaKey:
    vendor: str
    name: str
    format: str
    version: SchemaVerFull

    @classmethod
    def parse(cls, text: str) -> "SchemaKey":
        """Parse ``iglu:vendor/name/format/M-R-A`` or the bare path form."""
        if not isinstance(text, str):
            raise ParseError(f"Schema key must be a string, got {type(text).__name__}")
        body = text[len(IGLU_PREFIX):] if text.startswith(IGLU_PREFIX) else text
        parts = body.split("/")
        if len(parts) != 4:
            raise ParseError(
                f"Schema key {text!r} must have 4 '/'-separated segments, found {len(parts)}"
            )
        vendor, name, fmt, version = parts
        for label, value in (("vendor", vendor), ("name", name), ("format", fmt), ("version", version)):
            if not value:
                raise ParseError(f"Schema key {text!r} has an empty {label} segment")
        if not _VENDOR_PATTERN.match(vendor):
            raise ParseError(f"Schema key {text!r} has an invalid vendor {vendor!r}")
        if not _NAME_PATTERN.match(name):
            raise ParseError(f"Schema key {text!r} has an invalid name {name!r}")
        if not _NAME_PATTERN.match(fmt):
            raise ParseError(f"Schema key {text!r} has an invalid format {fmt!r}")
        return cls(vendor=vendor, name=name, format=fmt, version=parse_full_schema_ver(version))

    def to_path(self) -> str:
        return f"{self.vendor}/{self.name}/{self.format}/{self.version.as_string()}"

    def to_schema_uri(self) -> str:
        return f"{IGLU_PREFIX}{self.to_path()}"

    def __str__(self) -> str:
        return self.to_schema_uri()
