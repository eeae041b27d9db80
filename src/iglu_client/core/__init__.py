"""Iglu core value types (schema keys, versions, criteria)."""

from .criterion import SchemaCriterion
from .schema_key import SchemaKey
from .schema_ver import (
    ParseError,
    SchemaVer,
    SchemaVerFull,
    SchemaVerPartial,
    parse_full_schema_ver,
    parse_schema_ver,
)

__all__ = [
    "ParseError",
    "SchemaCriterion",
    "SchemaKey",
    "SchemaVer",
    "SchemaVerFull",
    "SchemaVerPartial",
    "parse_full_schema_ver",
    "parse_schema_ver",
]
