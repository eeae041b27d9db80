"""Self-describing JSON validation."""

from .errors import ErrorKind, NonEmptyList, ProcessingMessage, ValidationFailed, ValidationResult
from .validator import (
    SELF_DESCRIBING_SCHEMA_KEY,
    Resolver,
    SelfDescribingValidator,
    validate_against_schema,
    validate_and_identify_schema,
    validate_as_self_describing,
    verify_schema_and_validate,
)

__all__ = [
    "ErrorKind",
    "NonEmptyList",
    "ProcessingMessage",
    "Resolver",
    "SELF_DESCRIBING_SCHEMA_KEY",
    "SelfDescribingValidator",
    "ValidationFailed",
    "ValidationResult",
    "validate_against_schema",
    "validate_and_identify_schema",
    "validate_as_self_describing",
    "verify_schema_and_validate",
]
