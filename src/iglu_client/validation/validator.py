"""Resolution-aware validation of self-describing JSON.

Every operation returns a ValidationResult. Stages run in sequence and the
first failing stage ends the call, so a failed result carries the errors of
exactly one stage:

    split -> parse key -> [criterion] -> envelope shape -> resolve -> payload

The pure stages come first: a malformed envelope, an unparseable key or a
criterion mismatch is reported without calling the resolver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from iglu_client.core import SchemaCriterion, SchemaKey, SchemaVerFull

from .engine import compile_schema, run_validator
from .envelope import identify_envelope
from .errors import ErrorKind, ProcessingMessage, ValidationResult

logger = logging.getLogger(__name__)

MAX_LOOKUP_ATTEMPTS = 3
DATA_POINTER = "/data"

SELF_DESCRIBING_SCHEMA_KEY = SchemaKey(
    vendor="com.snowplowanalytics.self-desc",
    name="instance-iglu-only",
    format="jsonschema",
    version=SchemaVerFull(1, 0, 0),
)


class Resolver(Protocol):
    def lookup_schema(self, key: SchemaKey, max_attempts: int) -> ValidationResult[dict[str, Any]]:
        ...


def validate_against_schema(instance: Any, schema_doc: Any) -> ValidationResult[Any]:
    compiled = compile_schema(schema_doc)
    if not compiled.is_valid:
        return ValidationResult.from_errors(compiled.errors)
    return run_validator(compiled.value, instance)


def validate_as_self_describing(resolver: Resolver, instance: Any) -> ValidationResult[Any]:
    """Check only the envelope shape, using the self-describing meta-schema."""
    meta_schema = resolver.lookup_schema(SELF_DESCRIBING_SCHEMA_KEY, MAX_LOOKUP_ATTEMPTS)
    if not meta_schema.is_valid:
        logger.info("Self-describing meta-schema lookup failed key=%s", SELF_DESCRIBING_SCHEMA_KEY)
        return ValidationResult.from_errors(meta_schema.errors)
    return validate_against_schema(instance, meta_schema.value)


def validate_and_identify_schema(
    resolver: Resolver,
    instance: Any,
    data_only: bool = False,
) -> ValidationResult[tuple[SchemaKey, Any]]:
    identified = identify_envelope(instance)
    if not identified.is_valid:
        return ValidationResult.from_errors(identified.errors)
    key, data = identified.value
    validated = _validate_identified(resolver, instance, key, data)
    if not validated.is_valid:
        return ValidationResult.from_errors(validated.errors)
    return ValidationResult.valid((key, data if data_only else instance))


def verify_schema_and_validate(
    resolver: Resolver,
    instance: Any,
    criterion: SchemaCriterion,
    data_only: bool = False,
) -> ValidationResult[Any]:
    identified = identify_envelope(instance)
    if not identified.is_valid:
        return ValidationResult.from_errors(identified.errors)
    key, data = identified.value
    if not criterion.matches(key):
        logger.info("Schema criterion mismatch criterion=%s key=%s", criterion, key)
        return ValidationResult.invalid(
            ProcessingMessage(
                message=f"Verifying schema as {criterion.as_string()} failed: found {key.to_schema_uri()}",
                json_path="/schema",
                kind=ErrorKind.SCHEMA_CRITERION_MISMATCH,
            )
        )
    validated = _validate_identified(resolver, instance, key, data)
    if not validated.is_valid:
        return ValidationResult.from_errors(validated.errors)
    return ValidationResult.valid(data if data_only else instance)


def _validate_identified(
    resolver: Resolver,
    instance: Any,
    key: SchemaKey,
    data: Any,
) -> ValidationResult[Any]:
    shape = validate_as_self_describing(resolver, instance)
    if not shape.is_valid:
        return shape
    schema = resolver.lookup_schema(key, MAX_LOOKUP_ATTEMPTS)
    if not schema.is_valid:
        logger.info("Schema lookup failed key=%s", key)
        return ValidationResult.from_errors(schema.errors)
    result = validate_against_schema(data, schema.value)
    if not result.is_valid:
        logger.debug("Payload validation failed key=%s errors=%d", key, len(result.errors))
        return result.map_errors(lambda message: message.rerooted(DATA_POINTER))
    return result


@dataclass(frozen=True)
class SelfDescribingValidator:
    """The validation operations bound to one resolver."""

    resolver: Resolver

    def validate_against_schema(self, instance: Any, schema_doc: Any) -> ValidationResult[Any]:
        return validate_against_schema(instance, schema_doc)

    def validate_as_self_describing(self, instance: Any) -> ValidationResult[Any]:
        return validate_as_self_describing(self.resolver, instance)

    def validate_and_identify_schema(
        self, instance: Any, data_only: bool = False
    ) -> ValidationResult[tuple[SchemaKey, Any]]:
        return validate_and_identify_schema(self.resolver, instance, data_only)

    def verify_schema_and_validate(
        self, instance: Any, criterion: SchemaCriterion, data_only: bool = False
    ) -> ValidationResult[Any]:
        return verify_schema_and_validate(self.resolver, instance, criterion, data_only)

    def validate(self, instance: Any, data_only: bool = False) -> ValidationResult[Any]:
        """Validate and drop the schema key from the result."""
        return self.validate_and_identify_schema(instance, data_only).map(lambda pair: pair[1])
