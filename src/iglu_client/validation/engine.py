"""JSON Schema engine adapter (jsonschema + referencing).

Compiles a schema document into a jsonschema validator and translates the
engine's errors into ProcessingMessages. Every error the engine reports is
kept, in the order the engine yields it.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping

from jsonschema import Draft4Validator
from jsonschema.exceptions import SchemaError, ValidationError
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for
from referencing import Registry, Resource
from referencing.exceptions import NoSuchResource, Unresolvable

from .errors import ErrorKind, NonEmptyList, ProcessingMessage, ValidationResult

logger = logging.getLogger(__name__)

SELF_DESCRIBING_META_SCHEMA_URI = (
    "http://iglucentral.com/schemas/com.snowplowanalytics.self-desc/schema/jsonschema/1-0-0#"
)
DEFAULT_VALIDATOR = Draft4Validator


class UnknownMetaSchemaError(ValueError):
    """Raised when ``$schema`` names a dialect the engine does not know."""


@dataclass(frozen=True)
class CompiledSchema:
    schema: Mapping[str, Any]
    validator: Validator


def compile_schema(schema_doc: Any) -> ValidationResult[CompiledSchema]:
    if not isinstance(schema_doc, Mapping):
        return _compile_failure(
            f"Schema document must be a JSON object, got {_json_type(schema_doc)}"
        )
    try:
        validator_cls = _validator_class_for(schema_doc)
        validator_cls.check_schema(schema_doc)
    except UnknownMetaSchemaError as exc:
        return _compile_failure(str(exc))
    except SchemaError as exc:
        return _compile_failure(f"Invalid schema: {exc.message}")
    registry: Registry = Registry(retrieve=_refuse_retrieval)
    validator = validator_cls(
        schema_doc,
        registry=registry,
        format_checker=validator_cls.FORMAT_CHECKER,
    )
    return ValidationResult.valid(CompiledSchema(schema=schema_doc, validator=validator))


def run_validator(compiled: CompiledSchema, instance: Any) -> ValidationResult[Any]:
    try:
        messages = [to_processing_message(error) for error in compiled.validator.iter_errors(instance)]
    except Unresolvable as exc:
        return _compile_failure(f"Unresolvable reference in schema: {exc}")
    except re.error as exc:
        return _compile_failure(f"Invalid pattern in schema: {exc}")
    except RecursionError:
        return _compile_failure("Schema recursion limit exceeded")
    errors = NonEmptyList.from_iterable(messages)
    if errors is None:
        return ValidationResult.valid(instance)
    return ValidationResult.from_errors(errors)


def to_processing_message(error: ValidationError) -> ProcessingMessage:
    return ProcessingMessage(
        message=error.message,
        json_path=json_pointer(error.absolute_path),
        keyword=str(error.validator),
        targets=_targets(error),
        kind=ErrorKind.STRUCTURAL_VIOLATION,
    )


def json_pointer(parts: Any) -> str:
    return "".join("/" + str(part).replace("~", "~0").replace("/", "~1") for part in parts)


def _validator_class_for(schema_doc: Mapping[str, Any]) -> type[Validator]:
    if "$schema" not in schema_doc:
        return DEFAULT_VALIDATOR
    dialect = schema_doc["$schema"]
    if not isinstance(dialect, str):
        raise UnknownMetaSchemaError(f"Unknown MetaSchema: {json.dumps(dialect)}")
    if dialect.rstrip("#") == SELF_DESCRIBING_META_SCHEMA_URI.rstrip("#"):
        return DEFAULT_VALIDATOR
    stripped = dialect.rstrip("#")
    for candidate in (dialect, stripped, f"{stripped}#"):
        validator_cls = validator_for({"$schema": candidate}, default=None)
        if validator_cls is not None:
            return validator_cls
    raise UnknownMetaSchemaError(f"Unknown MetaSchema: {dialect}")


def _refuse_retrieval(uri: str) -> Resource[Any]:
    # Schemas are only ever supplied by the resolver; remote $refs are not fetched.
    raise NoSuchResource(uri)


def _targets(error: ValidationError) -> tuple[str, ...] | None:
    argument = error.validator_value
    if error.validator == "type":
        expected = argument if isinstance(argument, list) else [argument]
        return (_json_type(error.instance), _dump(expected))
    if error.validator == "required" and isinstance(error.instance, Mapping):
        required = list(argument) if isinstance(argument, list) else []
        missing = [name for name in required if f"{name!r} is a required property" == error.message]
        if not missing:
            missing = [name for name in required if name not in error.instance]
        return (_dump(sorted(required)), _dump(missing))
    if isinstance(argument, (str, int, float, list)) and not isinstance(argument, bool):
        return (_dump(argument),)
    return None


def _compile_failure(message: str) -> ValidationResult[Any]:
    logger.debug("schema compile failure: %s", message)
    return ValidationResult.invalid(
        ProcessingMessage(message=message, kind=ErrorKind.SCHEMA_COMPILE_FAILURE)
    )


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=True, separators=(",", ":"), sort_keys=True, default=str)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__
