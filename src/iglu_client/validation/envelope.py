"""Self-describing envelope splitting: ``{"schema": <key>, "data": <payload>}``."""

from __future__ import annotations

import json
from typing import Any, Mapping

from iglu_client.core import ParseError, SchemaKey

from .errors import ErrorKind, ProcessingMessage, ValidationResult

MAX_RENDERED_CHARS = 2048


def split_envelope(instance: Any) -> ValidationResult[tuple[str, Any]]:
    if isinstance(instance, Mapping):
        key_string = instance.get("schema")
        if isinstance(key_string, str) and "data" in instance:
            return ValidationResult.valid((key_string, instance["data"]))
    return ValidationResult.invalid(
        ProcessingMessage(
            message=f"Malformed JSON: {render_instance(instance)}",
            kind=ErrorKind.MALFORMED_ENVELOPE,
        )
    )


def identify_envelope(instance: Any) -> ValidationResult[tuple[SchemaKey, Any]]:
    split = split_envelope(instance)
    if not split.is_valid:
        return ValidationResult.from_errors(split.errors)
    key_string, data = split.value
    try:
        key = SchemaKey.parse(key_string)
    except ParseError as exc:
        return ValidationResult.invalid(
            ProcessingMessage(
                message=str(exc),
                json_path="/schema",
                kind=ErrorKind.KEY_PARSE_ERROR,
            )
        )
    return ValidationResult.valid((key, data))


def render_instance(instance: Any, limit: int = MAX_RENDERED_CHARS) -> str:
    rendered = json.dumps(instance, indent=2, ensure_ascii=False, default=repr)
    if len(rendered) <= limit:
        return rendered
    return f"{rendered[:limit]}... ({len(rendered) - limit} more characters)"
