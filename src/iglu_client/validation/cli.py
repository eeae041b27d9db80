"""Validate self-describing JSON from the command line."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from iglu_client.core import ParseError, SchemaCriterion
from iglu_client.resolver import RegistryResolver, ResolverConfigError, load_resolver_config

from .errors import ValidationResult
from iglu_client.logging_utils import configure_logging
from .validator import SelfDescribingValidator

logger = logging.getLogger(__name__)

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate self-describing JSON against Iglu schemas")
    parser.add_argument("--input", required=True, help="Path to a JSON document, or - for stdin")
    parser.add_argument("--resolver-config", help="Path to resolver YAML (embedded schemas only if omitted)")
    parser.add_argument("--criterion", help="Require the schema to match, e.g. iglu:com.acme/event/jsonschema/1-*-*")
    parser.add_argument("--data-only", action="store_true", help="Emit only the data payload on success")
    parser.add_argument(
        "--schema-only",
        action="store_true",
        help="Only check the envelope shape against the self-describing meta-schema",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default WARNING)")
    args = parser.parse_args(argv)

    configure_logging(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    try:
        resolver = _build_resolver(args.resolver_config)
        criterion = SchemaCriterion.parse(args.criterion) if args.criterion else None
        instance = _read_input(args.input)
    except (ResolverConfigError, ParseError, OSError, ValueError) as exc:
        logger.error("iglu-validate setup failed: %s", exc)
        print(json.dumps({"valid": False, "error": str(exc)}, ensure_ascii=True))
        return EXIT_USAGE

    validator = SelfDescribingValidator(resolver)
    if args.schema_only:
        result = validator.validate_as_self_describing(instance)
        return _emit(result, {"data": instance})
    if criterion is not None:
        result = validator.verify_schema_and_validate(instance, criterion, data_only=args.data_only)
        return _emit(result, {"data": result.value if result.is_valid else None})
    identified = validator.validate_and_identify_schema(instance, data_only=args.data_only)
    if not identified.is_valid:
        return _emit(identified, {})
    key, data = identified.value
    return _emit(identified, {"schema": key.to_schema_uri(), "data": data})


def _build_resolver(config_path: str | None) -> RegistryResolver:
    if not config_path:
        return RegistryResolver.bootstrap()
    return RegistryResolver.from_config(load_resolver_config(Path(config_path)))


def _read_input(source: str) -> Any:
    if source == "-":
        return json.loads(sys.stdin.read())
    return json.loads(Path(source).read_text(encoding="utf-8"))


def _emit(result: ValidationResult[Any], extra: dict[str, Any]) -> int:
    payload = result.as_dict()
    if result.is_valid:
        payload.update(extra)
    print(json.dumps(payload, ensure_ascii=True))
    return EXIT_VALID if result.is_valid else EXIT_INVALID


if __name__ == "__main__":
    raise SystemExit(main())
