from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from iglu_client.core import SchemaKey
from iglu_client.resolver import (
    LocalRepository,
    RegistryResolver,
    RepositoryConfig,
    ResolverConfig,
    SchemaNotFound,
    embedded_repository,
)
from iglu_client.validation import SELF_DESCRIBING_SCHEMA_KEY, ErrorKind, validate_and_identify_schema

EVENT_KEY = SchemaKey.parse("iglu:com.acme/event/jsonschema/1-0-0")


def _write_schema(root: Path, key: SchemaKey, payload: dict[str, Any], suffix: str = "") -> Path:
    path = root / "schemas" / f"{key.to_path()}{suffix}"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_embedded_repository_serves_meta_schema() -> None:
    schema = RegistryResolver.bootstrap().lookup_schema(SELF_DESCRIBING_SCHEMA_KEY, 3).value
    assert schema["self"]["name"] == "instance-iglu-only"
    assert schema["required"] == ["schema", "data"]


def test_local_repository_reads_json_and_yaml(tmp_path: Path) -> None:
    _write_schema(tmp_path, EVENT_KEY, {"type": "object"})
    yaml_key = SchemaKey.parse("iglu:com.acme/other/jsonschema/1-0-0")
    path = tmp_path / "schemas" / f"{yaml_key.to_path()}.yaml"
    path.parent.mkdir(parents=True)
    path.write_text("type: string\nmaxLength: 3\n", encoding="utf-8")

    repo = LocalRepository(name="local", root=tmp_path)
    assert repo.read(EVENT_KEY) == {"type": "object"}
    assert repo.read(yaml_key) == {"type": "string", "maxLength": 3}


def test_local_repository_missing_schema(tmp_path: Path) -> None:
    repo = LocalRepository(name="local", root=tmp_path)
    with pytest.raises(SchemaNotFound, match="iglu:com.acme/event/jsonschema/1-0-0"):
        repo.read(EVENT_KEY)


def test_local_repository_refuses_paths_outside_root(tmp_path: Path) -> None:
    repo = LocalRepository(name="local", root=tmp_path / "repo")
    key = SchemaKey("..", "..", "secrets", EVENT_KEY.version)
    with pytest.raises(SchemaNotFound):
        repo.read(key)


def test_resolution_failure_lists_repositories(tmp_path: Path) -> None:
    resolver = RegistryResolver(repositories=[LocalRepository(name="local", root=tmp_path)])
    result = resolver.lookup_schema(EVENT_KEY, 3)
    assert len(result.errors) == 1
    error = result.errors.head
    assert error.kind is ErrorKind.RESOLUTION_FAILURE
    assert "iglu:com.acme/event/jsonschema/1-0-0" in error.message
    assert "local: not found" in error.message


def test_invalid_document_is_a_resolution_failure(tmp_path: Path) -> None:
    path = tmp_path / "schemas" / EVENT_KEY.to_path()
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    resolver = RegistryResolver(repositories=[LocalRepository(name="local", root=tmp_path)])
    result = resolver.lookup_schema(EVENT_KEY, 3)
    assert result.errors.head.kind is ErrorKind.RESOLUTION_FAILURE


def test_vendor_prefix_then_priority_order(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    third = tmp_path / "third"
    _write_schema(first, EVENT_KEY, {"description": "first"})
    _write_schema(second, EVENT_KEY, {"description": "second"})
    _write_schema(third, EVENT_KEY, {"description": "third"})
    resolver = RegistryResolver(
        repositories=[
            LocalRepository(name="first", root=first, priority=0),
            LocalRepository(name="second", root=second, priority=5, vendor_prefixes=("com.acme",)),
            LocalRepository(name="third", root=third, priority=1, vendor_prefixes=("com.acme",)),
        ]
    )
    assert [repo.name for repo in resolver.ordered_repositories(EVENT_KEY)] == ["third", "second", "first"]
    assert resolver.lookup_schema(EVENT_KEY, 3).value == {"description": "third"}


class _FlakyRepository:
    name = "flaky"
    priority = 0
    vendor_prefixes: tuple[str, ...] = ()

    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.reads = 0

    def read(self, key: SchemaKey) -> dict[str, Any]:
        self.reads += 1
        if self.reads <= self.failures:
            raise OSError("transient read failure")
        return {"type": "object"}


def test_transient_errors_are_retried_within_attempt_budget() -> None:
    repo = _FlakyRepository(failures=2)
    resolver = RegistryResolver(repositories=[repo], retry_base_delay_seconds=0.0, retry_max_delay_seconds=0.0)
    assert resolver.lookup_schema(EVENT_KEY, 3).value == {"type": "object"}
    assert repo.reads == 3


def test_attempt_budget_exhaustion_fails() -> None:
    repo = _FlakyRepository(failures=5)
    resolver = RegistryResolver(repositories=[repo], retry_base_delay_seconds=0.0, retry_max_delay_seconds=0.0)
    result = resolver.lookup_schema(EVENT_KEY, 3)
    assert repo.reads == 3
    assert "transient read failure" in result.errors.head.message


def test_from_config_appends_embedded_repository(tmp_path: Path) -> None:
    _write_schema(tmp_path, EVENT_KEY, {"type": "object", "required": ["id"]})
    config = ResolverConfig(
        repositories=[RepositoryConfig(name="acme", path=str(tmp_path), vendor_prefixes=["com.acme"])]
    )
    resolver = RegistryResolver.from_config(config)
    assert [repo.name for repo in resolver.repositories] == ["acme", embedded_repository().name]

    ok = validate_and_identify_schema(resolver, {"schema": EVENT_KEY.to_schema_uri(), "data": {"id": 1}})
    assert ok.is_valid
    bad = validate_and_identify_schema(resolver, {"schema": EVENT_KEY.to_schema_uri(), "data": {}})
    assert [error.json_path for error in bad.errors] == ["/data"]
