"""Schema repositories: where a resolver looks for schema documents."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import yaml

from iglu_client.core import SchemaKey

EMBEDDED_ROOT = Path(__file__).resolve().parent / "embedded"
_SUFFIXES = ("", ".json", ".yaml", ".yml")


class SchemaNotFound(LookupError):
    """Raised when a repository holds no document for a schema key."""


class Repository(Protocol):
    name: str
    priority: int
    vendor_prefixes: tuple[str, ...]

    def read(self, key: SchemaKey) -> dict[str, Any]:
        ...


@dataclass(frozen=True)
class LocalRepository:
    """Directory repository laid out as ``<root>/schemas/<vendor>/<name>/<format>/<version>``."""

    name: str
    root: Path
    priority: int = 0
    vendor_prefixes: tuple[str, ...] = ()

    def read(self, key: SchemaKey) -> dict[str, Any]:
        path = self._locate(key)
        text = path.read_text(encoding="utf-8")
        if path.suffix in (".yaml", ".yml"):
            try:
                document = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ValueError(f"invalid YAML schema {path}: {exc}") from exc
        else:
            document = json.loads(text)
        if not isinstance(document, dict):
            raise ValueError(f"schema is not a mapping: {path}")
        return document

    def _locate(self, key: SchemaKey) -> Path:
        schemas_root = (self.root / "schemas").resolve()
        base = (schemas_root / key.to_path()).resolve()
        if schemas_root not in base.parents:
            raise SchemaNotFound(f"{key.to_schema_uri()} escapes repository {self.name}")
        for suffix in _SUFFIXES:
            candidate = base.with_name(base.name + suffix)
            if candidate.is_file():
                return candidate
        raise SchemaNotFound(f"{key.to_schema_uri()} not found in repository {self.name}")


def embedded_repository() -> LocalRepository:
    """Schemas bundled with the client (the self-describing meta-schemas)."""
    return LocalRepository(
        name="Iglu Client Embedded",
        root=EMBEDDED_ROOT,
        priority=0,
        vendor_prefixes=("com.snowplowanalytics",),
    )


def matches_vendor(repository: Repository, vendor: str) -> bool:
    return any(vendor.startswith(prefix) for prefix in repository.vendor_prefixes)
