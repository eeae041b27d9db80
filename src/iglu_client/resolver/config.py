"""Resolver configuration loader (YAML + ${VAR} expansion)."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


class ResolverConfigError(ValueError):
    """Raised when a resolver config file cannot be loaded."""


class RepositoryConfig(BaseModel):
    name: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1)
    priority: int = 0
    vendor_prefixes: list[str] = []


class ResolverConfig(BaseModel):
    repositories: list[RepositoryConfig] = []
    retry_base_delay_seconds: float = Field(0.1, ge=0)
    retry_max_delay_seconds: float = Field(1.0, ge=0)


def load_resolver_config(path: Path) -> ResolverConfig:
    """Load ``path``; the settings may sit at the top level or under ``resolver:``."""
    if not path.exists():
        raise ResolverConfigError(f"resolver config not found: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ResolverConfigError(f"resolver config is not a mapping: {path}")
    expanded = _expand_payload(data.get("resolver", data))
    if not isinstance(expanded, dict):
        raise ResolverConfigError(f"resolver section is not a mapping: {path}")
    try:
        config = ResolverConfig(**expanded)
    except ValidationError as exc:
        raise ResolverConfigError(f"invalid resolver config {path}: {exc}") from exc
    base = path.resolve().parent
    repositories = [
        repo.model_copy(update={"path": str(_anchor(Path(repo.path), base))})
        for repo in config.repositories
    ]
    return config.model_copy(update={"repositories": repositories})


def _anchor(path: Path, base: Path) -> Path:
    return path if path.is_absolute() else base / path


def _expand_str(value: str) -> str:
    def replacer(match: re.Match[str]) -> str:
        token = match.group(1)
        if ":-" in token:
            key, default = token.split(":-", 1)
            actual = os.getenv(key, "")
            return actual if actual.strip() else default
        actual = os.getenv(token, "")
        if not actual.strip():
            raise ResolverConfigError(f"missing environment variable: {token}")
        return actual

    return _VAR_PATTERN.sub(replacer, value)


def _expand_payload(value: Any) -> Any:
    if isinstance(value, str):
        return _expand_str(value)
    if isinstance(value, list):
        return [_expand_payload(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _expand_payload(item) for key, item in value.items()}
    return value
