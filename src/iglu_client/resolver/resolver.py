"""Repository-backed schema resolver."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from iglu_client.core import SchemaKey
from iglu_client.validation.errors import ErrorKind, ProcessingMessage, ValidationResult

from .config import ResolverConfig
from .repositories import LocalRepository, Repository, SchemaNotFound, embedded_repository, matches_vendor
from .retry import with_retry

logger = logging.getLogger(__name__)


@dataclass
class RegistryResolver:
    """Looks a key up in each repository until one returns a document.

    Repositories whose vendor prefixes match the key are consulted first,
    then the rest; within each group lower ``priority`` wins and ties keep
    configuration order. Nothing is cached.
    """

    repositories: list[Repository] = field(default_factory=list)
    retry_base_delay_seconds: float = 0.1
    retry_max_delay_seconds: float = 1.0

    @classmethod
    def bootstrap(cls) -> "RegistryResolver":
        return cls(repositories=[embedded_repository()])

    @classmethod
    def from_config(cls, config: ResolverConfig) -> "RegistryResolver":
        repositories: list[Repository] = [
            LocalRepository(
                name=repo.name,
                root=Path(repo.path),
                priority=repo.priority,
                vendor_prefixes=tuple(repo.vendor_prefixes),
            )
            for repo in config.repositories
        ]
        repositories.append(embedded_repository())
        return cls(
            repositories=repositories,
            retry_base_delay_seconds=config.retry_base_delay_seconds,
            retry_max_delay_seconds=config.retry_max_delay_seconds,
        )

    def lookup_schema(self, key: SchemaKey, max_attempts: int = 3) -> ValidationResult[dict[str, Any]]:
        failures: list[str] = []
        for repository in self.ordered_repositories(key):
            try:
                schema = with_retry(
                    lambda: repository.read(key),
                    attempts=max_attempts,
                    retry_on=(OSError,),
                    base_delay_seconds=self.retry_base_delay_seconds,
                    max_delay_seconds=self.retry_max_delay_seconds,
                    on_retry=lambda attempt, delay, exc: logger.warning(
                        "Resolver retry repo=%s key=%s attempt=%s delay=%.2fs error=%s",
                        repository.name,
                        key.to_schema_uri(),
                        attempt,
                        delay,
                        exc,
                    ),
                )
            except SchemaNotFound:
                failures.append(f"{repository.name}: not found")
                continue
            except (OSError, ValueError) as exc:
                logger.warning("Resolver read failed repo=%s key=%s error=%s", repository.name, key, exc)
                failures.append(f"{repository.name}: {exc}")
                continue
            logger.debug("Resolver hit repo=%s key=%s", repository.name, key)
            return ValidationResult.valid(schema)
        tried = "; ".join(failures) if failures else "no repositories configured"
        return ValidationResult.invalid(
            ProcessingMessage(
                message=f"Could not find schema with key {key.to_schema_uri()} ({tried})",
                kind=ErrorKind.RESOLUTION_FAILURE,
            )
        )

    def ordered_repositories(self, key: SchemaKey) -> list[Repository]:
        indexed = list(enumerate(self.repositories))
        indexed.sort(key=lambda item: (not matches_vendor(item[1], key.vendor), item[1].priority, item[0]))
        return [repository for _, repository in indexed]
