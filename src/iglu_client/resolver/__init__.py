"""Schema resolution: repositories, config and the registry resolver."""

from .config import RepositoryConfig, ResolverConfig, ResolverConfigError, load_resolver_config
from .repositories import LocalRepository, SchemaNotFound, embedded_repository
from .resolver import RegistryResolver

__all__ = [
    "LocalRepository",
    "RegistryResolver",
    "RepositoryConfig",
    "ResolverConfig",
    "ResolverConfigError",
    "SchemaNotFound",
    "embedded_repository",
    "load_resolver_config",
]
