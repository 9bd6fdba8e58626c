"""Local registry cache and canonical Registry.toml handling."""

from regedit.registry.cache import RegistryCache
from regedit.registry.codec import (
    dumps_registry,
    parse_registry,
    parse_registry_text,
    save_registry,
    write_registry,
)
from regedit.registry.data import RegistryData, push
from regedit.registry.paths import package_relpath
from regedit.registry.project import Project
from regedit.registry.sync import WorkingTree, get_registry

__all__ = [
    "Project",
    "RegistryCache",
    "RegistryData",
    "WorkingTree",
    "dumps_registry",
    "get_registry",
    "package_relpath",
    "parse_registry",
    "parse_registry_text",
    "push",
    "save_registry",
    "write_registry",
]
