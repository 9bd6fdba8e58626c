"""In-memory model of a registry's Registry.toml."""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol
from uuid import UUID

from regedit.core.errors import MalformedRegistryError
from regedit.registry.identity import parse_uuid
from regedit.registry.paths import package_relpath

PackageEntry = dict[str, Any]


class ProjectLike(Protocol):
    """Anything carrying a package name and UUID, such as Project."""

    @property
    def name(self) -> str: ...

    @property
    def uuid(self) -> UUID | str: ...


@dataclass(frozen=True)
class RegistryData:
    """Parsed contents of a Registry.toml.

    `packages` maps package UUID strings to {"name": ..., "path": ...} records.
    `extras` holds every top-level field not modeled here, so that writing the
    registry back out preserves it. Scalar fields are fixed at construction;
    the package index is updated in place through push().
    """

    name: str
    uuid: UUID
    repo: str | None = None
    description: str | None = None
    packages: dict[str, PackageEntry] = field(default_factory=dict)
    extras: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def create(
        name: str,
        uuid: UUID | str,
        *,
        repo: str | None = None,
        description: str | None = None,
        packages: Mapping[str, Mapping[str, Any]] | None = None,
        extras: Mapping[str, Any] | None = None,
    ) -> "RegistryData":
        """Construct a registry from explicit fields.

        Package paths must be the ones package_relpath() derives from the names.

        Raises:
            InvalidIdentifierError: If `uuid` is not a valid UUID
            MalformedRegistryError: If a package entry lacks a name or has a
                hand-written path that disagrees with its name
        """
        index: dict[str, PackageEntry] = {}
        for key, entry in (packages or {}).items():
            pkg_name = entry.get("name")
            if not isinstance(pkg_name, str):
                raise MalformedRegistryError(f"Package {key} has no name", field="packages")
            expected = package_relpath(pkg_name)
            if entry.get("path") != expected:
                raise MalformedRegistryError(
                    f"Package {pkg_name} has path {entry.get('path')!r}, expected {expected!r}",
                    field="packages",
                )
            index[str(parse_uuid(key))] = dict(entry)

        return RegistryData(
            name=name,
            uuid=parse_uuid(uuid),
            repo=repo,
            description=description,
            packages=index,
            extras=dict(extras or {}),
        )

    def copy(self) -> "RegistryData":
        """Return a copy whose packages and extras can be mutated independently."""
        return RegistryData(
            name=self.name,
            uuid=self.uuid,
            repo=self.repo,
            description=self.description,
            packages=copy.deepcopy(self.packages),
            extras=copy.deepcopy(self.extras),
        )

    def push(self, project: ProjectLike) -> "RegistryData":
        return push(self, project)


def push(reg: RegistryData, project: ProjectLike) -> RegistryData:
    """Record `project` in the package index of `reg`.

    An existing entry with the same UUID is overwritten. Returns `reg` for chaining.
    """
    reg.packages[str(parse_uuid(project.uuid))] = {
        "name": project.name,
        "path": package_relpath(project.name),
    }
    return reg
