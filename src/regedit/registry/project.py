"""Package project metadata consumed when registering a package."""

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from regedit.registry.identity import parse_uuid


@dataclass(frozen=True)
class Project:
    """The parts of a package's Project.toml that a registry records."""

    name: str
    uuid: UUID
    version: str | None = None

    @staticmethod
    def from_dict(data: Mapping[str, object], *, source: str = "project") -> "Project":
        """Build a Project from parsed Project.toml contents.

        Raises:
            ValueError: If `name` or `uuid` is missing
            InvalidIdentifierError: If `uuid` is not a valid UUID
        """
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"Missing 'name' in {source}")
        raw_uuid = data.get("uuid")
        if raw_uuid is None:
            raise ValueError(f"Missing 'uuid' in {source}")
        version = data.get("version")
        return Project(
            name=name,
            uuid=parse_uuid(raw_uuid),  # type: ignore[arg-type]
            version=str(version) if version is not None else None,
        )

    @staticmethod
    def from_file(path: Path) -> "Project":
        """Load a Project from a Project.toml file."""
        with path.open("rb") as f:
            data = tomllib.load(f)
        return Project.from_dict(data, source=str(path))
