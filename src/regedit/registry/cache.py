"""Local cache of registry working trees.

Each registry lives in a subdirectory of the cache root named after the
registry's UUID. The cache remembers which UUID every registry URL resolved to.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from uuid import UUID

import tomlkit

from regedit.registry.identity import parse_uuid

INDEX_FILE = "registries.toml"


@dataclass
class RegistryCache:
    """Registry working trees rooted at `path`.

    `registries` maps registry URLs to UUIDs. Entries are added by
    get_registry() the first time a URL is synchronized and never removed.
    A single cache root must not be synchronized from two places at once.
    """

    path: Path
    registries: dict[str, UUID] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    def registry_path(self, reg_uuid: UUID) -> Path:
        """Slot directory for the registry with `reg_uuid`."""
        return self.path / str(reg_uuid)

    def path_for(self, registry_url: str) -> Path:
        """Slot directory for a previously synchronized URL.

        Raises:
            KeyError: If `registry_url` has not been synchronized yet
        """
        return self.registry_path(self.registries[registry_url])

    def __contains__(self, registry_url: object) -> bool:
        return registry_url in self.registries

    @property
    def index_file(self) -> Path:
        return self.path / INDEX_FILE

    @staticmethod
    def load(path: Path) -> "RegistryCache":
        """Open the cache at `path`, restoring the URL index saved by save().

        A missing index file yields an empty index.

        Raises:
            InvalidIdentifierError: If the index holds a value that is not a UUID
        """
        cache = RegistryCache(path)
        if cache.index_file.exists():
            with cache.index_file.open("rb") as f:
                data = tomllib.load(f)
            for url, reg_uuid in data.get("registries", {}).items():
                cache.registries[url] = parse_uuid(reg_uuid)
        return cache

    def save(self) -> None:
        """Persist the URL index next to the working trees."""
        self.path.mkdir(parents=True, exist_ok=True)
        doc = tomlkit.document()
        table = tomlkit.table()
        for url in sorted(self.registries):
            table[url] = str(self.registries[url])
        doc["registries"] = table
        with self.index_file.open("w", encoding="utf-8", newline="\n") as f:
            tomlkit.dump(doc, f)
