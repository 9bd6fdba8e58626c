"""Reading and canonical writing of Registry.toml.

Reading goes through tomllib. Writing uses a fixed layout so that an unchanged
registry is written back byte-for-byte identically:

    name = "General"
    uuid = "23338594-aafe-5451-b93e-139f81909106"
    repo = "https://github.com/JuliaRegistries/General.git"

    description = \"\"\"
    ...\"\"\"
    <extras, one key at a time, sorted>

    [packages]
    <package uuid> = { name = "Foo", path = "F/Foo" }
"""

import io
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any, TextIO

import tomlkit

from regedit.core.errors import FilesystemError, MalformedRegistryError
from regedit.registry.data import RegistryData
from regedit.registry.identity import parse_uuid

REGISTRY_FILE = "Registry.toml"

RegistrySource = Mapping[str, Any] | str | os.PathLike[str] | IO[str] | IO[bytes]

# ============================================================================
# Parsing
# ============================================================================


def parse_registry(source: RegistrySource) -> RegistryData:
    """Parse a registry from a TOML mapping, a file path or an open stream.

    Raises:
        MalformedRegistryError: If `name` or `uuid` is missing, or the TOML is invalid
        InvalidIdentifierError: If `uuid` is not a valid UUID
    """
    if isinstance(source, Mapping):
        return _registry_from_dict(source)
    if isinstance(source, str | os.PathLike):
        return load_registry(Path(source))

    content = source.read()
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    return parse_registry_text(content)


def parse_registry_text(text: str) -> RegistryData:
    """Parse a registry from Registry.toml contents."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise MalformedRegistryError(f"Registry is not valid TOML: {e}") from e
    return _registry_from_dict(data)


def load_registry(path: Path) -> RegistryData:
    """Parse the registry stored in the TOML file at `path`.

    Raises:
        FilesystemError: If the file cannot be read
        MalformedRegistryError: If the file is not a valid registry
    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise MalformedRegistryError(f"{path} is not valid TOML: {e}") from e
    except OSError as e:
        raise FilesystemError(f"Failed to read {path}: {e}", path=path) from e
    return _registry_from_dict(data)


def _registry_from_dict(data: Mapping[str, Any]) -> RegistryData:
    # Work on a copy: whatever is left after popping the modeled keys is `extras`.
    residual = dict(data)
    for required in ("name", "uuid"):
        if required not in residual:
            raise MalformedRegistryError.missing_field(required)

    name = residual.pop("name")
    uuid = parse_uuid(residual.pop("uuid"))
    repo = residual.pop("repo", None)
    description = residual.pop("description", None)
    packages = residual.pop("packages", {})

    return RegistryData(
        name=name,
        uuid=uuid,
        repo=repo,
        description=description,
        packages=dict(packages),
        extras=residual,
    )


# ============================================================================
# Writing
# ============================================================================


def _quote(value: str) -> str:
    return tomlkit.string(value).as_string()


def _is_table(value: Any) -> bool:
    if isinstance(value, Mapping):
        return True
    return isinstance(value, list) and bool(value) and all(isinstance(v, Mapping) for v in value)


def _extras_order(extras: Mapping[str, Any]) -> list[str]:
    # Plain key/value pairs must precede table headers, or a later plain key
    # would be read back as a member of the preceding table.
    return sorted(extras, key=lambda key: (_is_table(extras[key]), key))


def write_registry(stream: TextIO, reg: RegistryData) -> None:
    """Write `reg` to `stream` in canonical Registry.toml layout.

    A multi-line description is written verbatim between triple quotes with no
    escaping. One that contains a backslash or `\"\"\"` therefore yields text
    that does not parse as TOML.
    """
    stream.write(f"name = {_quote(reg.name)}\n")
    stream.write(f"uuid = {_quote(str(reg.uuid))}\n")

    if reg.repo is not None:
        stream.write(f"repo = {_quote(reg.repo)}\n")

    if reg.description is not None:
        # multi-line descriptions are written as a verbatim long-form string
        if "\n" in reg.description:
            stream.write(f'\ndescription = """\n{reg.description}"""\n')
        else:
            stream.write(f"description = {_quote(reg.description)}\n")

    for key in _extras_order(reg.extras):
        stream.write(tomlkit.dumps({key: reg.extras[key]}, sort_keys=True))

    stream.write("\n[packages]\n")
    for pkg_uuid, entry in sorted(reg.packages.items()):
        stream.write(
            f"{pkg_uuid} = {{ name = {_quote(entry['name'])}, path = {_quote(entry['path'])} }}\n"
        )


def dumps_registry(reg: RegistryData) -> str:
    """Return the canonical Registry.toml text of `reg`."""
    buffer = io.StringIO()
    write_registry(buffer, reg)
    return buffer.getvalue()


def save_registry(path: Path, reg: RegistryData) -> None:
    """Write `reg` to the file at `path` with LF line endings on every platform.

    Raises:
        FilesystemError: If the file cannot be written
    """
    text = dumps_registry(reg)
    try:
        with path.open("w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as e:
        raise FilesystemError(f"Failed to write {path}: {e}", path=path) from e
