"""Guard for commands that write a Registry.toml back to disk."""

from pathlib import Path

from regedit.cli.ensure import Ensure
from regedit.core.errors import MalformedRegistryError
from regedit.registry.codec import dumps_registry, parse_registry_text
from regedit.registry.data import RegistryData


def canonical_text(registry_file: Path, reg: RegistryData) -> str:
    """Canonical text of `reg`, or a styled error if it would not read back as `reg`.

    Multi-line descriptions are written verbatim, so some of them (for example
    one containing a backslash) produce text that is not valid TOML.
    """
    text = dumps_registry(reg)
    try:
        reparsed = parse_registry_text(text)
    except MalformedRegistryError as e:
        Ensure.fail(f"Refusing to write {registry_file}: canonical form cannot be read back ({e})")
    Ensure.invariant(
        reparsed == reg,
        f"Refusing to write {registry_file}: canonical form reads back as a different registry",
    )
    return text
