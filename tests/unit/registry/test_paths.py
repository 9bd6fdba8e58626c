"""Tests for package storage path derivation."""

import pytest

from regedit.core.errors import InvalidNameError
from regedit.registry.paths import package_relpath


def test_package_relpath_uses_first_letter_directory() -> None:
    assert package_relpath("Foo") == "F/Foo"


def test_package_relpath_uppercases_first_letter() -> None:
    assert package_relpath("example") == "E/example"


def test_package_relpath_single_character_name() -> None:
    assert package_relpath("x") == "X/x"


def test_package_relpath_always_uses_forward_slash() -> None:
    """Paths written to Registry.toml must not depend on the host OS."""
    assert "\\" not in package_relpath("Windows")
    assert package_relpath("Windows") == "W/Windows"


def test_package_relpath_is_deterministic() -> None:
    assert package_relpath("JSON") == package_relpath("JSON")


def test_package_relpath_rejects_empty_name() -> None:
    with pytest.raises(InvalidNameError):
        package_relpath("")
