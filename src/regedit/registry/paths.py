"""Storage paths of packages inside a registry tree."""

from regedit.core.errors import InvalidNameError


def package_relpath(name: str) -> str:
    """Return the registry-relative directory of package `name`.

    The first letter, upper-cased, followed by the full name: "Foo" -> "F/Foo".
    Always joined with "/" so Registry.toml is identical on every platform.

    Raises:
        InvalidNameError: If `name` is empty
    """
    if not name:
        raise InvalidNameError("Package name must not be empty")
    return "/".join([name[0].upper(), name])
