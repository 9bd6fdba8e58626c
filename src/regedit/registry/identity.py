"""UUID handling for registries and packages."""

from uuid import UUID

from regedit.core.errors import InvalidIdentifierError


def parse_uuid(value: UUID | str) -> UUID:
    """Return `value` as a UUID.

    Raises:
        InvalidIdentifierError: If `value` is neither a UUID nor a string parseable as one
    """
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise InvalidIdentifierError(value)
    try:
        return UUID(value)
    except ValueError as e:
        raise InvalidIdentifierError(value) from e
