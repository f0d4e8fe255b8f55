"""Identifier issuance for students and teachers."""

from uuid import UUID, uuid4


def new_id() -> UUID:
    """Return a fresh random (version 4) identifier."""
    return uuid4()


def parse_id(raw: str) -> UUID | None:
    """Parse an identifier from a URL segment, returning None when malformed."""
    try:
        return UUID(raw)
    except ValueError:
        return None
