"""Row conversion and error mapping shared by the Supabase repositories."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from uuid import UUID

import httpx
from supabase import PostgrestAPIError

from school_portal.domain.errors import DuplicateIdError, PersistenceError

_UNIQUE_VIOLATION = "23505"


def parse_timestamp(raw: object) -> datetime | None:
    """Parse a PostgREST timestamp column."""
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def text(row: dict[str, object], column: str) -> str:
    """Return a text column, treating NULL as empty."""
    value = row.get(column)
    return "" if value is None else str(value)


def optional_text(row: dict[str, object], column: str) -> str | None:
    """Return a nullable text column."""
    value = row.get(column)
    return str(value) if value else None


@contextmanager
def postgrest_errors(
    action: str, kind: str, entity_id: UUID | None = None
) -> Iterator[None]:
    """Translate PostgREST failures into the portal's persistence errors."""
    try:
        yield
    except PostgrestAPIError as exc:
        if exc.code == _UNIQUE_VIOLATION and entity_id is not None:
            raise DuplicateIdError(kind, entity_id) from exc
        raise PersistenceError(f"Failed to {action} {kind}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise PersistenceError(f"Failed to {action} {kind}: {exc}") from exc
