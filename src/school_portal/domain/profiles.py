"""Public profile paths and the URLs encoded into QR codes."""

from uuid import UUID

from school_portal.domain.models import EntityKind


def profile_path(kind: EntityKind, entity_id: UUID) -> str:
    """Return the canonical public route for an entity's identity card."""
    return f"/{kind.value}/{entity_id}"


def qr_payload(kind: EntityKind, entity_id: UUID, origin: str) -> str:
    """Return the absolute URL a scanner must land on."""
    return origin.rstrip("/") + profile_path(kind, entity_id)
