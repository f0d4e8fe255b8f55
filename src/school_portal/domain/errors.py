"""Error taxonomy surfaced to the initiating caller."""

from uuid import UUID


class PortalError(Exception):
    """Base class for failures reported back to the admin or visitor."""


class ValidationError(PortalError):
    """A required field is missing or an upload was rejected at the boundary."""


class UploadError(PortalError):
    """The image store refused a write."""

    def __init__(self, bucket: str, path: str, reason: str) -> None:
        super().__init__(f"Upload failed for {bucket}/{path}: {reason}")
        self.bucket = bucket
        self.path = path
        self.reason = reason


class PersistenceError(PortalError):
    """A read or write against the record store, or a photo cleanup, failed."""


class DuplicateIdError(PersistenceError):
    """A record with the same identifier already exists."""

    def __init__(self, kind: str, entity_id: UUID) -> None:
        super().__init__(f"A {kind} with id {entity_id} already exists")
        self.kind = kind
        self.entity_id = entity_id


class NotFoundError(PersistenceError):
    """No record exists for the identifier."""

    def __init__(self, kind: str, entity_id: UUID | str) -> None:
        super().__init__(f"{kind.capitalize()} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class AuthError(PortalError):
    """The caller is not an authenticated admin."""
