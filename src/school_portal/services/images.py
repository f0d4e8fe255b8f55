"""Photo storage interface and the upload fan-out used at record creation."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePosixPath
from typing import Protocol
from uuid import UUID

from school_portal.domain.errors import (
    PersistenceError,
    UploadError,
    ValidationError,
)
from school_portal.domain.models import EntityKind, ImageUpload, PhotoRole

_logger = logging.getLogger(__name__)

_DEFAULT_EXTENSION = "jpg"

# MIME subtypes whose usual file extension differs from the subtype itself.
_EXTENSION_BY_SUBTYPE = {
    "jpeg": "jpg",
    "pjpeg": "jpg",
    "svg+xml": "svg",
    "x-icon": "ico",
    "vnd.microsoft.icon": "ico",
    "x-ms-bmp": "bmp",
}


@dataclass(frozen=True)
class StoredObject:
    """An object in a bucket and when it was last written."""

    path: str
    updated_at: datetime | None = None


class ImageStore(Protocol):
    """Binary object storage for entity photos."""

    def upload(
        self, bucket: str, path: str, content: bytes, content_type: str
    ) -> str:
        """Write (overwriting) an object and return its public URL."""

    def remove(self, bucket: str, paths: list[str]) -> None:
        """Delete objects from a bucket."""

    def list_prefixes(self, bucket: str) -> list[str]:
        """Return the top-level folder names in a bucket."""

    def list_objects(self, bucket: str, prefix: str) -> list[StoredObject]:
        """Return the objects under a folder."""


def image_extension(upload: ImageUpload) -> str:
    """Pick a file extension from the validated MIME type.

    The client's filename is ignored so that one role always maps to one
    storage key for a given image type.
    """
    media_type, _, _ = upload.content_type.partition(";")
    _, _, subtype = media_type.strip().lower().partition("/")
    if not subtype:
        return _DEFAULT_EXTENSION
    return _EXTENSION_BY_SUBTYPE.get(subtype, subtype.split("+")[0])


def image_path(
    kind: EntityKind, entity_id: UUID, role: PhotoRole, upload: ImageUpload
) -> str:
    """Return the storage key `{id}/{role}.{ext}` grouping an entity's images.

    The entity's own photo is stored under its kind name (`student.png`,
    `teacher.jpg`) rather than `self`.
    """
    return f"{entity_id}/{_stem(kind, role)}.{image_extension(upload)}"


def _stem(kind: EntityKind, role: PhotoRole) -> str:
    return kind.value if role is PhotoRole.SELF else role.value


def check_image(upload: ImageUpload, max_bytes: int) -> None:
    """Reject non-image or oversized uploads before anything touches storage."""
    if not upload.content_type.startswith("image/"):
        raise ValidationError(f"{upload.filename or 'Upload'} is not an image file")
    if len(upload.content) > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise ValidationError(
            f"{upload.filename or 'Upload'} is larger than {limit_mb:g}MB"
        )


@dataclass
class PhotoUploader:
    """Uploads every photo of one entity concurrently."""

    store: ImageStore
    bucket: str
    kind: EntityKind

    async def upload_all(
        self, entity_id: UUID, photos: dict[PhotoRole, ImageUpload]
    ) -> dict[PhotoRole, str]:
        """Upload all photos and return their URLs by role.

        Every upload runs to completion before the outcome is decided; the
        first failure is re-raised and already-written objects are left as-is.
        """
        roles = list(photos)
        results = await asyncio.gather(
            *(
                asyncio.to_thread(self.upload_one, entity_id, role, photos[role])
                for role in roles
            ),
            return_exceptions=True,
        )
        urls: dict[PhotoRole, str] = {}
        failures: list[BaseException] = []
        for role, result in zip(roles, results, strict=True):
            if isinstance(result, BaseException):
                failures.append(result)
            else:
                urls[role] = result
        if failures:
            if urls:
                _logger.warning(
                    "Upload aborted with %s image(s) already stored for %s %s",
                    len(urls),
                    self.kind.value,
                    entity_id,
                )
            raise failures[0]
        return urls

    async def replace(
        self, entity_id: UUID, role: PhotoRole, upload: ImageUpload
    ) -> str:
        """Upload a replacement photo and drop the role's files of other types."""
        return await asyncio.to_thread(self._replace, entity_id, role, upload)

    def upload_one(self, entity_id: UUID, role: PhotoRole, upload: ImageUpload) -> str:
        """Upload a single photo and return its public URL."""
        path = image_path(self.kind, entity_id, role, upload)
        try:
            return self.store.upload(
                self.bucket, path, upload.content, upload.content_type
            )
        except UploadError:
            _logger.exception("Photo upload failed", extra={"path": path})
            raise

    def _replace(self, entity_id: UUID, role: PhotoRole, upload: ImageUpload) -> str:
        url = self.upload_one(entity_id, role, upload)
        current = image_path(self.kind, entity_id, role, upload)
        stem = _stem(self.kind, role)
        try:
            stale = [
                stored.path
                for stored in self.store.list_objects(self.bucket, str(entity_id))
                if stored.path != current and PurePosixPath(stored.path).stem == stem
            ]
            if stale:
                self.store.remove(self.bucket, stale)
        except PersistenceError:
            # The new photo is already stored; a leftover file is harmless.
            _logger.warning(
                "Could not remove superseded %s photo(s) for %s %s",
                stem,
                self.kind.value,
                entity_id,
                exc_info=True,
            )
        return url
