"""Teacher registration and management."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from school_portal.domain.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from school_portal.domain.identity import new_id
from school_portal.domain.models import (
    TEACHER_PHOTO_FIELDS,
    TEACHER_TEXT_FIELDS,
    EntityKind,
    ImageUpload,
    PhotoRole,
    TeacherRecord,
)
from school_portal.services.images import PhotoUploader
from school_portal.services.records import clean_fields, matches_query, require_fields

_logger = logging.getLogger(__name__)

_REQUIRED = {"name": "name", "qualification": "qualification"}


class TeacherRepository(Protocol):
    """Persistence interface for teacher records."""

    def insert(self, record: TeacherRecord) -> TeacherRecord:
        """Insert a record and return it as stored."""

    def list_all(self) -> list[TeacherRecord]:
        """Return all records, newest first."""

    def get(self, teacher_id: UUID) -> TeacherRecord | None:
        """Return a record by id, if present."""

    def update(
        self, teacher_id: UUID, changes: dict[str, object]
    ) -> TeacherRecord | None:
        """Apply changes and return the updated record, if present."""

    def delete(self, teacher_id: UUID) -> bool:
        """Delete a record, returning whether one existed."""

    def count(self) -> int:
        """Return the number of records."""


@dataclass
class TeacherService:
    """Application service for teacher records."""

    repository: TeacherRepository
    uploader: PhotoUploader
    id_factory: Callable[[], UUID] = new_id

    async def create(
        self,
        fields: dict[str, object],
        photo: ImageUpload | None = None,
    ) -> TeacherRecord:
        """Register a teacher, uploading the photo before inserting the record."""
        values = clean_fields(fields, TEACHER_TEXT_FIELDS)
        require_fields(values, _REQUIRED, EntityKind.TEACHER.value)
        teacher_id = self.id_factory()
        photos = {PhotoRole.SELF: photo} if photo else {}
        urls = await self.uploader.upload_all(teacher_id, photos)
        record = TeacherRecord(
            id=teacher_id, photo_url=urls.get(PhotoRole.SELF), **values
        )
        try:
            stored = self.repository.insert(record)
        except PersistenceError:
            if urls:
                _logger.warning(
                    "Teacher insert failed; uploaded photo left in storage",
                    extra={"teacher_id": str(teacher_id)},
                )
            raise
        _logger.info("Created teacher %s", stored.id)
        return stored

    def search(self, query: str | None = None) -> list[TeacherRecord]:
        """Return teachers newest first, optionally filtered by a search term."""
        return [
            teacher
            for teacher in self.repository.list_all()
            if matches_query(
                query, (teacher.name, teacher.school_name, teacher.qualification)
            )
        ]

    def get(self, teacher_id: UUID) -> TeacherRecord:
        """Return a teacher or raise NotFoundError."""
        teacher = self.repository.get(teacher_id)
        if teacher is None:
            raise NotFoundError(EntityKind.TEACHER.value, teacher_id)
        return teacher

    def update(self, teacher_id: UUID, changes: dict[str, object]) -> TeacherRecord:
        """Edit a teacher's attributes. The identifier never changes."""
        values = clean_fields(changes, TEACHER_TEXT_FIELDS)
        current = self.get(teacher_id)
        merged = {name: getattr(current, name) for name in TEACHER_TEXT_FIELDS}
        require_fields({**merged, **values}, _REQUIRED, EntityKind.TEACHER.value)
        if not values:
            return current
        updated = self.repository.update(teacher_id, dict(values))
        if updated is None:
            raise NotFoundError(EntityKind.TEACHER.value, teacher_id)
        return updated

    async def replace_photo(
        self, teacher_id: UUID, role: PhotoRole, upload: ImageUpload
    ) -> TeacherRecord:
        """Overwrite the teacher's photo and store its URL."""
        if role not in TEACHER_PHOTO_FIELDS:
            raise ValidationError(f"Teachers have no {role.value} photo")
        self.get(teacher_id)
        url = await self.uploader.replace(teacher_id, role, upload)
        updated = self.repository.update(teacher_id, {"photo_url": url})
        if updated is None:
            raise NotFoundError(EntityKind.TEACHER.value, teacher_id)
        return updated

    def delete(self, teacher_id: UUID) -> None:
        """Delete the record. The stored photo is not removed."""
        if not self.repository.delete(teacher_id):
            raise NotFoundError(EntityKind.TEACHER.value, teacher_id)
        _logger.info("Deleted teacher %s", teacher_id)

    def count(self) -> int:
        """Return the number of teachers."""
        return self.repository.count()
