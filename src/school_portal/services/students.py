"""Student registration and management."""

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
    STUDENT_PHOTO_FIELDS,
    STUDENT_TEXT_FIELDS,
    EntityKind,
    ImageUpload,
    PhotoRole,
    StudentRecord,
)
from school_portal.services.images import PhotoUploader
from school_portal.services.records import clean_fields, matches_query, require_fields

_logger = logging.getLogger(__name__)

_REQUIRED = {"name": "name", "class_name": "class name"}


class StudentRepository(Protocol):
    """Persistence interface for student records."""

    def insert(self, record: StudentRecord) -> StudentRecord:
        """Insert a record and return it as stored."""

    def list_all(self) -> list[StudentRecord]:
        """Return all records, newest first."""

    def get(self, student_id: UUID) -> StudentRecord | None:
        """Return a record by id, if present."""

    def update(
        self, student_id: UUID, changes: dict[str, object]
    ) -> StudentRecord | None:
        """Apply changes and return the updated record, if present."""

    def delete(self, student_id: UUID) -> bool:
        """Delete a record, returning whether one existed."""

    def count(self) -> int:
        """Return the number of records."""


@dataclass
class StudentService:
    """Application service for student records."""

    repository: StudentRepository
    uploader: PhotoUploader
    id_factory: Callable[[], UUID] = new_id

    async def create(
        self,
        fields: dict[str, object],
        photos: dict[PhotoRole, ImageUpload] | None = None,
    ) -> StudentRecord:
        """Register a student, uploading photos before the record is inserted."""
        values = clean_fields(fields, STUDENT_TEXT_FIELDS)
        require_fields(values, _REQUIRED, EntityKind.STUDENT.value)
        student_id = self.id_factory()
        urls = await self.uploader.upload_all(student_id, photos or {})
        record = StudentRecord(
            id=student_id,
            **values,
            **{STUDENT_PHOTO_FIELDS[role]: url for role, url in urls.items()},
        )
        try:
            stored = self.repository.insert(record)
        except PersistenceError:
            if urls:
                _logger.warning(
                    "Student insert failed; %s uploaded image(s) left in storage",
                    len(urls),
                    extra={"student_id": str(student_id)},
                )
            raise
        _logger.info("Created student %s", stored.id)
        return stored

    def search(self, query: str | None = None) -> list[StudentRecord]:
        """Return students newest first, optionally filtered by a search term."""
        return [
            student
            for student in self.repository.list_all()
            if matches_query(
                query,
                (
                    student.name,
                    student.class_name,
                    student.school_name,
                    student.father_name,
                ),
            )
        ]

    def get(self, student_id: UUID) -> StudentRecord:
        """Return a student or raise NotFoundError."""
        student = self.repository.get(student_id)
        if student is None:
            raise NotFoundError(EntityKind.STUDENT.value, student_id)
        return student

    def update(self, student_id: UUID, changes: dict[str, object]) -> StudentRecord:
        """Edit a student's attributes. The identifier never changes."""
        values = clean_fields(changes, STUDENT_TEXT_FIELDS)
        current = self.get(student_id)
        require_fields(
            {**_text_values(current), **values},
            _REQUIRED,
            EntityKind.STUDENT.value,
        )
        if not values:
            return current
        updated = self.repository.update(student_id, dict(values))
        if updated is None:
            raise NotFoundError(EntityKind.STUDENT.value, student_id)
        return updated

    async def replace_photo(
        self, student_id: UUID, role: PhotoRole, upload: ImageUpload
    ) -> StudentRecord:
        """Overwrite one of the student's photos and store its URL."""
        if role not in STUDENT_PHOTO_FIELDS:
            raise ValidationError(f"Students have no {role.value} photo")
        self.get(student_id)
        url = await self.uploader.replace(student_id, role, upload)
        updated = self.repository.update(student_id, {STUDENT_PHOTO_FIELDS[role]: url})
        if updated is None:
            raise NotFoundError(EntityKind.STUDENT.value, student_id)
        return updated

    def delete(self, student_id: UUID) -> None:
        """Delete the record. Stored photos are not removed."""
        if not self.repository.delete(student_id):
            raise NotFoundError(EntityKind.STUDENT.value, student_id)
        _logger.info("Deleted student %s", student_id)

    def count(self) -> int:
        """Return the number of students."""
        return self.repository.count()


def _text_values(student: StudentRecord) -> dict[str, str]:
    return {name: getattr(student, name) for name in STUDENT_TEXT_FIELDS}

