"""Supabase-backed student repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from school_portal.adapters.supabase_rows import (
    optional_text,
    parse_timestamp,
    postgrest_errors,
    text,
)
from school_portal.domain.errors import PersistenceError
from school_portal.domain.models import STUDENT_TEXT_FIELDS, StudentRecord
from school_portal.services.students import StudentRepository

_TABLE = "students"
_KIND = "student"


@dataclass
class SupabaseStudentRepository(StudentRepository):
    """Supabase implementation for student persistence."""

    client: Client

    def insert(self, record: StudentRecord) -> StudentRecord:
        """Insert a student row and return it as stored."""
        payload: dict[str, object] = {
            "id": str(record.id),
            "photo_url": record.photo_url,
            "father_photo": record.father_photo,
            "mother_photo": record.mother_photo,
        }
        payload.update({name: getattr(record, name) for name in STUDENT_TEXT_FIELDS})
        with postgrest_errors("create", _KIND, record.id):
            response = self.client.table(_TABLE).insert(payload).execute()
        if not response.data:
            raise PersistenceError("Failed to create student")
        return _parse_student(response.data[0])

    def list_all(self) -> list[StudentRecord]:
        """Return all students, newest first."""
        with postgrest_errors("load", _KIND):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        return [_parse_student(row) for row in response.data or []]

    def get(self, student_id: UUID) -> StudentRecord | None:
        """Return a student by id, if present."""
        with postgrest_errors("load", _KIND):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .eq("id", str(student_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_student(response.data[0])

    def update(
        self, student_id: UUID, changes: dict[str, object]
    ) -> StudentRecord | None:
        """Update a student row and return it, if present."""
        with postgrest_errors("update", _KIND):
            response = (
                self.client.table(_TABLE)
                .update(changes)
                .eq("id", str(student_id))
                .execute()
            )
        if not response.data:
            return None
        return _parse_student(response.data[0])

    def delete(self, student_id: UUID) -> bool:
        """Delete a student row."""
        with postgrest_errors("delete", _KIND):
            response = (
                self.client.table(_TABLE).delete().eq("id", str(student_id)).execute()
            )
        return bool(response.data)

    def count(self) -> int:
        """Return the exact number of student rows."""
        with postgrest_errors("count", _KIND):
            response = (
                self.client.table(_TABLE).select("id", count="exact").execute()
            )
        return response.count or 0


def _parse_student(row: dict[str, object]) -> StudentRecord:
    """Parse a student row into a domain model."""
    return StudentRecord(
        id=UUID(str(row["id"])),
        name=text(row, "name"),
        class_name=text(row, "class_name"),
        photo_url=optional_text(row, "photo_url"),
        father_name=text(row, "father_name"),
        father_photo=optional_text(row, "father_photo"),
        mother_name=text(row, "mother_name"),
        mother_photo=optional_text(row, "mother_photo"),
        father_phone=text(row, "father_phone"),
        mother_phone=text(row, "mother_phone"),
        address=text(row, "address"),
        school_name=text(row, "school_name"),
        school_phone=text(row, "school_phone"),
        school_address=text(row, "school_address"),
        class_teacher=text(row, "class_teacher"),
        created_at=parse_timestamp(row.get("created_at")),
    )
