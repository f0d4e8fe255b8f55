"""Supabase-backed teacher repository."""

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
from school_portal.domain.models import TEACHER_TEXT_FIELDS, TeacherRecord
from school_portal.services.teachers import TeacherRepository

_TABLE = "teachers"
_KIND = "teacher"


@dataclass
class SupabaseTeacherRepository(TeacherRepository):
    """Supabase implementation for teacher persistence."""

    client: Client

    def insert(self, record: TeacherRecord) -> TeacherRecord:
        """Insert a teacher row and return it as stored."""
        payload: dict[str, object] = {
            "id": str(record.id),
            "photo_url": record.photo_url,
        }
        payload.update({name: getattr(record, name) for name in TEACHER_TEXT_FIELDS})
        with postgrest_errors("create", _KIND, record.id):
            response = self.client.table(_TABLE).insert(payload).execute()
        if not response.data:
            raise PersistenceError("Failed to create teacher")
        return _parse_teacher(response.data[0])

    def list_all(self) -> list[TeacherRecord]:
        """Return all teachers, newest first."""
        with postgrest_errors("load", _KIND):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        return [_parse_teacher(row) for row in response.data or []]

    def get(self, teacher_id: UUID) -> TeacherRecord | None:
        """Return a teacher by id, if present."""
        with postgrest_errors("load", _KIND):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .eq("id", str(teacher_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_teacher(response.data[0])

    def update(
        self, teacher_id: UUID, changes: dict[str, object]
    ) -> TeacherRecord | None:
        """Update a teacher row and return it, if present."""
        with postgrest_errors("update", _KIND):
            response = (
                self.client.table(_TABLE)
                .update(changes)
                .eq("id", str(teacher_id))
                .execute()
            )
        if not response.data:
            return None
        return _parse_teacher(response.data[0])

    def delete(self, teacher_id: UUID) -> bool:
        """Delete a teacher row."""
        with postgrest_errors("delete", _KIND):
            response = (
                self.client.table(_TABLE).delete().eq("id", str(teacher_id)).execute()
            )
        return bool(response.data)

    def count(self) -> int:
        """Return the exact number of teacher rows."""
        with postgrest_errors("count", _KIND):
            response = (
                self.client.table(_TABLE).select("id", count="exact").execute()
            )
        return response.count or 0


def _parse_teacher(row: dict[str, object]) -> TeacherRecord:
    """Parse a teacher row into a domain model."""
    return TeacherRecord(
        id=UUID(str(row["id"])),
        name=text(row, "name"),
        qualification=text(row, "qualification"),
        photo_url=optional_text(row, "photo_url"),
        experience=text(row, "experience"),
        school_name=text(row, "school_name"),
        address=text(row, "address"),
        school_address=text(row, "school_address"),
        created_at=parse_timestamp(row.get("created_at")),
    )
