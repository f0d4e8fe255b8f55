"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from itertools import count
from uuid import UUID

import pytest

from school_portal.config import Settings
from school_portal.containers import AppContainer, wire_container
from school_portal.domain.errors import DuplicateIdError, UploadError
from school_portal.domain.models import StudentRecord, TeacherRecord
from school_portal.services.images import ImageStore, StoredObject
from school_portal.services.students import StudentRepository
from school_portal.services.teachers import TeacherRepository

_EPOCH = datetime(2026, 1, 1, tzinfo=UTC)


@dataclass
class _Clock:
    """Hands out strictly increasing creation timestamps."""

    ticks: count = field(default_factory=lambda: count(1))

    def now(self) -> datetime:
        return _EPOCH + timedelta(seconds=next(self.ticks))


@dataclass
class InMemoryStudentRepository(StudentRepository):
    """In-memory student repository for tests."""

    rows: dict[UUID, StudentRecord] = field(default_factory=dict)
    clock: _Clock = field(default_factory=_Clock)

    def insert(self, record: StudentRecord) -> StudentRecord:
        if record.id in self.rows:
            raise DuplicateIdError("student", record.id)
        stored = replace(record, created_at=record.created_at or self.clock.now())
        self.rows[record.id] = stored
        return stored

    def list_all(self) -> list[StudentRecord]:
        return sorted(self.rows.values(), key=lambda r: r.created_at, reverse=True)

    def get(self, student_id: UUID) -> StudentRecord | None:
        return self.rows.get(student_id)

    def update(
        self, student_id: UUID, changes: dict[str, object]
    ) -> StudentRecord | None:
        if student_id not in self.rows:
            return None
        self.rows[student_id] = replace(self.rows[student_id], **changes)
        return self.rows[student_id]

    def delete(self, student_id: UUID) -> bool:
        return self.rows.pop(student_id, None) is not None

    def count(self) -> int:
        return len(self.rows)


@dataclass
class InMemoryTeacherRepository(TeacherRepository):
    """In-memory teacher repository for tests."""

    rows: dict[UUID, TeacherRecord] = field(default_factory=dict)
    clock: _Clock = field(default_factory=_Clock)

    def insert(self, record: TeacherRecord) -> TeacherRecord:
        if record.id in self.rows:
            raise DuplicateIdError("teacher", record.id)
        stored = replace(record, created_at=record.created_at or self.clock.now())
        self.rows[record.id] = stored
        return stored

    def list_all(self) -> list[TeacherRecord]:
        return sorted(self.rows.values(), key=lambda r: r.created_at, reverse=True)

    def get(self, teacher_id: UUID) -> TeacherRecord | None:
        return self.rows.get(teacher_id)

    def update(
        self, teacher_id: UUID, changes: dict[str, object]
    ) -> TeacherRecord | None:
        if teacher_id not in self.rows:
            return None
        self.rows[teacher_id] = replace(self.rows[teacher_id], **changes)
        return self.rows[teacher_id]

    def delete(self, teacher_id: UUID) -> bool:
        return self.rows.pop(teacher_id, None) is not None

    def count(self) -> int:
        return len(self.rows)


@dataclass
class FakeImageStore(ImageStore):
    """Image store keeping objects in memory; can be told to reject paths."""

    objects: dict[str, bytes] = field(default_factory=dict)
    written_at: dict[str, datetime] = field(default_factory=dict)
    fail_when_path_contains: str | None = None
    # Objects count as written long ago unless a test swaps the clock.
    clock: Callable[[], datetime] = lambda: _EPOCH

    def upload(
        self, bucket: str, path: str, content: bytes, content_type: str
    ) -> str:
        if self.fail_when_path_contains and self.fail_when_path_contains in path:
            raise UploadError(bucket, path, "quota exceeded")
        self.objects[f"{bucket}/{path}"] = content
        self.written_at[f"{bucket}/{path}"] = self.clock()
        return f"https://storage.example/{bucket}/{path}"

    def remove(self, bucket: str, paths: list[str]) -> None:
        for path in paths:
            self.objects.pop(f"{bucket}/{path}", None)
            self.written_at.pop(f"{bucket}/{path}", None)

    def list_prefixes(self, bucket: str) -> list[str]:
        prefixes = {
            key.split("/")[1] for key in self.objects if key.startswith(f"{bucket}/")
        }
        return sorted(prefixes)

    def list_objects(self, bucket: str, prefix: str) -> list[StoredObject]:
        start = f"{bucket}/{prefix}/"
        return [
            StoredObject(
                path=key[len(bucket) + 1 :], updated_at=self.written_at.get(key)
            )
            for key in sorted(self.objects)
            if key.startswith(start)
        ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
        serving_origin="https://app.example/",
        environment="test",
    )


@pytest.fixture
def image_store() -> FakeImageStore:
    return FakeImageStore()


@pytest.fixture
def student_repository() -> InMemoryStudentRepository:
    return InMemoryStudentRepository()


@pytest.fixture
def teacher_repository() -> InMemoryTeacherRepository:
    return InMemoryTeacherRepository()


@pytest.fixture
def container(
    settings: Settings,
    image_store: FakeImageStore,
    student_repository: InMemoryStudentRepository,
    teacher_repository: InMemoryTeacherRepository,
) -> AppContainer:
    return wire_container(
        settings,
        image_store=image_store,
        student_repository=student_repository,
        teacher_repository=teacher_repository,
    )
