"""Read-only identity cards served at the public profile routes."""

from dataclasses import dataclass
from uuid import UUID

from school_portal.domain.models import EntityKind, StudentRecord, TeacherRecord
from school_portal.services.qr import QRIssuer, RenderedQR
from school_portal.services.students import StudentService
from school_portal.services.teachers import TeacherService


@dataclass(frozen=True)
class ProfileCard:
    """Everything needed to draw one identity card."""

    kind: EntityKind
    record: StudentRecord | TeacherRecord
    qr: RenderedQR

    @property
    def issued(self) -> str | None:
        """Return the issue date shown on the card footer."""
        if self.record.created_at is None:
            return None
        return self.record.created_at.strftime("%d %B %Y")


@dataclass
class ProfileService:
    """Looks up an entity and pairs it with its QR code."""

    student_service: StudentService
    teacher_service: TeacherService
    qr_issuer: QRIssuer

    def present(self, kind: EntityKind, entity_id: UUID) -> ProfileCard:
        """Return the card for an entity or raise NotFoundError."""
        if kind is EntityKind.STUDENT:
            record: StudentRecord | TeacherRecord = self.student_service.get(entity_id)
        else:
            record = self.teacher_service.get(entity_id)
        return ProfileCard(
            kind=kind, record=record, qr=self.qr_issuer.render(kind, entity_id)
        )
