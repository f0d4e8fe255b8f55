"""Request models and response serializers for the admin API."""

from dataclasses import asdict

from pydantic import BaseModel, ConfigDict

from school_portal.domain.models import EntityKind, StudentRecord, TeacherRecord
from school_portal.services.qr import QRIssuer


class StudentUpdate(BaseModel):
    """Editable student attributes. Omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    father_name: str | None = None
    mother_name: str | None = None
    father_phone: str | None = None
    mother_phone: str | None = None
    address: str | None = None
    school_name: str | None = None
    school_phone: str | None = None
    school_address: str | None = None
    class_name: str | None = None
    class_teacher: str | None = None


class TeacherUpdate(BaseModel):
    """Editable teacher attributes. Omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    experience: str | None = None
    qualification: str | None = None
    school_name: str | None = None
    address: str | None = None
    school_address: str | None = None


def serialize_record(
    kind: EntityKind, record: StudentRecord | TeacherRecord, qr_issuer: QRIssuer
) -> dict[str, object]:
    """Serialize a record with its permanent profile URL."""
    data = asdict(record)
    data["id"] = str(record.id)
    data["created_at"] = record.created_at.isoformat() if record.created_at else None
    data["profile_url"] = qr_issuer.payload(kind, record.id)
    return data
