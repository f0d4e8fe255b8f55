"""Domain models for the school portal."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class EntityKind(str, Enum):
    """Kinds of entity that carry a public identity card."""

    STUDENT = "student"
    TEACHER = "teacher"


class PhotoRole(str, Enum):
    """Whose photo an uploaded image is."""

    SELF = "self"
    FATHER = "father"
    MOTHER = "mother"


STUDENT_PHOTO_ROLES = (PhotoRole.SELF, PhotoRole.FATHER, PhotoRole.MOTHER)
TEACHER_PHOTO_ROLES = (PhotoRole.SELF,)


@dataclass(frozen=True)
class ImageUpload:
    """An image received from the admin form."""

    filename: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class StudentRecord:
    """Represents a student stored in the database."""

    id: UUID
    name: str
    class_name: str
    photo_url: str | None = None
    father_name: str = ""
    father_photo: str | None = None
    mother_name: str = ""
    mother_photo: str | None = None
    father_phone: str = ""
    mother_phone: str = ""
    address: str = ""
    school_name: str = ""
    school_phone: str = ""
    school_address: str = ""
    class_teacher: str = ""
    created_at: datetime | None = None


@dataclass(frozen=True)
class TeacherRecord:
    """Represents a teacher stored in the database."""

    id: UUID
    name: str
    qualification: str
    photo_url: str | None = None
    experience: str = ""
    school_name: str = ""
    address: str = ""
    school_address: str = ""
    created_at: datetime | None = None


# Record attribute holding the URL for each photo role.
STUDENT_PHOTO_FIELDS = {
    PhotoRole.SELF: "photo_url",
    PhotoRole.FATHER: "father_photo",
    PhotoRole.MOTHER: "mother_photo",
}
TEACHER_PHOTO_FIELDS = {PhotoRole.SELF: "photo_url"}

STUDENT_TEXT_FIELDS = (
    "name",
    "father_name",
    "mother_name",
    "father_phone",
    "mother_phone",
    "address",
    "school_name",
    "school_phone",
    "school_address",
    "class_name",
    "class_teacher",
)
TEACHER_TEXT_FIELDS = (
    "name",
    "experience",
    "qualification",
    "school_name",
    "address",
    "school_address",
)
