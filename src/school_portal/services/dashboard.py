"""Admin dashboard figures."""

from dataclasses import dataclass

from school_portal.services.students import StudentService
from school_portal.services.teachers import TeacherService


@dataclass
class DashboardService:
    """Service for the admin overview page."""

    student_service: StudentService
    teacher_service: TeacherService

    def overview(self) -> dict[str, int]:
        """Return record counts per entity kind."""
        return {
            "students": self.student_service.count(),
            "teachers": self.teacher_service.count(),
        }
