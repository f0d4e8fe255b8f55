"""Dependency container wiring for the application."""

from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from school_portal.adapters.supabase_image_store import SupabaseImageStore
from school_portal.adapters.supabase_student_repository import (
    SupabaseStudentRepository,
)
from school_portal.adapters.supabase_teacher_repository import (
    SupabaseTeacherRepository,
)
from school_portal.config import Settings
from school_portal.domain.models import EntityKind
from school_portal.services.dashboard import DashboardService
from school_portal.services.images import ImageStore, PhotoUploader
from school_portal.services.maintenance import OrphanSweeper
from school_portal.services.profiles import ProfileService
from school_portal.services.qr import QRIssuer
from school_portal.services.students import StudentRepository, StudentService
from school_portal.services.teachers import TeacherRepository, TeacherService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    student_service: StudentService
    teacher_service: TeacherService
    profile_service: ProfileService
    dashboard_service: DashboardService
    orphan_sweeper: OrphanSweeper
    qr_issuer: QRIssuer


def wire_container(
    settings: Settings,
    image_store: ImageStore,
    student_repository: StudentRepository,
    teacher_repository: TeacherRepository,
) -> AppContainer:
    """Assemble services around already-constructed adapters."""
    qr_issuer = QRIssuer(origin=settings.serving_origin, box_size=settings.qr_box_size)
    student_service = StudentService(
        repository=student_repository,
        uploader=PhotoUploader(
            store=image_store, bucket=settings.student_bucket, kind=EntityKind.STUDENT
        ),
    )
    teacher_service = TeacherService(
        repository=teacher_repository,
        uploader=PhotoUploader(
            store=image_store, bucket=settings.teacher_bucket, kind=EntityKind.TEACHER
        ),
    )

    return AppContainer(
        settings=settings,
        student_service=student_service,
        teacher_service=teacher_service,
        profile_service=ProfileService(
            student_service=student_service,
            teacher_service=teacher_service,
            qr_issuer=qr_issuer,
        ),
        dashboard_service=DashboardService(
            student_service=student_service, teacher_service=teacher_service
        ),
        orphan_sweeper=OrphanSweeper(
            store=image_store,
            student_service=student_service,
            teacher_service=teacher_service,
            student_bucket=settings.student_bucket,
            teacher_bucket=settings.teacher_bucket,
            min_age=timedelta(minutes=settings.orphan_min_age_minutes),
        ),
        qr_issuer=qr_issuer,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container around one Supabase client."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    return wire_container(
        resolved_settings,
        image_store=SupabaseImageStore(supabase_client),
        student_repository=SupabaseStudentRepository(supabase_client),
        teacher_repository=SupabaseTeacherRepository(supabase_client),
    )
