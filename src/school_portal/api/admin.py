"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Header,
    Request,
    Response,
    UploadFile,
    status,
)
from fastapi.responses import HTMLResponse

from school_portal.api.models import StudentUpdate, TeacherUpdate, serialize_record
from school_portal.api.uploads import read_image
from school_portal.domain.errors import AuthError
from school_portal.domain.models import EntityKind, ImageUpload, PhotoRole

if TYPE_CHECKING:
    from school_portal.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _get_admin_token(request: Request) -> str:
    return _container(request).settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise AuthError("Admin authentication required")


def _qr_response(
    container: AppContainer, kind: EntityKind, entity_id: UUID, label: str
) -> Response:
    rendered = container.qr_issuer.render(kind, entity_id)
    filename = container.qr_issuer.download_name(label)
    return Response(
        content=rendered.png,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/dashboard", dependencies=[Depends(require_admin)])
async def dashboard(request: Request) -> dict[str, object]:
    """Return record counts for the overview page."""
    return _container(request).dashboard_service.overview()


@router.get("/students", dependencies=[Depends(require_admin)])
async def list_students(request: Request, q: str | None = None) -> dict[str, object]:
    """Return students newest first, optionally filtered."""
    container = _container(request)
    students = container.student_service.search(q)
    return {
        "students": [
            serialize_record(EntityKind.STUDENT, student, container.qr_issuer)
            for student in students
        ]
    }


@router.post(
    "/students",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_201_CREATED,
)
async def create_student(  # noqa: PLR0913
    request: Request,
    name: str = Form(default=""),
    class_name: str = Form(default=""),
    class_teacher: str = Form(default=""),
    address: str = Form(default=""),
    father_name: str = Form(default=""),
    father_phone: str = Form(default=""),
    mother_name: str = Form(default=""),
    mother_phone: str = Form(default=""),
    school_name: str = Form(default=""),
    school_phone: str = Form(default=""),
    school_address: str = Form(default=""),
    photo: UploadFile | None = File(default=None),
    father_photo: UploadFile | None = File(default=None),
    mother_photo: UploadFile | None = File(default=None),
) -> dict[str, object]:
    """Register a student from the admin form."""
    container = _container(request)
    max_bytes = container.settings.max_upload_bytes
    photos: dict[PhotoRole, ImageUpload] = {}
    for role, file in (
        (PhotoRole.SELF, photo),
        (PhotoRole.FATHER, father_photo),
        (PhotoRole.MOTHER, mother_photo),
    ):
        upload = await read_image(file, max_bytes)
        if upload is not None:
            photos[role] = upload
    student = await container.student_service.create(
        {
            "name": name,
            "class_name": class_name,
            "class_teacher": class_teacher,
            "address": address,
            "father_name": father_name,
            "father_phone": father_phone,
            "mother_name": mother_name,
            "mother_phone": mother_phone,
            "school_name": school_name,
            "school_phone": school_phone,
            "school_address": school_address,
        },
        photos,
    )
    return serialize_record(EntityKind.STUDENT, student, container.qr_issuer)


@router.get("/students/{student_id}", dependencies=[Depends(require_admin)])
async def student_detail(student_id: UUID, request: Request) -> dict[str, object]:
    """Return one student."""
    container = _container(request)
    student = container.student_service.get(student_id)
    return serialize_record(EntityKind.STUDENT, student, container.qr_issuer)


@router.patch("/students/{student_id}", dependencies=[Depends(require_admin)])
async def update_student(
    student_id: UUID, changes: StudentUpdate, request: Request
) -> dict[str, object]:
    """Edit a student's attributes."""
    container = _container(request)
    student = container.student_service.update(
        student_id, changes.model_dump(exclude_unset=True)
    )
    return serialize_record(EntityKind.STUDENT, student, container.qr_issuer)


@router.put(
    "/students/{student_id}/photos/{role}", dependencies=[Depends(require_admin)]
)
async def replace_student_photo(
    student_id: UUID,
    role: PhotoRole,
    request: Request,
    photo: UploadFile = File(...),
) -> dict[str, object]:
    """Replace one of a student's photos."""
    container = _container(request)
    upload = await read_image(photo, container.settings.max_upload_bytes)
    if upload is None:
        return await student_detail(student_id, request)
    student = await container.student_service.replace_photo(student_id, role, upload)
    return serialize_record(EntityKind.STUDENT, student, container.qr_issuer)


@router.delete("/students/{student_id}", dependencies=[Depends(require_admin)])
async def delete_student(student_id: UUID, request: Request) -> dict[str, str]:
    """Delete a student record."""
    _container(request).student_service.delete(student_id)
    return {"status": "deleted"}


@router.get("/students/{student_id}/qr", dependencies=[Depends(require_admin)])
async def student_qr(student_id: UUID, request: Request) -> Response:
    """Download the student's QR code as a PNG."""
    container = _container(request)
    student = container.student_service.get(student_id)
    return _qr_response(container, EntityKind.STUDENT, student.id, student.name)


@router.get("/teachers", dependencies=[Depends(require_admin)])
async def list_teachers(request: Request, q: str | None = None) -> dict[str, object]:
    """Return teachers newest first, optionally filtered."""
    container = _container(request)
    teachers = container.teacher_service.search(q)
    return {
        "teachers": [
            serialize_record(EntityKind.TEACHER, teacher, container.qr_issuer)
            for teacher in teachers
        ]
    }


@router.post(
    "/teachers",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_201_CREATED,
)
async def create_teacher(  # noqa: PLR0913
    request: Request,
    name: str = Form(default=""),
    qualification: str = Form(default=""),
    experience: str = Form(default=""),
    school_name: str = Form(default=""),
    address: str = Form(default=""),
    school_address: str = Form(default=""),
    photo: UploadFile | None = File(default=None),
) -> dict[str, object]:
    """Register a teacher from the admin form."""
    container = _container(request)
    upload = await read_image(photo, container.settings.max_upload_bytes)
    teacher = await container.teacher_service.create(
        {
            "name": name,
            "qualification": qualification,
            "experience": experience,
            "school_name": school_name,
            "address": address,
            "school_address": school_address,
        },
        upload,
    )
    return serialize_record(EntityKind.TEACHER, teacher, container.qr_issuer)


@router.get("/teachers/{teacher_id}", dependencies=[Depends(require_admin)])
async def teacher_detail(teacher_id: UUID, request: Request) -> dict[str, object]:
    """Return one teacher."""
    container = _container(request)
    teacher = container.teacher_service.get(teacher_id)
    return serialize_record(EntityKind.TEACHER, teacher, container.qr_issuer)


@router.patch("/teachers/{teacher_id}", dependencies=[Depends(require_admin)])
async def update_teacher(
    teacher_id: UUID, changes: TeacherUpdate, request: Request
) -> dict[str, object]:
    """Edit a teacher's attributes."""
    container = _container(request)
    teacher = container.teacher_service.update(
        teacher_id, changes.model_dump(exclude_unset=True)
    )
    return serialize_record(EntityKind.TEACHER, teacher, container.qr_issuer)


@router.put(
    "/teachers/{teacher_id}/photos/{role}", dependencies=[Depends(require_admin)]
)
async def replace_teacher_photo(
    teacher_id: UUID,
    role: PhotoRole,
    request: Request,
    photo: UploadFile = File(...),
) -> dict[str, object]:
    """Replace the teacher's photo."""
    container = _container(request)
    upload = await read_image(photo, container.settings.max_upload_bytes)
    if upload is None:
        return await teacher_detail(teacher_id, request)
    teacher = await container.teacher_service.replace_photo(teacher_id, role, upload)
    return serialize_record(EntityKind.TEACHER, teacher, container.qr_issuer)


@router.delete("/teachers/{teacher_id}", dependencies=[Depends(require_admin)])
async def delete_teacher(teacher_id: UUID, request: Request) -> dict[str, str]:
    """Delete a teacher record."""
    _container(request).teacher_service.delete(teacher_id)
    return {"status": "deleted"}


@router.get("/teachers/{teacher_id}/qr", dependencies=[Depends(require_admin)])
async def teacher_qr(teacher_id: UUID, request: Request) -> Response:
    """Download the teacher's QR code as a PNG."""
    container = _container(request)
    teacher = container.teacher_service.get(teacher_id)
    return _qr_response(container, EntityKind.TEACHER, teacher.id, teacher.name)


@router.post("/maintenance/sweep-orphans", dependencies=[Depends(require_admin)])
async def sweep_orphans(
    request: Request, kind: EntityKind, dry_run: bool = True
) -> dict[str, object]:
    """Find (and optionally delete) photo folders with no matching record."""
    report = _container(request).orphan_sweeper.sweep(kind, dry_run=dry_run)
    return report.to_dict()


@router.get("/ui", response_class=HTMLResponse)
async def admin_ui() -> HTMLResponse:
    """Minimal admin UI that consumes the admin API."""
    return HTMLResponse(_ADMIN_UI_HTML)


_ADMIN_UI_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>School Portal Admin</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      h1 { margin-bottom: 0.5rem; }
      .row { margin-bottom: 1rem; }
      input { padding: 0.4rem 0.6rem; width: 320px; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
      pre { background: #f6f6f6; padding: 1rem; overflow: auto; }
    </style>
  </head>
  <body>
    <h1>School Portal Admin</h1>
    <div class="row">
      <label>Admin token</label><br />
      <input id="token" type="password" placeholder="X-Admin-Token" />
    </div>
    <div class="row">
      <input id="search" type="search" placeholder="Search name, class, school..." />
    </div>
    <div class="row">
      <button onclick="loadEndpoint('/admin/dashboard')">Dashboard</button>
      <button onclick="loadList('/admin/students')">Students</button>
      <button onclick="loadList('/admin/teachers')">Teachers</button>
    </div>
    <pre id="output">Ready.</pre>
    <script>
      function loadList(path) {
        const q = document.getElementById('search').value.trim();
        loadEndpoint(q ? path + '?q=' + encodeURIComponent(q) : path);
      }
      async function loadEndpoint(path) {
        const token = document.getElementById('token').value;
        const output = document.getElementById('output');
        output.textContent = 'Loading...';
        const res = await fetch(path, {
          headers: { 'X-Admin-Token': token }
        });
        const data = await res.json();
        if (!res.ok) {
          output.textContent = 'Error ' + res.status + ': ' + (data.detail || '');
          return;
        }
        output.textContent = JSON.stringify(data, null, 2);
      }
    </script>
  </body>
</html>
"""
