"""Public identity card pages reached by scanning a QR code."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse

from school_portal.domain.errors import NotFoundError
from school_portal.domain.identity import parse_id
from school_portal.domain.models import EntityKind, StudentRecord, TeacherRecord

if TYPE_CHECKING:
    from school_portal.containers import AppContainer
    from school_portal.services.profiles import ProfileCard

router = APIRouter(tags=["profiles"])


@router.get("/student/{entity_id}", response_class=HTMLResponse)
async def student_profile(entity_id: str, request: Request) -> HTMLResponse:
    """Render a student's identity card."""
    return _present(request, EntityKind.STUDENT, entity_id)


@router.get("/teacher/{entity_id}", response_class=HTMLResponse)
async def teacher_profile(entity_id: str, request: Request) -> HTMLResponse:
    """Render a teacher's identity card."""
    return _present(request, EntityKind.TEACHER, entity_id)


def _present(request: Request, kind: EntityKind, raw_id: str) -> HTMLResponse:
    container: AppContainer = request.app.state.container
    entity_id = parse_id(raw_id)
    if entity_id is None:
        return not_found_page()
    try:
        card = container.profile_service.present(kind, entity_id)
    except NotFoundError:
        return not_found_page()
    return HTMLResponse(render_card(card))


def not_found_page() -> HTMLResponse:
    """Return the shared 404 page for unknown profiles."""
    return HTMLResponse(_NOT_FOUND_HTML, status_code=status.HTTP_404_NOT_FOUND)


def render_card(card: ProfileCard) -> str:
    """Render the full HTML document for an identity card."""
    record = card.record
    if isinstance(record, StudentRecord):
        title = "Student"
        badge = f"{_e(record.class_name)} &middot; {_e(record.school_name)}"
        body = _student_body(record)
    else:
        title = "Teacher"
        badge = f"{_e(record.qualification)} &middot; {_e(record.school_name)}"
        body = _teacher_body(record)
    issued = f"<p class='muted'>Issued: {_e(card.issued)}</p>" if card.issued else ""
    return _PAGE.format(
        title=f"{_e(record.name)} - {title} ID",
        header=f"{title.upper()} ID CARD",
        photo=_photo(record.photo_url, record.name, "hero"),
        name=_e(record.name),
        badge=badge,
        id_label=f"{title} ID",
        id_value=_e(str(record.id).upper()),
        body=body,
        qr_src=card.qr.data_url,
        issued=issued,
    )


def _student_body(student: StudentRecord) -> str:
    return "".join(
        [
            _section(
                "School Details",
                [
                    ("School Name", student.school_name),
                    ("School Phone", student.school_phone),
                    ("School Address", student.school_address),
                ],
            ),
            _section(
                "Student Details",
                [
                    ("Class", student.class_name),
                    ("Class Teacher", student.class_teacher),
                    ("Home Address", student.address),
                ],
            ),
            "<h2>Parent Information</h2><div class='parents'>",
            _parent(student.father_photo, student.father_name, "Father"),
            _parent(student.mother_photo, student.mother_name, "Mother"),
            "</div>",
            _rows(
                [
                    ("Father's Phone", student.father_phone),
                    ("Mother's Phone", student.mother_phone),
                ]
            ),
        ]
    )


def _teacher_body(teacher: TeacherRecord) -> str:
    return "".join(
        [
            _section(
                "Professional Details",
                [
                    ("Qualification", teacher.qualification),
                    ("Experience", teacher.experience),
                ],
            ),
            _section(
                "School Details",
                [
                    ("School Name", teacher.school_name),
                    ("School Address", teacher.school_address),
                ],
            ),
            _section("Contact", [("Address", teacher.address)]),
        ]
    )


def _section(heading: str, rows: list[tuple[str, str]]) -> str:
    rendered = _rows(rows)
    if not rendered:
        return ""
    return f"<h2>{_e(heading)}</h2>{rendered}"


def _rows(rows: list[tuple[str, str]]) -> str:
    # Blank fields are left off the card entirely.
    return "".join(
        f"<div class='row'><span class='label'>{_e(label)}</span>"
        f"<span class='value'>{_e(value)}</span></div>"
        for label, value in rows
        if value
    )


def _parent(url: str | None, name: str, role: str) -> str:
    return (
        f"<div class='parent'>{_photo(url, name, 'small')}"
        f"<p>{_e(name)}</p><p class='muted'>{role}</p></div>"
    )


def _photo(url: str | None, name: str, size: str) -> str:
    if url:
        return f"<img class='{size}' src='{_e(url)}' alt='{_e(name)}' />"
    initial = name[:1].upper() or "?"
    return f"<div class='{size} initial'>{_e(initial)}</div>"


def _e(value: str | None) -> str:
    return escape(value or "", quote=True)


_PAGE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{title}</title>
    <style>
      body {{ font-family: ui-sans-serif, system-ui, sans-serif; margin: 0;
        background: #0f172a; color: #e2e8f0; }}
      .card {{ max-width: 28rem; margin: 2rem auto; background: #1e1b4b;
        border-radius: 1rem; overflow: hidden; }}
      .head {{ background: #4338ca; padding: 1.25rem; text-align: center; }}
      .tag {{ font-size: 0.7rem; font-weight: 700; letter-spacing: 0.1em; }}
      .hero {{ width: 6rem; height: 6rem; border-radius: 1rem; object-fit: cover;
        margin: 0.75rem auto; display: block; }}
      .small {{ width: 4rem; height: 4rem; border-radius: 0.75rem; object-fit: cover;
        margin: 0 auto; display: block; }}
      .initial {{ background: #6366f1; display: flex; align-items: center;
        justify-content: center; font-size: 1.5rem; font-weight: 700; }}
      .body {{ padding: 1.25rem; }}
      .id {{ font-family: ui-monospace, monospace; font-size: 0.75rem; }}
      h2 {{ font-size: 0.7rem; text-transform: uppercase; color: #64748b;
        margin-top: 1.25rem; }}
      .row {{ display: flex; justify-content: space-between; padding: 0.5rem 0;
        border-bottom: 1px solid #334155; }}
      .label, .muted {{ color: #94a3b8; font-size: 0.75rem; }}
      .parents {{ display: flex; justify-content: space-around; text-align: center; }}
      .qr {{ text-align: center; margin-top: 1.25rem; }}
      .qr img {{ width: 140px; height: 140px; background: #fff; padding: 0.5rem; }}
      footer {{ text-align: center; margin-top: 1rem; }}
    </style>
  </head>
  <body>
    <div class="card">
      <div class="head">
        <div class="tag">{header}</div>
        {photo}
        <h1>{name}</h1>
        <p>{badge}</p>
      </div>
      <div class="body">
        <p class="muted">{id_label}</p>
        <p class="id">{id_value}</p>
        {body}
        <div class="qr">
          <p class="muted">Scan QR to verify identity</p>
          <img src="{qr_src}" alt="QR code" />
        </div>
        <footer>{issued}</footer>
      </div>
    </div>
  </body>
</html>
"""

_NOT_FOUND_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>Profile Not Found</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; background: #0f172a;
        color: #e2e8f0; text-align: center; padding-top: 6rem; }
      h1 { font-size: 4rem; margin: 0; }
    </style>
  </head>
  <body>
    <h1>404</h1>
    <h2>Profile Not Found</h2>
    <p>The student or teacher profile you're looking for doesn't exist
      or may have been removed.</p>
  </body>
</html>
"""
