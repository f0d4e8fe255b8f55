"""Tests for the public identity card pages."""

import asyncio
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from school_portal.api.app import create_app
from school_portal.containers import AppContainer
from school_portal.domain.errors import NotFoundError
from school_portal.domain.models import EntityKind

ASHA_ID = UUID("3fa85f64-5717-4562-b3fc-2c963f66afa6")


def _add_asha(container: AppContainer) -> None:
    container.student_service.id_factory = lambda: ASHA_ID
    asyncio.run(
        container.student_service.create(
            {
                "name": "Asha Rao",
                "class_name": "Grade 5-A",
                "school_name": "Green Valley School",
                "father_name": "Ravi Rao",
                "mother_name": "Lata Rao",
            }
        )
    )


def test_present_returns_card_with_qr(container: AppContainer) -> None:
    _add_asha(container)

    card = container.profile_service.present(EntityKind.STUDENT, ASHA_ID)

    assert card.record.name == "Asha Rao"
    assert card.qr.payload == (
        "https://app.example/student/3fa85f64-5717-4562-b3fc-2c963f66afa6"
    )
    assert card.issued is not None


def test_present_missing_raises_not_found(container: AppContainer) -> None:
    with pytest.raises(NotFoundError):
        container.profile_service.present(EntityKind.TEACHER, uuid4())


def test_student_card_page(container: AppContainer) -> None:
    _add_asha(container)
    client = TestClient(create_app(container))

    response = client.get(f"/student/{ASHA_ID}")

    assert response.status_code == 200
    assert "Asha Rao" in response.text
    assert "Grade 5-A" in response.text
    assert str(ASHA_ID).upper() in response.text
    assert "data:image/png;base64," in response.text


def test_card_escapes_html(container: AppContainer) -> None:
    teacher = asyncio.run(
        container.teacher_service.create(
            {"name": "<script>x</script>", "qualification": "B.Ed"}
        )
    )
    client = TestClient(create_app(container))

    response = client.get(f"/teacher/{teacher.id}")

    assert response.status_code == 200
    assert "<script>x</script>" not in response.text
    assert "&lt;script&gt;" in response.text


def test_unknown_profile_is_404_page(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    missing = client.get(f"/teacher/{uuid4()}")
    malformed = client.get("/student/not-a-uuid")

    assert missing.status_code == 404
    assert "Profile Not Found" in missing.text
    assert malformed.status_code == 404


def test_student_id_is_not_a_teacher_profile(container: AppContainer) -> None:
    _add_asha(container)
    client = TestClient(create_app(container))

    response = client.get(f"/teacher/{ASHA_ID}")

    assert response.status_code == 404
