"""Tests for admin endpoints."""

from uuid import UUID, uuid4

from fastapi.testclient import TestClient

from school_portal.api.app import create_app
from school_portal.containers import AppContainer
from tests.conftest import FakeImageStore, InMemoryStudentRepository

HEADERS = {"X-Admin-Token": "admin-token"}
ASHA_ID = UUID("3fa85f64-5717-4562-b3fc-2c963f66afa6")


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def _create_asha(client: TestClient) -> dict[str, object]:
    response = client.post(
        "/admin/students",
        headers=HEADERS,
        data={"name": "Asha Rao", "class_name": "Grade 5-A", "father_name": "Ravi"},
        files={"photo": ("asha.png", b"png-bytes", "image/png")},
    )
    assert response.status_code == 201
    return response.json()


def test_admin_requires_token(container: AppContainer) -> None:
    client = _client(container)

    assert client.get("/admin/health").status_code == 401
    wrong = client.get("/admin/students", headers={"X-Admin-Token": "no"})
    assert wrong.status_code == 401
    assert client.get("/admin/health", headers=HEADERS).json() == {"status": "ok"}


def test_create_student_scenario(
    container: AppContainer, student_repository: InMemoryStudentRepository
) -> None:
    container.student_service.id_factory = lambda: ASHA_ID
    client = _client(container)

    created = _create_asha(client)

    assert created["id"] == str(ASHA_ID)
    assert created["profile_url"] == (
        "https://app.example/student/3fa85f64-5717-4562-b3fc-2c963f66afa6"
    )
    assert created["photo_url"].endswith(f"/student-photos/{ASHA_ID}/student.png")
    assert ASHA_ID in student_repository.rows
    card = client.get(f"/student/{ASHA_ID}")
    assert "Asha Rao" in card.text
    assert "Grade 5-A" in card.text


def test_create_student_validation_error(container: AppContainer) -> None:
    client = _client(container)

    response = client.post(
        "/admin/students", headers=HEADERS, data={"name": "Asha"}
    )

    assert response.status_code == 422
    assert response.json() == {"detail": "Student class name is required"}


def test_create_student_rejects_non_image(
    container: AppContainer, image_store: FakeImageStore
) -> None:
    client = _client(container)

    response = client.post(
        "/admin/students",
        headers=HEADERS,
        data={"name": "Asha", "class_name": "5-A"},
        files={"photo": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 422
    assert image_store.objects == {}


def test_create_student_rejects_oversized_image(
    container: AppContainer, image_store: FakeImageStore
) -> None:
    container.settings.max_upload_bytes = 8
    client = _client(container)

    response = client.post(
        "/admin/students",
        headers=HEADERS,
        data={"name": "Asha", "class_name": "5-A"},
        files={"photo": ("big.png", b"123456789", "image/png")},
    )

    assert response.status_code == 422
    assert image_store.objects == {}


def test_mother_upload_failure_reports_upload_error(
    container: AppContainer,
    image_store: FakeImageStore,
    student_repository: InMemoryStudentRepository,
) -> None:
    image_store.fail_when_path_contains = "mother"
    client = _client(container)

    response = client.post(
        "/admin/students",
        headers=HEADERS,
        data={"name": "Asha", "class_name": "5-A"},
        files={
            "photo": ("a.png", b"a", "image/png"),
            "mother_photo": ("m.png", b"m", "image/png"),
        },
    )

    assert response.status_code == 502
    assert "Upload failed" in response.json()["detail"]
    assert student_repository.rows == {}


def test_list_search_update_and_delete(container: AppContainer) -> None:
    client = _client(container)
    asha = _create_asha(client)
    client.post(
        "/admin/students",
        headers=HEADERS,
        data={"name": "Vikram", "class_name": "Grade 6-B"},
    )

    listed = client.get("/admin/students", headers=HEADERS).json()["students"]
    searched = client.get(
        "/admin/students", headers=HEADERS, params={"q": "grade 5"}
    ).json()["students"]
    assert [s["name"] for s in listed] == ["Vikram", "Asha Rao"]
    assert [s["id"] for s in searched] == [asha["id"]]

    patched = client.patch(
        f"/admin/students/{asha['id']}",
        headers=HEADERS,
        json={"class_name": "Grade 6-A"},
    )
    assert patched.status_code == 200
    assert patched.json()["class_name"] == "Grade 6-A"
    assert patched.json()["profile_url"] == asha["profile_url"]

    rejected = client.patch(
        f"/admin/students/{asha['id']}", headers=HEADERS, json={"id": str(uuid4())}
    )
    assert rejected.status_code == 422

    deleted = client.delete(f"/admin/students/{asha['id']}", headers=HEADERS)
    assert deleted.json() == {"status": "deleted"}
    missing = client.get(f"/admin/students/{asha['id']}", headers=HEADERS)
    assert missing.status_code == 404
    assert client.get(f"/student/{asha['id']}").status_code == 404


def test_replace_student_photo(
    container: AppContainer, image_store: FakeImageStore
) -> None:
    client = _client(container)
    asha = _create_asha(client)
    folder = f"student-photos/{asha['id']}"

    response = client.put(
        f"/admin/students/{asha['id']}/photos/father",
        headers=HEADERS,
        files={"photo": ("dad.webp", b"dad", "image/webp")},
    )

    assert response.status_code == 200
    assert response.json()["father_photo"].endswith(f"{asha['id']}/father.webp")
    assert image_store.objects[f"{folder}/father.webp"] == b"dad"

    renamed = client.put(
        f"/admin/students/{asha['id']}/photos/father",
        headers=HEADERS,
        files={"photo": ("dad.webp", b"dad-png", "image/png")},
    )

    assert renamed.json()["father_photo"].endswith(f"{asha['id']}/father.png")
    assert sorted(image_store.objects) == [
        f"{folder}/father.png",
        f"{folder}/student.png",
    ]

    again = client.put(
        f"/admin/students/{asha['id']}/photos/father",
        headers=HEADERS,
        files={"photo": ("dad-final.webp", b"dad-final", "image/png")},
    )

    assert again.json()["father_photo"] == renamed.json()["father_photo"]
    assert image_store.objects[f"{folder}/father.png"] == b"dad-final"
    assert len(image_store.objects) == 2



def test_download_qr(container: AppContainer) -> None:
    client = _client(container)
    asha = _create_asha(client)

    first = client.get(f"/admin/students/{asha['id']}/qr", headers=HEADERS)
    second = client.get(f"/admin/students/{asha['id']}/qr", headers=HEADERS)

    assert first.status_code == 200
    assert first.headers["content-type"] == "image/png"
    assert 'filename="qr-asha-rao.png"' in first.headers["content-disposition"]
    assert first.content == second.content


def test_teacher_endpoints(container: AppContainer) -> None:
    client = _client(container)

    created = client.post(
        "/admin/teachers",
        headers=HEADERS,
        data={"name": "Meera Iyer", "qualification": "B.Ed"},
        files={"photo": ("m.jpg", b"m", "image/jpeg")},
    )
    teacher_id = created.json()["id"]
    detail = client.get(f"/admin/teachers/{teacher_id}", headers=HEADERS)
    qr = client.get(f"/admin/teachers/{teacher_id}/qr", headers=HEADERS)
    bad_role = client.put(
        f"/admin/teachers/{teacher_id}/photos/mother",
        headers=HEADERS,
        files={"photo": ("m.jpg", b"m", "image/jpeg")},
    )

    assert created.status_code == 201
    assert detail.json()["profile_url"] == f"https://app.example/teacher/{teacher_id}"
    assert qr.status_code == 200
    assert bad_role.status_code == 422
    assert client.get(f"/teacher/{teacher_id}").status_code == 200


def test_dashboard_counts(container: AppContainer) -> None:
    client = _client(container)
    _create_asha(client)

    response = client.get("/admin/dashboard", headers=HEADERS)

    assert response.json() == {"students": 1, "teachers": 0}


def test_admin_ui_is_public_shell(container: AppContainer) -> None:
    response = _client(container).get("/admin/ui")

    assert response.status_code == 200
    assert "X-Admin-Token" in response.text
