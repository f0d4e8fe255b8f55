"""Tests for identifier issuance and profile paths."""

from uuid import UUID

from school_portal.domain.identity import new_id, parse_id
from school_portal.domain.models import EntityKind
from school_portal.domain.profiles import profile_path, qr_payload

ASHA_ID = UUID("3fa85f64-5717-4562-b3fc-2c963f66afa6")


def test_new_id_is_random_version_4() -> None:
    first = new_id()
    second = new_id()

    assert first.version == 4
    assert first != second


def test_parse_id_rejects_malformed_segment() -> None:
    assert parse_id(str(ASHA_ID)) == ASHA_ID
    assert parse_id("not-a-uuid") is None


def test_profile_path_and_payload() -> None:
    assert profile_path(EntityKind.STUDENT, ASHA_ID) == f"/student/{ASHA_ID}"
    assert (
        qr_payload(EntityKind.TEACHER, ASHA_ID, "https://app.example/")
        == f"https://app.example/teacher/{ASHA_ID}"
    )
