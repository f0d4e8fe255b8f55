"""Field handling shared by the student and teacher services."""

from collections.abc import Iterable, Mapping

from school_portal.domain.errors import ValidationError


def clean_fields(
    payload: Mapping[str, object], allowed: Iterable[str]
) -> dict[str, str]:
    """Trim text values and reject attributes the record does not own."""
    allowed_set = set(allowed)
    unknown = sorted(set(payload) - allowed_set)
    if unknown:
        raise ValidationError(f"Unknown or read-only field(s): {', '.join(unknown)}")
    cleaned: dict[str, str] = {}
    for key, value in payload.items():
        cleaned[key] = "" if value is None else str(value).strip()
    return cleaned


def require_fields(
    values: Mapping[str, str], required: Mapping[str, str], kind: str
) -> None:
    """Raise when a required field is blank.

    `required` maps field names to the label used in the error message.
    """
    for field_name, label in required.items():
        if not values.get(field_name, "").strip():
            raise ValidationError(f"{kind.capitalize()} {label} is required")


def matches_query(query: str | None, values: Iterable[str]) -> bool:
    """Return true when any value contains the query, ignoring case."""
    if not query or not query.strip():
        return True
    needle = query.strip().lower()
    return any(needle in (value or "").lower() for value in values)
