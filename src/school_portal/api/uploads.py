"""Reading multipart image fields at the HTTP boundary."""

from fastapi import UploadFile

from school_portal.domain.models import ImageUpload
from school_portal.services.images import check_image


async def read_image(file: UploadFile | None, max_bytes: int) -> ImageUpload | None:
    """Return the uploaded image, or None when the field was left empty."""
    if file is None or not file.filename:
        return None
    content = await file.read()
    if not content:
        return None
    upload = ImageUpload(
        filename=file.filename,
        content_type=file.content_type or "",
        content=content,
    )
    check_image(upload, max_bytes)
    return upload
