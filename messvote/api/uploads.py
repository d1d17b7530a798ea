"""Request helpers shared by the routers: form model parsing and image uploads."""
from typing import Optional, Tuple, Type, TypeVar

from fastapi import UploadFile
from pydantic import BaseModel, ValidationError as PydanticValidationError

from messvote.utilities.config import MAX_PHOTO_BYTES
from messvote.utilities.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def parse_form(model: Type[M], **fields) -> M:
    """Validate form fields with a pydantic model, reporting the first problem."""
    try:
        return model(**fields)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise ValidationError(f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid input"))


async def read_image(upload: Optional[UploadFile]) -> Optional[Tuple[str, bytes]]:
    """(filename, content) of an uploaded image, or None when no file was sent."""
    if upload is None or not upload.filename:
        return None
    if upload.content_type and not upload.content_type.startswith("image/"):
        raise ValidationError("Only image uploads are accepted")
    content = await upload.read()
    if not content:
        return None
    if len(content) > MAX_PHOTO_BYTES:
        raise ValidationError(f"Image must be smaller than {MAX_PHOTO_BYTES // (1024 * 1024)}MB")
    return upload.filename, content
