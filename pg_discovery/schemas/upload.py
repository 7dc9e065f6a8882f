"""Response schema for image uploads."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    success: bool = True
    url: str
    public_id: str | None = None
    filename: str
    image_type: str
    placeholder: bool = False
    message: str | None = None
