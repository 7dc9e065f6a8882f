"""Image upload to Cloudinary, with placeholder images when it is not configured."""

import logging

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import JSONResponse

from pg_discovery.api.deps import get_current_active_user, http_error
from pg_discovery.config import settings
from pg_discovery.exceptions import InvalidOperationError, UpstreamServiceError
from pg_discovery.integrations import cloudinary
from pg_discovery.models.user import User
from pg_discovery.schemas.upload import UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an image",
    responses={200: {"model": UploadResponse, "description": "Placeholder image (uploads not configured)"}},
)
async def upload_image(
    image_type: str | None = Query(None, alias="imageType"),
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_active_user),
):
    """Upload ``file`` as one of the known image types.

    Returns 201 with the hosted URL, or 200 with a placeholder URL when image
    hosting is not configured. Upload failures return 502 together with a
    ``fallback_url`` the client can display instead.
    """
    content = await file.read()
    try:
        resolved_type = cloudinary.normalize_image_type(image_type)
        cloudinary.validate_image_file(file.content_type, len(content))
    except InvalidOperationError as exc:
        raise http_error(exc) from None

    filename = file.filename or "upload"
    if not settings.cloudinary_configured:
        logger.warning("Cloudinary not configured, returning placeholder for %s", resolved_type)
        placeholder = UploadResponse(
            url=cloudinary.DEFAULT_IMAGES[resolved_type],
            filename=filename,
            image_type=resolved_type,
            placeholder=True,
            message="Image hosting is not configured; using a placeholder image",
        )
        return JSONResponse(status_code=status.HTTP_200_OK, content=placeholder.model_dump(mode="json"))

    try:
        uploaded = await cloudinary.upload_image(content, filename, file.content_type, resolved_type)
    except UpstreamServiceError as exc:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "success": False,
                "message": exc.message,
                "code": exc.code,
                "fallback_url": cloudinary.DEFAULT_IMAGES[resolved_type],
            },
        )

    logger.info("User %s uploaded %s", current_user.id, uploaded["public_id"])
    return UploadResponse(
        url=uploaded["url"],
        public_id=uploaded["public_id"],
        filename=filename,
        image_type=resolved_type,
        message="Image uploaded successfully",
    )
