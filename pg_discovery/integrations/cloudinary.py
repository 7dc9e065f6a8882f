"""Cloudinary image upload over its REST API.

Uploads are unsigned when an upload preset is configured, otherwise signed
with the API key/secret (SHA-1 over the sorted parameters plus the secret).
When Cloudinary is not configured callers fall back to ``DEFAULT_IMAGES``.
"""

import hashlib
import logging
import time

import httpx

from pg_discovery.config import settings
from pg_discovery.exceptions import InvalidOperationError, UpstreamServiceError

logger = logging.getLogger(__name__)

IMAGE_TYPES = ("pgThumbnail", "pgHero", "roomImage", "squareProfile", "galleryImage")
IMAGE_TYPE_ALIASES = {"pgGallery": "galleryImage"}

# Target dimensions per image type, applied as an incoming transformation.
IMAGE_DIMENSIONS = {
    "pgThumbnail": (400, 300),
    "pgHero": (1200, 675),
    "roomImage": (600, 400),
    "squareProfile": (300, 300),
    "galleryImage": (1200, 800),
}

_UNSPLASH_PLACEHOLDER = "https://images.unsplash.com/photo-1502672260266-1c1ef2d93688"
DEFAULT_IMAGES = {
    image_type: f"{_UNSPLASH_PLACEHOLDER}?w={width}&h={height}&fit=crop&q=80"
    for image_type, (width, height) in IMAGE_DIMENSIONS.items()
}

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def normalize_image_type(image_type: str | None) -> str:
    """Resolve aliases and reject unknown image types."""
    resolved = IMAGE_TYPE_ALIASES.get(image_type or "", image_type)
    if resolved not in IMAGE_TYPES:
        raise InvalidOperationError(
            f"Invalid or missing image type. Use one of: {', '.join(IMAGE_TYPES)}"
        )
    return resolved


def validate_image_file(content_type: str | None, size: int) -> None:
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidOperationError("Invalid file type. Only JPEG, PNG, WebP and GIF images are allowed")
    if size == 0:
        raise InvalidOperationError("Uploaded file is empty")
    if size > MAX_UPLOAD_BYTES:
        raise InvalidOperationError("File too large. Maximum size is 10MB")


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """Cloudinary request signature for signed uploads."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in ("", None))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()


def _upload_fields(image_type: str) -> dict[str, str]:
    width, height = IMAGE_DIMENSIONS[image_type]
    fields = {
        "folder": settings.cloudinary_folder,
        "transformation": f"c_fill,w_{width},h_{height},q_auto,f_auto",
    }
    if settings.cloudinary_upload_preset:
        fields["upload_preset"] = settings.cloudinary_upload_preset
        return fields

    fields["timestamp"] = str(int(time.time()))
    fields["signature"] = sign_params(fields, settings.cloudinary_api_secret)
    fields["api_key"] = settings.cloudinary_api_key
    return fields


async def upload_image(
    content: bytes,
    filename: str,
    content_type: str,
    image_type: str,
    client: httpx.AsyncClient | None = None,
) -> dict[str, str]:
    """Upload an image and return ``{"url", "public_id"}``.

    Raises:
        UpstreamServiceError: On transport errors or a non-2xx response.
    """
    url = f"{settings.cloudinary_api_base_url.rstrip('/')}/v1_1/{settings.cloudinary_cloud_name}/image/upload"
    files = {"file": (filename, content, content_type)}
    data = _upload_fields(image_type)

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=30.0) as owned_client:
                response = await owned_client.post(url, data=data, files=files)
        else:
            response = await client.post(url, data=data, files=files)
    except httpx.HTTPError as exc:
        logger.error("Cloudinary upload failed for %s: %s", filename, exc)
        raise UpstreamServiceError("Image upload failed. Please try again.") from exc

    if not response.is_success:
        logger.error(
            "Cloudinary upload rejected: status=%s body=%s", response.status_code, response.text[:500]
        )
        raise UpstreamServiceError("Image upload failed. Please try again.")

    payload = response.json()
    logger.info("Uploaded %s as %s (%s)", filename, payload.get("public_id"), image_type)
    return {"url": payload["secure_url"], "public_id": payload["public_id"]}
