"""
Image uploads for the portfolio.

Files land in ``<STORAGE_ROOT>/images`` and are served back by the static
mount at ``/storage``. Records only keep the returned URL; nothing here
touches the database.
"""

import logging
import os
import secrets
import time
from io import BytesIO
from typing import Dict, List, Optional

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

STORAGE_ROOT = os.path.abspath(os.getenv("STORAGE_ROOT", "storage"))
IMAGE_DIR = "images"
PUBLIC_PREFIX = "/storage"

MAX_IMAGE_BYTES = 2048 * 1024
ALLOWED_EXTENSIONS = {"jpeg", "png", "jpg", "gif", "webp"}
ALLOWED_MIME_TYPES = {"image/jpeg", "image/png", "image/jpg", "image/gif", "image/webp"}
ALLOWED_FORMATS = {"JPEG", "PNG", "GIF", "WEBP"}
IMAGE_TYPES = ("hero", "profile", "project", "experience")


def image_dir() -> str:
    return os.path.join(STORAGE_ROOT, IMAGE_DIR)


def ensure_storage() -> None:
    os.makedirs(image_dir(), exist_ok=True)


def extension_of(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def detect_format(content: bytes) -> Optional[str]:
    """Image format read from the bytes themselves; None when they are not a readable image."""
    try:
        with Image.open(BytesIO(content)) as img:
            img.verify()
            return img.format
    except (UnidentifiedImageError, OSError, SyntaxError):
        return None


def validate_upload(image_type: Optional[str], filename: Optional[str],
                    content_type: Optional[str], content: bytes) -> Dict[str, List[str]]:
    """Field-keyed errors for an upload; empty when the upload is acceptable.

    The declared MIME type and extension must be allowed, and the bytes
    must actually decode as one of the allowed formats.
    """
    errors: Dict[str, List[str]] = {}

    if not image_type:
        errors["type"] = ["The type field is required."]
    elif image_type not in IMAGE_TYPES:
        errors["type"] = ["The selected type is invalid."]

    image_errors = []
    if filename is None:
        image_errors.append("The image field is required.")
    else:
        if (content_type or "").lower() not in ALLOWED_MIME_TYPES or detect_format(content) not in ALLOWED_FORMATS:
            image_errors.append("The image field must be an image.")
        if extension_of(filename) not in ALLOWED_EXTENSIONS:
            image_errors.append("The image field must be a file of type: jpeg, png, jpg, gif, webp.")
        if len(content) > MAX_IMAGE_BYTES:
            image_errors.append("The image field must not be greater than 2048 kilobytes.")
    if image_errors:
        errors["image"] = image_errors

    return errors


def generate_filename(image_type: str, original_name: str) -> str:
    return f"{image_type}_{int(time.time())}_{secrets.token_hex(7)}.{extension_of(original_name)}"


def public_url(filename: str) -> str:
    return f"{PUBLIC_PREFIX}/{IMAGE_DIR}/{filename}"


def save_image(image_type: str, original_name: str, content: bytes) -> Dict[str, str]:
    """Write the bytes under a fresh name. OSError propagates to the caller."""
    ensure_storage()
    filename = generate_filename(image_type, original_name)
    with open(os.path.join(image_dir(), filename), "wb") as fh:
        fh.write(content)
    logger.info("Stored image %s (%d bytes)", filename, len(content))
    return {
        "filename": filename,
        "url": public_url(filename),
        "path": f"{IMAGE_DIR}/{filename}",
    }


def is_bare_filename(filename: str) -> bool:
    return (
        filename not in (".", "..")
        and "/" not in filename
        and "\\" not in filename
        and os.path.basename(filename) == filename
    )


def delete_image(filename: str) -> bool:
    """Remove ``images/<filename>``; False when there is no such file."""
    path = os.path.join(image_dir(), filename)
    if not os.path.isfile(path):
        return False
    os.remove(path)
    logger.info("Deleted image %s", filename)
    return True
