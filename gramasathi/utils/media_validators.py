"""
Image upload validation: allowed content types, file extensions and sizes.
"""

import re
from typing import Tuple

ALLOWED_IMAGE_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
    }
)

ALLOWED_IMAGE_EXTS = frozenset({".jpg", ".jpeg", ".png", ".webp"})

# Campaign and update images
MAX_SIZE_CAMPAIGN_IMAGE = 5 * 1024 * 1024
# Profile pictures
MAX_SIZE_PROFILE_IMAGE = 2 * 1024 * 1024

# Filename: alphanumeric, spaces, dots, hyphens, underscores. Reject path traversal.
_FILENAME_RE = re.compile(r"^[a-zA-Z0-9 ._-]{1,200}\.[a-zA-Z0-9]{1,10}$")


def validate_content_type(content_type: str | None) -> Tuple[bool, str | None]:
    """
    Returns (valid, error_message). Browsers always send a type for file parts,
    so a missing one is rejected.
    """
    if not content_type or not content_type.strip():
        return False, "content type required"
    ct = content_type.strip().lower().split(";")[0].strip()
    if ct not in ALLOWED_IMAGE_TYPES:
        return False, "Only images are allowed"
    return True, None


def validate_filename(filename: str | None) -> Tuple[bool, str | None]:
    if not filename or not filename.strip():
        return False, "filename required"
    fn = filename.strip()
    if ".." in fn or "/" in fn or "\\" in fn:
        return False, "invalid filename"
    if not _FILENAME_RE.match(fn):
        return False, "filename must be alphanumeric with valid extension (e.g. photo.jpg)"
    ext = "." + fn.rsplit(".", 1)[-1].lower()
    if ext not in ALLOWED_IMAGE_EXTS:
        return False, "Only images are allowed"
    return True, None


def validate_size(size_bytes: int, max_bytes: int) -> Tuple[bool, str | None]:
    if size_bytes <= 0:
        return False, "empty file"
    if size_bytes > max_bytes:
        return False, f"file too large (max {max_bytes // (1024 * 1024)}MB)"
    return True, None
